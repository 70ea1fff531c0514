# aad/core/var.py
from __future__ import annotations
from typing import Any, Optional

from .values import Value, ValueKind, kind_of


class Var:
    """
    Handle on one slot of a Tape.

    Attributes
    ----------
    val : numpy.float64 | numpy.complex128 | numpy.ndarray
        Immutable primal value recorded in the slot.
    index : int
        Slot number on the owning tape.
    tape : Tape
        Tape that owns the slot. Operators record onto this tape.
    name : Optional[str]
        Optional debug/pretty-print name.
    """

    __slots__ = ("val", "index", "tape", "name")

    # NumPy scalars on the left of an operator return NotImplemented,
    # so Python falls through to our reflected methods.
    __array_ufunc__ = None

    def __init__(self, val: Value, index: int, tape: Any, name: Optional[str] = None):
        object.__setattr__(self, "val", val)
        object.__setattr__(self, "index", index)
        object.__setattr__(self, "tape", tape)
        object.__setattr__(self, "name", name)

    def __setattr__(self, key, value):
        raise AttributeError("Var is immutable; record a new operation instead")

    @property
    def kind(self) -> ValueKind:
        return kind_of(self.val)

    def __repr__(self):
        label = f", name={self.name!r}" if self.name else ""
        return f"Var({self.val!r}, slot={self.index}{label})"

    def _record(self, op_tag, *operands, **params):
        return self.tape.record(op_tag, *operands, **params)[0]

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        return self._record("add", self, other)

    def __radd__(self, other):
        return self._record("add", other, self)

    def __sub__(self, other):
        return self._record("sub", self, other)

    def __rsub__(self, other):
        return self._record("sub", other, self)

    def __mul__(self, other):
        return self._record("mul", self, other)

    def __rmul__(self, other):
        return self._record("mul", other, self)

    def __truediv__(self, other):
        return self._record("div", self, other)

    def __rtruediv__(self, other):
        return self._record("div", other, self)

    def __neg__(self):
        return self._record("neg", self)

    def __pow__(self, other):
        return self._record("pow", self, other)

    def __rpow__(self, other):
        return self._record("pow", other, self)

    # Vector access: each component read is its own recorded primitive
    def __len__(self):
        if self.kind is not ValueKind.VECTOR:
            raise TypeError("len() of a scalar Var")
        return len(self.val)

    def __getitem__(self, index: int):
        return self._record("getitem", self, index=index)

    def __iter__(self):
        return (self[i] for i in range(len(self)))

# aad/core/values.py
"""
Value kinds handled by the tape.

Every operand and cotangent is one of three tagged variants:

    REAL    : numpy.float64
    COMPLEX : numpy.complex128
    VECTOR  : 1-D read-only numpy.float64 array

Rule lookup is keyed by (op_tag, ValueKind), so classification happens once
per operand at record time instead of inside each pullback.
"""
from __future__ import annotations

from enum import Enum
from numbers import Number
from typing import Any, Sequence, Union

import numpy as np

from .config import ADConfig
from .errors import ShapeMismatch

Value = Union[np.float64, np.complex128, np.ndarray]


class ValueKind(Enum):
    REAL = "real"
    COMPLEX = "complex"
    VECTOR = "vector"

    @property
    def is_scalar(self) -> bool:
        return self is not ValueKind.VECTOR


def kind_of(value: Any) -> ValueKind:
    """Classify a number or 1-D real sequence; raise TypeError for anything else."""
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("booleans are not differentiable values")
    if isinstance(value, (np.floating, np.integer)):
        return ValueKind.REAL
    if isinstance(value, np.complexfloating):
        return ValueKind.COMPLEX
    if isinstance(value, (list, tuple, np.ndarray)):
        arr = np.asarray(value)
        if arr.ndim == 0:
            return kind_of(arr.item())
        if arr.ndim != 1:
            raise TypeError(f"vectors must be 1-D, got an array of shape {arr.shape}")
        if arr.size and arr.dtype.kind not in "iuf":
            raise TypeError(f"vectors must hold reals, got dtype {arr.dtype}")
        return ValueKind.VECTOR
    if isinstance(value, complex):
        return ValueKind.COMPLEX
    if isinstance(value, Number):
        return ValueKind.REAL
    raise TypeError(
        f"expected a real, complex or 1-D real vector value, but got {type(value)}"
    )


def as_value(value: Any) -> Value:
    """
    Immutable 64-bit snapshot of `value`.

    Vectors are copied and frozen so that a pullback closing over them can
    never observe a later mutation of the caller's array.
    """
    kind = kind_of(value)
    if kind is ValueKind.VECTOR:
        arr = np.array(value, dtype=ADConfig.REAL_DTYPE)
        arr.setflags(write=False)
        return arr
    if isinstance(value, np.ndarray):
        value = value.item()
    if kind is ValueKind.COMPLEX:
        return ADConfig.COMPLEX_DTYPE(value)
    return ADConfig.REAL_DTYPE(value)


def promote(op_tag: str, values: Sequence[Value]) -> ValueKind:
    """
    Common kind of a list of operands, following ordinary arithmetic:
    real + complex -> complex; vectors only combine with equal-length vectors.
    """
    kinds = [kind_of(v) for v in values]
    if all(k.is_scalar for k in kinds):
        return ValueKind.COMPLEX if ValueKind.COMPLEX in kinds else ValueKind.REAL
    if any(k.is_scalar for k in kinds):
        raise ShapeMismatch(
            f"{op_tag}: cannot combine scalar and vector operands "
            f"({', '.join(k.value for k in kinds)})"
        )
    lengths = {len(v) for v in values}
    if len(lengths) > 1:
        raise ShapeMismatch(f"{op_tag}: vector lengths differ {sorted(lengths)}")
    return ValueKind.VECTOR


def zero_like(value: Value) -> Value:
    """Zero cotangent with the kind and shape of `value`."""
    if isinstance(value, np.ndarray):
        return np.zeros_like(value)
    return type(value)(0)

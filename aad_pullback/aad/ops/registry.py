# aad/ops/registry.py
"""
Static rule table for primitive operations.

Each entry is keyed by (op_tag, ValueKind) and carries the forward function
together with a pullback factory. A factory is called once per recorded
invocation with the operand snapshots (and the result) and returns a fresh
closure, so two invocations of the same primitive never share a pullback.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from ..core.errors import ShapeMismatch, UnsupportedOperation
from ..core.values import Value, ValueKind, kind_of, promote
from ..core.var import Var

REAL, COMPLEX, VECTOR = ValueKind.REAL, ValueKind.COMPLEX, ValueKind.VECTOR
SCALARS = (REAL, COMPLEX)
ALL_KINDS = (REAL, COMPLEX, VECTOR)


@dataclass(frozen=True)
class Rule:
    """
    op_tag   : operation name
    kind     : operand kind this rule is defined for
    arity    : number of operands, None for variadic primitives
    forward  : f(*values, **params) -> result value
    pullback : factory(*values, out=result, **params) -> closure t -> tuple
    """
    op_tag: str
    kind: ValueKind
    arity: Optional[int]
    forward: Callable
    pullback: Callable


_RULES: Dict[Tuple[str, ValueKind], Rule] = {}
_ARITY: Dict[str, Optional[int]] = {}
# Kind used for table lookup; defaults to arithmetic promotion of the operands
_KEYS: Dict[str, Callable[[str, Sequence[Value]], ValueKind]] = {}


def defrule(op_tag: str, kinds: Iterable[ValueKind], *, forward: Callable,
            pullback: Callable, arity: Optional[int] = 1,
            key: Callable[[str, Sequence[Value]], ValueKind] = None,
            replace: bool = False):
    """
    Register `forward`/`pullback` for `op_tag` under each of `kinds`.

    This is also how user code adds its own primitives; `ops.apply` and
    `Tape.record` then treat them like the built-in ones. Registering an
    existing (op_tag, kind) pair raises ValueError unless `replace=True`.

    Example
    -------
    def _cube_pb(x, out):
        d = 3 * x * x
        def pullback(t):
            return (d * t,)
        return pullback

    defrule("cube", (REAL, VECTOR), forward=lambda x: x ** 3, pullback=_cube_pb)
    y = apply("cube", x)
    """
    kinds = tuple(kinds)
    if op_tag in _ARITY and _ARITY[op_tag] != arity:
        raise ValueError(f"{op_tag}: conflicting arity {arity} vs {_ARITY[op_tag]}")
    taken = [k.value for k in kinds if (op_tag, k) in _RULES]
    if taken and not replace:
        raise ValueError(f"{op_tag}: rule already registered for kind(s) {taken}")
    _ARITY[op_tag] = arity
    if key is not None:
        _KEYS[op_tag] = key
    for kind in kinds:
        _RULES[(op_tag, kind)] = Rule(op_tag, kind, arity, forward, pullback)


def supported_ops() -> Tuple[str, ...]:
    return tuple(sorted(_ARITY))


def lookup(op_tag: str, values: Sequence[Value]) -> Rule:
    """
    Resolve the rule for `op_tag` applied to `values`.

    Raises
    ------
    UnsupportedOperation : op_tag has no rule at all
    TypeError            : wrong number of operands
    ShapeMismatch        : operand kinds/lengths do not fit any rule
    """
    if op_tag not in _ARITY:
        raise UnsupportedOperation(op_tag)
    arity = _ARITY[op_tag]
    if arity is not None and len(values) != arity:
        raise TypeError(f"{op_tag} takes {arity} operand(s), got {len(values)}")
    if arity is None and not values:
        raise TypeError(f"{op_tag} needs at least one operand")

    kind = _KEYS.get(op_tag, promote)(op_tag, values)
    rule = _RULES.get((op_tag, kind))
    if rule is None:
        kinds = ", ".join(kind_of(v).value for v in values)
        raise ShapeMismatch(f"{op_tag} is not defined for operands of kind ({kinds})")
    return rule


def uniform_kind(op_tag: str, values: Sequence[Value]) -> ValueKind:
    """Lookup key for primitives whose operands must all share one kind."""
    kinds = {kind_of(v) for v in values}
    if len(kinds) != 1:
        raise ShapeMismatch(
            f"{op_tag}: operands must share one kind, got {sorted(k.value for k in kinds)}"
        )
    return kinds.pop()


def apply(op_tag: str, *operands, **params):
    """Record `op_tag` on the tape of the first Var operand and return the result Var."""
    for operand in operands:
        if isinstance(operand, Var):
            return operand.tape.record(op_tag, *operands, **params)[0]
    raise TypeError(
        f"{op_tag}: at least one operand must be a Var; "
        f"use Tape.record() to apply a primitive to constants"
    )

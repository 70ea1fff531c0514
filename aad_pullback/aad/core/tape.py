# aad/core/tape.py
from __future__ import annotations
import logging
from typing import Any, Callable, List, Optional, Tuple

from .errors import TapeConsistencyError
from .node import Node
from .values import Value, as_value
from .var import Var
from ..ops.registry import lookup

logger = logging.getLogger(__name__)


class Tape:
    """
    Explicit, caller-owned record of one forward pass.

    `values` holds one immutable snapshot per slot (inputs and results);
    `nodes` holds one Node per executed primitive, in execution order.
    Nothing is shared between tapes, so independent tapes may be recorded
    and back-propagated on different threads.
    """
    def __init__(self):
        self.values: List[Value] = []
        self.names: List[Optional[str]] = []
        self.nodes: List[Node] = []
        self.inputs: List[int] = []

    def __len__(self):
        return len(self.nodes)

    def reset(self):
        self.values.clear()
        self.names.clear()
        self.nodes.clear()
        self.inputs.clear()

    def _new_slot(self, value: Value, name: Optional[str]) -> Var:
        self.values.append(value)
        self.names.append(name)
        return Var(value, len(self.values) - 1, self, name=name)

    def variable(self, value: Any, name: Optional[str] = None) -> Var:
        """Register a differentiation input and return its Var."""
        var = self._new_slot(as_value(value), name)
        self.inputs.append(var.index)
        return var

    def record(self, op_tag: str, *operands, **params) -> Tuple[Var, Callable]:
        """
        Evaluate primitive `op_tag` on `operands` and append its pullback.

        Operands are Vars on this tape or plain values (constants, whose
        cotangents are dropped). Keyword `params` are static arguments of the
        primitive, e.g. `index` for "getitem".

        Returns (result Var, pullback). Nothing is appended if the operation
        is unsupported, the operands do not fit, or evaluation fails.
        """
        slots: List[Optional[int]] = []
        values: List[Value] = []
        for operand in operands:
            if isinstance(operand, Var):
                if operand.tape is not self:
                    raise TapeConsistencyError(
                        f"{op_tag}: operand {operand!r} belongs to a different tape"
                    )
                slots.append(operand.index)
                values.append(operand.val)
            else:
                slots.append(None)
                values.append(as_value(operand))

        rule = lookup(op_tag, values)
        out_val = as_value(rule.forward(*values, **params))
        pullback = rule.pullback(*values, out=out_val, **params)

        out = self._new_slot(out_val, None)
        self.nodes.append(Node(op_tag=op_tag, parents=tuple(slots), out=out.index,
                               pullback=pullback))
        logger.debug("recorded %s%s -> slot %d", op_tag, tuple(slots), out.index)
        return out, pullback


def record_op(tape: Tape, op_tag: str, *operands, **params) -> Tuple[Var, Callable]:
    """Functional form of Tape.record()."""
    return tape.record(op_tag, *operands, **params)

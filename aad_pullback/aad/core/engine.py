# aad/core/engine.py
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import TapeConsistencyError
from .tape import Tape
from .values import Value, ValueKind, as_value, kind_of, zero_like
from .var import Var

logger = logging.getLogger(__name__)


def check_seed(out_value: Value, seed: Any) -> Value:
    """
    Validate a seed cotangent against the value it is attached to.

    Scalar outputs take a real or complex scalar seed; vector outputs take a
    real vector of the same length. Anything else is a TapeConsistencyError,
    never truncated or padded.
    """
    try:
        seed_kind = kind_of(seed)
    except TypeError as exc:
        raise TapeConsistencyError(f"invalid seed cotangent: {exc}") from exc
    out_kind = kind_of(out_value)

    if out_kind.is_scalar != seed_kind.is_scalar:
        raise TapeConsistencyError(
            f"seed of kind {seed_kind.value} does not match output of kind {out_kind.value}"
        )
    seed = as_value(seed)
    if out_kind is ValueKind.VECTOR and seed.shape != out_value.shape:
        raise TapeConsistencyError(
            f"seed length {len(seed)} does not match output length {len(out_value)}"
        )
    return seed


def _slot_of(tape: Tape, var: Var) -> int:
    if not isinstance(var, Var):
        raise TypeError(f"differentiation targets must be Vars, got {type(var)}")
    if var.tape is not tape:
        raise TapeConsistencyError(f"{var!r} belongs to a different tape")
    return var.index


def backpropagate(tape: Tape, seed: Any = 1.0,
                  wrt: Union[None, Var, Sequence[Var]] = None,
                  output: Optional[Var] = None):
    """
    Run a single reverse pass over `tape`.

    Args:
        tape:   the tape recorded during the forward pass.
        seed:   cotangent of the output (1.0 for a scalar output).
        wrt:    differentiation target(s). None -> every input registered with
                `tape.variable`, returned as a tuple; a Var -> its cotangent;
                a sequence of Vars -> a tuple in the same order.
        output: the Var to seed; defaults to the result of the last node.

    Notes:
        - Nodes are visited strictly last-to-first. Each pullback receives the
          running cotangent of its node's output.
        - Fan-out: cotangents arriving at an already-visited slot are summed,
          never overwritten.
        - Nodes whose output never receives a cotangent are passed over
          without calling their pullback (order is unaffected).
        - The tape itself is not modified, so it may be walked again.
    """
    if output is not None:
        out_slot = _slot_of(tape, output)
    elif tape.nodes:
        out_slot = tape.nodes[-1].out
    else:
        raise TapeConsistencyError("cannot backpropagate through an empty tape")

    adjoints: Dict[int, Value] = {out_slot: check_seed(tape.values[out_slot], seed)}
    logger.debug("backpropagating %d nodes from slot %d", len(tape.nodes), out_slot)

    # Backward sweep
    for node in reversed(tape.nodes):
        t = adjoints.get(node.out)
        if t is None:
            continue  # dead branch, its contribution is structurally zero
        cotangents = node.pullback(t)
        if len(cotangents) != len(node.parents):
            raise TapeConsistencyError(
                f"{node.op_tag} pullback returned {len(cotangents)} cotangents "
                f"for {len(node.parents)} operands"
            )
        for slot, ct in zip(node.parents, cotangents):
            if slot is None:
                continue
            # Accumulate: adj[p] += contribution (new object, pullbacks may alias t)
            adjoints[slot] = adjoints[slot] + ct if slot in adjoints else ct

    def collect(slot):
        ct = adjoints.get(slot)
        if ct is None:
            return zero_like(tape.values[slot])
        # add/sub pullbacks hand the same array to both operands
        return ct.copy() if isinstance(ct, np.ndarray) else ct

    if wrt is None:
        return tuple(collect(slot) for slot in tape.inputs)
    if isinstance(wrt, Var):
        return collect(_slot_of(tape, wrt))
    return tuple(collect(_slot_of(tape, v)) for v in wrt)


def compose_pullbacks(pullbacks: Iterable[Callable], seed: Any = 1.0,
                      reverse: bool = True):
    """
    Fold a chain of single-operand pullbacks.

    reverse=True is back-propagation, p_1(p_2(...p_n(seed))); reverse=False
    applies them in recording order, p_n(...p_1(seed)), which agrees for scalar
    chains because each pullback is multiplication by a scalar derivative.
    """
    pullbacks = list(pullbacks)
    if reverse:
        pullbacks.reverse()
    t = seed
    for p in pullbacks:
        cotangents = p(t)
        if len(cotangents) != 1:
            raise TapeConsistencyError(
                f"chain composition needs single-operand pullbacks, got {len(cotangents)} cotangents"
            )
        t = cotangents[0]
    return t


def tape_pullbacks(tape: Tape) -> Tuple[Callable, ...]:
    """The recorded pullbacks, in recording order."""
    return tuple(node.pullback for node in tape.nodes)

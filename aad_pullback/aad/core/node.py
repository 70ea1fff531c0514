# aad/core/node.py
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

@dataclass(frozen=True)
class Node:
    """
    One entry on the tape produced by a primitive operation.

    Attributes
    ----------
    op_tag : str
        Operation name (e.g., "add", "mul", "sin").
    parents: Tuple[Optional[int], ...]
        Slot of each operand in call order; None marks a constant operand
        whose cotangent is dropped.
    out    : int
        Slot holding the result.
    pullback : Callable
        Maps a cotangent of `out` to a tuple with one cotangent per operand.
        It closes over the operand values of this particular invocation.
    """
    op_tag: str
    parents: Tuple[Optional[int], ...]
    out: int
    pullback: Callable

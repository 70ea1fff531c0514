"""
Iterated vector map

    f(x, y, z) = [cos(x y) + z, z y - sin(x), x + y + z]
    iteratef(v, n) = sum(f(f(...f(v))))      (n applications)

The gradient of iteratef is recovered by back-propagation through vector
pullbacks p_k(t) = J_f(v_k)^T t, seeded by the pullback of `sum`.
"""

from typing import Callable, List, Tuple

import numpy as np

from aad_pullback.aad import Tape, Var, backpropagate, ops, pullback


def f(v: Var) -> Var:
    x, y, z = v
    return ops.stack(ops.cos(x * y) + z, z * y - ops.sin(x), x + y + z)


def f_numeric(v: np.ndarray) -> np.ndarray:
    x, y, z = v
    return np.array([np.cos(x * y) + z, z * y - np.sin(x), x + y + z])


def f_jacobian(v: np.ndarray) -> np.ndarray:
    x, y, z = v
    return np.array([
        [-y * np.sin(x * y), -x * np.sin(x * y), 1.0],
        [-np.cos(x),         z,                  y  ],
        [1.0,                1.0,                1.0],
    ])


def iteratef(v, n: int) -> float:
    v = np.asarray(v, dtype=float)
    for _ in range(n):
        v = f_numeric(v)
    return float(np.sum(v))


def iteratef_pullbacks(v0, n: int) -> Tuple[float, List[Callable], Callable]:
    """
    Collect one composite pullback per application of f (each traced on its
    own tape) plus the pullback of the final sum.
    """
    pullbacks = []
    r = v0
    for _ in range(n):
        r, p = pullback(f, r)
        pullbacks.append(p)
    ret, sum_pullback = pullback(ops.sum, r)
    return ret, pullbacks, sum_pullback


def iteratef_gradient(v0, n: int) -> Tuple[float, np.ndarray]:
    """Back-propagate 1 through sum, then through each p_k from last to first."""
    ret, pullbacks, sum_pullback = iteratef_pullbacks(v0, n)
    reverse_grad = sum_pullback(1.0)[0]  # now a 3-vector
    for p in reversed(pullbacks):
        reverse_grad = p(reverse_grad)[0]
    return ret, reverse_grad


def iteratef_gradient_tape(v0, n: int) -> Tuple[float, np.ndarray]:
    """Same gradient, recorded primitive by primitive on a single tape."""
    tape = Tape()
    v = tape.variable(v0, name="v")
    for _ in range(n):
        v = f(v)
    ret = ops.sum(v)
    return ret.val, backpropagate(tape, 1.0)[0]

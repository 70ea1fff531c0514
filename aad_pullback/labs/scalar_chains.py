"""
Scalar pullback chains

Each scenario records a handful of scalar primitives on a fresh tape and
recovers the derivative either by back-propagation (reverse fold) or by
forward-propagation (forward fold) of the recorded pullbacks.

    cos(sqrt(exp(x)))             three-step chain
    manysin(n, x)                 sin applied n times
    cos(sqrt(x) * exp(sin(x)))    x used twice (fan-out)
"""

from typing import Callable, Tuple

import numpy as np

from aad_pullback.aad import Tape, Var, backpropagate, compose_pullbacks, grad, ops
from aad_pullback.aad.core.engine import tape_pullbacks


# ----------------------------- cos(sqrt(exp(x))) ----------------------------- #
def cos_sqrt_exp_pullbacks(x: float) -> Tuple[float, Tuple[Callable, ...], Tape]:
    """Record exp, sqrt, cos in turn; returns (value, (p1, p2, p3), tape)."""
    tape = Tape()
    xv = tape.variable(x, name="x")
    y, p1 = tape.record("exp", xv)
    z, p2 = tape.record("sqrt", y)  # y is exp(x)
    w, p3 = tape.record("cos", z)   # z is sqrt(exp(x))
    return w.val, (p1, p2, p3), tape


def cos_sqrt_exp_derivative(x: float) -> float:
    """Analytic derivative of cos(sqrt(exp(x)))."""
    return -np.sin(np.sqrt(np.exp(x))) * np.exp(x) / (2 * np.sqrt(np.exp(x)))


# --------------------------------- manysin ---------------------------------- #
def manysin(n: int, x: float) -> float:
    r = x
    for _ in range(n):
        r = np.sin(r)
    return r


def manysin_pullbacks(n: int, x: float) -> Tuple[float, Tape]:
    """
    One pullback per call of sin, each at a different point, so the tape
    grows linearly in n.
    """
    tape = Tape()
    r = tape.variable(x, name="x")
    for _ in range(n):
        r, _ = tape.record("sin", r)
    return r.val, tape


def manysin_derivative(n: int, x: float) -> float:
    """Chain rule by hand: cos(r_{n-1}) ... cos(r_1) cos(x)."""
    der = 1.0
    r = x
    for _ in range(n):
        der *= np.cos(r)
        r = np.sin(r)
    return der


def manysin_reverse_derivative(n: int, x: float) -> float:
    _, tape = manysin_pullbacks(n, x)
    return backpropagate(tape, 1.0)[0]


def manysin_forward_derivative(n: int, x: float) -> float:
    """Same pullbacks folded in recording order."""
    _, tape = manysin_pullbacks(n, x)
    return compose_pullbacks(tape_pullbacks(tape), 1.0, reverse=False)


# ------------------------ f(g(x), h(x)) with fan-out ------------------------ #
def composite(x: Var) -> Var:
    """F(x) = f(g(x), h(x)) with f(a, b) = cos(a exp(b)), g = sqrt, h = sin."""
    a = ops.sqrt(x)
    b = ops.sin(x)
    return ops.cos(a * ops.exp(b))


def composite_derivative(x: float) -> float:
    return grad(composite, x)


def composite_derivative_exact(x: float) -> float:
    a, b = np.sqrt(x), np.sin(x)
    u = a * np.exp(b)
    return -np.sin(u) * (np.exp(b) / (2 * a) + u * np.cos(x))

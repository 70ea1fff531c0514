"""
Back-propagation through a truncated Taylor series of exp

    exp_t(z, n) = sum_{k=0}^{n} z^k / k!

computed by the recurrence s <- s / k * z, ret <- ret + s. Each basic
operation is recorded as its own primitive. The first division 1 / 1 has
only constant operands, so the cotangents its pullback returns are dropped.

Since d/dz exp_t(z, n) = exp_t(z, n-1), the derivative has a closed form to
check against.
"""

from typing import Callable, List

from aad_pullback.aad import Tape, backpropagate
from aad_pullback.aad.core.values import as_value, zero_like


def exp_t(z, n: int):
    ret = 1.0
    s = 1.0
    for k in range(1, n + 1):
        s = s / k * z
        ret = ret + s
    return ret


def exp_t_pullbacks(z, n: int):
    """
    Returns (ret, z_var, tape, (pullbacks_div, pullbacks_mul, pullbacks_ret)).
    `ret` is a plain number when n == 0 (nothing depends on z).
    """
    tape = Tape()
    zv = tape.variable(z, name="z")
    pullbacks_div: List[Callable] = []
    pullbacks_mul: List[Callable] = []
    pullbacks_ret: List[Callable] = []
    ret = 1.0
    s = 1.0
    for k in range(1, n + 1):
        s, p = tape.record("div", s, k)
        pullbacks_div.append(p)
        s, p = tape.record("mul", s, zv)
        pullbacks_mul.append(p)
        ret, p = tape.record("add", ret, s)
        pullbacks_ret.append(p)
    return ret, zv, tape, (pullbacks_div, pullbacks_mul, pullbacks_ret)


def exp_t_derivative(z, n: int):
    """d/dz exp_t(z, n) by the general reverse accumulation over the tape."""
    ret, zv, tape, _ = exp_t_pullbacks(z, n)
    if n == 0:
        return zero_like(as_value(z))
    return backpropagate(tape, 1.0, wrt=zv, output=ret)


def exp_t_backprop(pullbacks_div: List[Callable], pullbacks_mul: List[Callable],
                   pullbacks_ret: List[Callable]):
    """
    Hand-written fold over the three pullback lists.

    Step k maps (s, ret) to s_k = (s_{k-1} / k) * z and ret_k = ret_{k-1} + s_k.
    s_k feeds both ret_k and the division of step k+1, so its cotangent is
    the sum of the two contributions.
    """
    ret_der = 1.0
    s_der = 0.0  # s_n feeds only ret_n
    z_der = 0.0
    for k in reversed(range(len(pullbacks_mul))):
        ret_der, ds = pullbacks_ret[k](ret_der)
        s_der = s_der + ds
        s_der, dz = pullbacks_mul[k](s_der)
        z_der = z_der + dz
        s_der = pullbacks_div[k](s_der)[0]
    return z_der

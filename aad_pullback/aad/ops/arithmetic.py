# aad/ops/arithmetic.py
import numpy as np

from .registry import ALL_KINDS, apply, defrule


def _add_pb(x, y, out):
    def pullback(t):
        return (t, t)
    return pullback


def _sub_pb(x, y, out):
    def pullback(t):
        return (t, -t)
    return pullback


def _mul_pb(x, y, out):
    def pullback(t):
        return (y * t, x * t)
    return pullback


def _div_pb(x, y, out):
    def pullback(t):
        return (t / y, -t * x / (y * y))
    return pullback


def _neg_pb(x, out):
    def pullback(t):
        return (-t,)
    return pullback


def _log_base(x, out):
    """
    log(x) for the exponent partial.

    A complex result takes the principal complex log, also for a real base.
    For a real result it is 0 at x == 0 (the limit of x^y log(x), y > 0)
    and nan for x < 0, where x^y has no real derivative in y.
    """
    if np.iscomplexobj(x) or np.iscomplexobj(out):
        with np.errstate(divide="ignore"):
            return np.log(x + 0j)
    if isinstance(x, np.ndarray):
        positive = x > 0
        return np.where(positive, np.log(np.where(positive, x, 1.0)),
                        np.where(x < 0, np.nan, 0.0))
    if x > 0:
        return np.log(x)
    return x.dtype.type(np.nan if x < 0 else 0.0)


def _pow_dx(x, y):
    with np.errstate(divide="ignore", invalid="ignore"):
        dfdx = y * x ** (y - 1)
    # x^0 is constant, so its partial is 0 even at x == 0
    if isinstance(dfdx, np.ndarray):
        return np.where(y == 0, 0.0, dfdx)
    return dfdx if y != 0 else type(dfdx)(0)


def _pow_pb(x, y, out):
    """
    Local partials:
      d out/dx = y * x^(y-1)      (0 when y == 0)
      d out/dy = x^y * log(x)     (see _log_base for x <= 0)
    """
    dfdx = _pow_dx(x, y)
    dfdy = out * _log_base(x, out)
    def pullback(t):
        return (dfdx * t, dfdy * t)
    return pullback


defrule("add", ALL_KINDS, forward=np.add, pullback=_add_pb, arity=2)
defrule("sub", ALL_KINDS, forward=np.subtract, pullback=_sub_pb, arity=2)
defrule("mul", ALL_KINDS, forward=np.multiply, pullback=_mul_pb, arity=2)
defrule("div", ALL_KINDS, forward=np.divide, pullback=_div_pb, arity=2)
defrule("pow", ALL_KINDS, forward=np.power, pullback=_pow_pb, arity=2)
defrule("neg", ALL_KINDS, forward=np.negative, pullback=_neg_pb)

def add(x, y): return apply("add", x, y)
def sub(x, y): return apply("sub", x, y)
def mul(x, y): return apply("mul", x, y)
def div(x, y): return apply("div", x, y)
def pow(x, y): return apply("pow", x, y)
def neg(x):    return apply("neg", x)

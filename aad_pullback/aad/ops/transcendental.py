# aad/ops/transcendental.py
import numpy as np

from .registry import ALL_KINDS, REAL, VECTOR, apply, defrule

# Elementwise unary functions. The same rule serves reals, complex scalars
# (all of these are holomorphic, so f'(z) * t is unchanged) and vectors.

def _exp_pb(x, out):
    def pullback(t):
        return (out * t,)
    return pullback


def _log_pb(x, out):
    def pullback(t):
        return (t / x,)
    return pullback


def _sqrt_pb(x, out):
    def pullback(t):
        return (t / (2 * out),)
    return pullback


def _sin_pb(x, out):
    c = np.cos(x)
    def pullback(t):
        return (c * t,)
    return pullback


def _cos_pb(x, out):
    s = np.sin(x)
    def pullback(t):
        return (-s * t,)
    return pullback


def _tan_pb(x, out):
    sec2 = 1 + out * out
    def pullback(t):
        return (sec2 * t,)
    return pullback


def _tanh_pb(x, out):
    sech2 = 1 - out * out
    def pullback(t):
        return (sech2 * t,)
    return pullback


# Piecewise functions: defined for reals and vectors only

def _abs_pb(x, out):
    sign = np.sign(x)
    def pullback(t):
        return (sign * t,)
    return pullback


def _relu_pb(x, out):
    active = x > 0
    def pullback(t):
        return (t * active,)
    return pullback


def _relu(x):
    return np.maximum(x, 0.0)


defrule("exp",  ALL_KINDS, forward=np.exp,  pullback=_exp_pb)
defrule("log",  ALL_KINDS, forward=np.log,  pullback=_log_pb)
defrule("sqrt", ALL_KINDS, forward=np.sqrt, pullback=_sqrt_pb)
defrule("sin",  ALL_KINDS, forward=np.sin,  pullback=_sin_pb)
defrule("cos",  ALL_KINDS, forward=np.cos,  pullback=_cos_pb)
defrule("tan",  ALL_KINDS, forward=np.tan,  pullback=_tan_pb)
defrule("tanh", ALL_KINDS, forward=np.tanh, pullback=_tanh_pb)
defrule("abs",  (REAL, VECTOR), forward=np.abs, pullback=_abs_pb)
defrule("relu", (REAL, VECTOR), forward=_relu,  pullback=_relu_pb)

def exp(x):  return apply("exp", x)
def log(x):  return apply("log", x)
def sqrt(x): return apply("sqrt", x)
def sin(x):  return apply("sin", x)
def cos(x):  return apply("cos", x)
def tan(x):  return apply("tan", x)
def tanh(x): return apply("tanh", x)
def abs(x):  return apply("abs", x)
def relu(x): return apply("relu", x)

# aad/ops/reduction.py
"""
Primitives that change shape: vector -> scalar reductions and the two
structural moves between scalars and vectors (component read, stacking).

Every pullback returns cotangents with the exact shape of the operand it
belongs to: a length-n vector operand always receives a length-n cotangent.
"""
import numpy as np

from ..core.config import ADConfig
from .registry import REAL, VECTOR, apply, defrule, uniform_kind


def _cotangent_vector(n, t):
    # Complex seeds stay complex, real seeds keep float64
    return np.zeros(n, dtype=np.result_type(t, ADConfig.REAL_DTYPE))


def _sum_pb(v, out):
    n = len(v)
    def pullback(t):
        return (np.full(n, t),)
    return pullback


def _dot_pb(a, b, out):
    def pullback(t):
        return (t * b, t * a)
    return pullback


def _getitem(v, index):
    return v[index]


def _getitem_pb(v, out, index):
    n = len(v)
    def pullback(t):
        e = _cotangent_vector(n, t)
        e[index] = t
        return (e,)
    return pullback


def _stack(*scalars):
    return np.array(scalars, dtype=ADConfig.REAL_DTYPE)


def _stack_pb(*scalars, out):
    n = len(scalars)
    def pullback(t):
        return tuple(t[i] for i in range(n))
    return pullback


defrule("sum", (VECTOR,), forward=np.sum, pullback=_sum_pb)
defrule("dot", (VECTOR,), forward=np.dot, pullback=_dot_pb, arity=2)
defrule("getitem", (VECTOR,), forward=_getitem, pullback=_getitem_pb)
defrule("stack", (REAL,), forward=_stack, pullback=_stack_pb,
        arity=None, key=uniform_kind)

def sum(v):          return apply("sum", v)
def dot(a, b):       return apply("dot", a, b)
def getitem(v, index): return apply("getitem", v, index=index)
def stack(*scalars): return apply("stack", *scalars)

# aad/ops/__init__.py

# Importing the rule modules fills the registry table
from . import arithmetic
from . import transcendental
from . import special
from . import reduction

# Convenience re-exports so users can do: from aad.ops import mul, exp, ...
from .arithmetic import add, sub, mul, div, neg, pow
from .transcendental import exp, log, sqrt, sin, cos, tan, tanh, abs, relu
from .special import erf, norm_cdf
from .reduction import sum, dot, getitem, stack
from .registry import REAL, COMPLEX, VECTOR, apply, defrule, lookup, supported_ops

__all__ = [
    "add", "sub", "mul", "div", "neg", "pow",
    "exp", "log", "sqrt", "sin", "cos", "tan", "tanh", "abs", "relu",
    "erf", "norm_cdf",
    "sum", "dot", "getitem", "stack",
    "REAL", "COMPLEX", "VECTOR", "apply", "defrule", "lookup", "supported_ops",
]

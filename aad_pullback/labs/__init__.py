"""
Lab scenarios built on the pullback tape.

1. scalar_chains: cos(sqrt(exp(x))), manysin, f(g(x), h(x))
2. iterated_map: gradient of sum(f^n(v)) for a map R^3 -> R^3
3. taylor_exp: back-propagation through a truncated exp series
4. plotting: reverse mode vs bumping over a grid
"""

from .scalar_chains import (
    cos_sqrt_exp_pullbacks,
    cos_sqrt_exp_derivative,
    manysin,
    manysin_pullbacks,
    manysin_derivative,
    manysin_reverse_derivative,
    manysin_forward_derivative,
    composite,
    composite_derivative,
    composite_derivative_exact,
)
from .iterated_map import iteratef, iteratef_gradient, iteratef_gradient_tape
from .taylor_exp import exp_t, exp_t_pullbacks, exp_t_derivative, exp_t_backprop

__all__ = [
    'cos_sqrt_exp_pullbacks',
    'cos_sqrt_exp_derivative',
    'manysin',
    'manysin_pullbacks',
    'manysin_derivative',
    'manysin_reverse_derivative',
    'manysin_forward_derivative',
    'composite',
    'composite_derivative',
    'composite_derivative_exact',
    'iteratef',
    'iteratef_gradient',
    'iteratef_gradient_tape',
    'exp_t',
    'exp_t_pullbacks',
    'exp_t_derivative',
    'exp_t_backprop',
]

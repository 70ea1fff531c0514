"""
Bumping: finite-difference reference derivatives

Pure finite difference method, used to validate reverse-mode results.
The function under test is the same Var-level function that is given to
the tape; it is simply evaluated on throw-away tapes.

Formulas:
    f'(x)      = [f(x+ε) - f(x-ε)] / (2ε)
    ∂f/∂x_i    = [f(x+ε e_i) - f(x-ε e_i)] / (2ε)
"""

import time
from typing import Callable, Dict

import numpy as np

from aad_pullback.aad.core.config import ADConfig
from aad_pullback.aad.core.seeds import grad, value
from aad_pullback.aad.core.tape import Tape
from aad_pullback.aad.core.values import ValueKind, kind_of


def evaluate(f: Callable, x) -> float:
    """Primal value of f at x (recorded on a fresh tape, then discarded)."""
    tape = Tape()
    return value(f(tape.variable(x, name="x")))


def _require_real(x):
    kind = kind_of(x)
    if kind is ValueKind.COMPLEX:
        raise TypeError("bumping needs real inputs")
    return kind


def central_difference(f: Callable, x: float, eps: float = None) -> float:
    """Central difference of a scalar function at a real point x."""
    if _require_real(x) is ValueKind.VECTOR:
        raise TypeError("central_difference expects a scalar point; use bump_gradient")
    x = float(x)
    eps = eps if eps is not None else ADConfig.bump_size(x)
    return (evaluate(f, x + eps) - evaluate(f, x - eps)) / (2.0 * eps)


def bump_gradient(f: Callable, x, eps: float = None) -> np.ndarray:
    """
    Gradient of a scalar function of a vector by bumping one component at a
    time (2n evaluations).
    """
    if _require_real(x) is not ValueKind.VECTOR:
        return np.array([central_difference(f, x, eps)])
    x = np.array(x, dtype=ADConfig.REAL_DTYPE)
    g = np.zeros_like(x)
    for i in range(len(x)):
        h = eps if eps is not None else ADConfig.bump_size(x[i])
        x_up = x.copy()
        x_dn = x.copy()
        x_up[i] += h
        x_dn[i] -= h
        g[i] = (evaluate(f, x_up) - evaluate(f, x_dn)) / (2.0 * h)
    return g


def check_gradient(f: Callable, x, rtol: float = None, atol: float = None) -> Dict:
    """
    Compare the reverse-mode derivative with bumping.

    Returns:
        Dictionary with standard format:
        {
            'aad': reverse-mode derivative/gradient,
            'bumping': finite-difference derivative/gradient,
            'max_abs_err': float,
            'ok': bool,                    # np.allclose(aad, bumping, rtol, atol)
            'time_ms': {'aad': float, 'bumping': float},
            'n_evals': int                 # function evaluations used by bumping
        }
    """
    rtol = ADConfig.GRAD_CHECK_RTOL if rtol is None else rtol
    atol = ADConfig.GRAD_CHECK_ATOL if atol is None else atol
    is_vector = _require_real(x) is ValueKind.VECTOR

    start_time = time.time()
    g_aad = grad(f, x)
    time_aad = (time.time() - start_time) * 1000

    start_time = time.time()
    g_fd = bump_gradient(f, x) if is_vector else central_difference(f, x)
    time_fd = (time.time() - start_time) * 1000

    err = np.abs(np.asarray(g_aad) - np.asarray(g_fd))
    return {
        'aad': g_aad,
        'bumping': g_fd,
        'max_abs_err': float(np.max(err)),
        'ok': bool(np.allclose(g_aad, g_fd, rtol=rtol, atol=atol)),
        'time_ms': {'aad': time_aad, 'bumping': time_fd},
        'n_evals': 2 * (len(x) if is_vector else 1)
    }

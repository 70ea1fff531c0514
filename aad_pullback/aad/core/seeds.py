# aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the tape. Every helper here builds its own fresh tape, so
# repeated or concurrent calls never share state.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Tuple, Union

import numpy as np

from .engine import backpropagate, check_seed
from .errors import TapeConsistencyError
from .tape import Tape
from .values import ValueKind, as_value, kind_of, zero_like
from .var import Var


def value(x: Any) -> Any:
    """Return the numeric value of a Var; pass through plain numbers unchanged."""
    return x.val if isinstance(x, Var) else x


def _output_pullback(tape: Tape, y: Any, targets: List[Var]) -> Tuple[Any, Callable]:
    """Primal value of `y` and a pullback from y to `targets`."""
    if isinstance(y, Var):
        if y.tape is not tape:
            raise TapeConsistencyError("function returned a Var recorded on a foreign tape")

        def pb(t):
            return backpropagate(tape, t, wrt=targets, output=y)
        return y.val, pb

    # Output does not depend on the inputs at all
    y_val = as_value(y)

    def pb(t):
        check_seed(y_val, t)
        return tuple(zero_like(x.val) for x in targets)
    return y_val, pb


def _expect_scalar(y_val, who: str):
    if kind_of(y_val) is ValueKind.VECTOR:
        raise TapeConsistencyError(f"{who} expects scalar output.")


# ------------------------------- pullbacks ---------------------------------- #
def pullback(f: Callable[..., Var], *args) -> Tuple[Any, Callable]:
    """
    Trace `f(*args)` on a fresh tape.

    Returns (value, pb) where pb(t) maps an output cotangent t to a tuple with
    one cotangent per argument (J_f(x)^T t). pb may be called any number of
    times; each call is an independent reverse pass over the same tape.

    Example
    -------
    s, sin_J = pullback(ops.sin, 0.1)
    sin_J(1.0)  -> (cos(0.1),)
    sin_J(2.0)  -> (2*cos(0.1),)
    """
    tape = Tape()
    xs = [tape.variable(a, name=f"x{i}") for i, a in enumerate(args)]
    return _output_pullback(tape, f(*xs), xs)


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Var], Var],
         x0: Union[float, complex, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Derivative/gradient of a scalar-output function y=f(x) at x0 (single input).
    Runs one reverse pass within a fresh, isolated tape.
    """
    y_val, pb = pullback(f, x0)
    _expect_scalar(y_val, "grad(f, x0)")
    return pb(1.0)[0]


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Var]], Var],
          inputs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Gradient of a scalar-output function y=f(vars) w.r.t. ALL inputs (dict form).
    Performs ONE reverse pass to obtain all ∂y/∂var simultaneously.

    Parameters
    ----------
    f       : function taking a dict {name: Var} and returning a scalar Var
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: numeric}  # gradients in the same key order as `inputs`
    """
    tape = Tape()
    vars_ad = {k: tape.variable(v, name=k) for k, v in inputs.items()}
    y_val, pb = _output_pullback(tape, f(vars_ad), list(vars_ad.values()))
    _expect_scalar(y_val, "grads(f, inputs)")
    return dict(zip(vars_ad.keys(), pb(1.0)))


def grads_list(f: Callable[[List[Var]], Var],
               x0_list: Iterable[Any]) -> List[Any]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    tape = Tape()
    xs = [tape.variable(v, name=f"x{i}") for i, v in enumerate(x0_list)]
    y_val, pb = _output_pullback(tape, f(xs), xs)
    _expect_scalar(y_val, "grads_list(f, x0_list)")
    return list(pb(1.0))


def jacobian(f: Callable[[Var], Var], x0: Any) -> np.ndarray:
    """
    Jacobian J_f(x0) of a single-input function, assembled row by row from
    pullbacks of the unit cotangents e_1, ..., e_m (one reverse pass per row).
    A scalar output gives a single row.
    """
    y_val, pb = pullback(f, x0)
    if kind_of(y_val) is not ValueKind.VECTOR:
        return np.array([pb(1.0)[0]])
    rows = []
    for i in range(len(y_val)):
        e = np.zeros(len(y_val))
        e[i] = 1.0
        rows.append(pb(e)[0])
    return np.array(rows)

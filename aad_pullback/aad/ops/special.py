# aad/ops/special.py
import numpy as np
from scipy import special as sp

from .registry import REAL, VECTOR, apply, defrule

SQRT_TWO_PI = np.sqrt(2.0 * np.pi)
TWO_OVER_SQRT_PI = 2.0 / np.sqrt(np.pi)

def norm_pdf(x):
    return np.exp(-0.5 * x * x) / SQRT_TWO_PI


def _erf_pb(x, out):
    """
    Error function: erf(x) = (2/√π) ∫₀ˣ e^(-t²) dt

    Derivative: d/dx erf(x) = (2/√π) * e^(-x²)
    """
    deriv = TWO_OVER_SQRT_PI * np.exp(-x * x)
    def pullback(t):
        return (deriv * t,)
    return pullback


def _norm_cdf_pb(x, out):
    """N(x) with local partial dN/dx = phi(x)."""
    pdf = norm_pdf(x)
    def pullback(t):
        return (pdf * t,)
    return pullback


defrule("erf",      (REAL, VECTOR), forward=sp.erf,  pullback=_erf_pb)
defrule("norm_cdf", (REAL, VECTOR), forward=sp.ndtr, pullback=_norm_cdf_pb)

def erf(x):      return apply("erf", x)
def norm_cdf(x): return apply("norm_cdf", x)

"""
AAD Configuration Utilities

Shared constants and helpers for the tape, the bumping checks and the
batch drivers.
"""

import numpy as np


class ADConfig:
    """Shared configuration for the pullback tape and its clients"""

    # Working precision of every recorded value (64-bit or better)
    REAL_DTYPE = np.float64
    COMPLEX_DTYPE = np.complex128

    # Central-difference bump: eps = max(BUMP_ABS, BUMP_REL * |x|)
    BUMP_ABS = 1e-6
    BUMP_REL = 1e-6

    # Tolerances used by check_gradient()
    GRAD_CHECK_RTOL = 1e-5
    GRAD_CHECK_ATOL = 1e-7

    # Default worker count for batch differentiation
    N_WORKERS = 4

    @staticmethod
    def bump_size(x: float, eps_abs: float = None, eps_rel: float = None) -> float:
        """
        Compute a scale-aware bump for central differences

        Small |x| uses the absolute floor, large |x| scales with the
        magnitude so that x + eps stays representable away from x.

        Args:
            x: Point being bumped
            eps_abs: Absolute floor (default BUMP_ABS)
            eps_rel: Relative factor (default BUMP_REL)

        Returns:
            eps: Bump size (> 0)

        Example:
            x=0.1   -> 1e-6
            x=1e4   -> 1e-2
        """
        eps_abs = ADConfig.BUMP_ABS if eps_abs is None else eps_abs
        eps_rel = ADConfig.BUMP_REL if eps_rel is None else eps_rel
        return max(eps_abs, eps_rel * abs(float(x)))

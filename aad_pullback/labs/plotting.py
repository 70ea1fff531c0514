"""
Plot reverse-mode derivatives against bumping over a grid of points.
"""

from typing import Callable, Dict, Sequence

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from aad_pullback.aad import grad
from aad_pullback.methods.bumping import central_difference


def plot_derivative(f: Callable, xs: Sequence[float], title: str = None,
                    save_path: str = None) -> Dict[str, np.ndarray]:
    """
    Plot f'(x) from the tape and from central differences, plus their gap.

    Args:
        f: Var-level scalar function
        xs: Grid of real points
        title: Figure title
        save_path: Where to save the PNG (nothing is saved if None)

    Returns:
        {'x': xs, 'aad': reverse-mode derivatives, 'bumping': finite differences}
    """
    xs = np.asarray(xs, dtype=float)
    d_aad = np.array([grad(f, x) for x in xs])
    d_fd = np.array([central_difference(f, x) for x in xs])

    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    ax = axes[0]
    ax.plot(xs, d_aad, 'b-', linewidth=2, label='reverse mode')
    ax.plot(xs, d_fd, 'r--', linewidth=1.5, label='bumping')
    ax.set_xlabel('x')
    ax.set_ylabel("f'(x)")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.semilogy(xs, np.abs(d_aad - d_fd) + 1e-300, 'k-')
    ax.set_xlabel('x')
    ax.set_ylabel('|aad - bumping|')
    ax.grid(True, alpha=0.3)

    if title:
        fig.suptitle(title)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved: {save_path}")

    plt.close(fig)

    return {'x': xs, 'aad': d_aad, 'bumping': d_fd}

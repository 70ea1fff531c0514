"""
Methods package for checking and batching reverse-mode derivatives.

1. Bumping: central finite differences (reference values)
2. Batch-Parallel: one fresh tape per worker across many input points
"""

from .bumping import central_difference, bump_gradient, check_gradient, evaluate
from .batch_parallel import (
    batch_grad_parallel,
    batch_grad_sequential,
    benchmark_batch_vs_sequential,
)

__all__ = [
    'central_difference',
    'bump_gradient',
    'check_gradient',
    'evaluate',
    'batch_grad_parallel',
    'batch_grad_sequential',
    'benchmark_batch_vs_sequential',
]

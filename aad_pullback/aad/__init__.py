# aad/__init__.py
# Reverse-mode automatic differentiation on a pullback tape

from .core import (
    Tape,
    Var,
    ValueKind,
    record_op,
    backpropagate,
    compose_pullbacks,
    pullback,
    grad,
    grads,
    grads_list,
    jacobian,
    value,
    ADConfig,
    AADError,
    UnsupportedOperation,
    ShapeMismatch,
    TapeConsistencyError,
)

# Primitive rule table
from . import ops
from .core.graph_utils import get_tape_stats, print_tape_summary, tape_table

__all__ = [
    # Core
    'Tape',
    'Var',
    'ValueKind',
    'record_op',
    # Engine
    'backpropagate',
    'compose_pullbacks',
    # Seeds
    'pullback',
    'grad',
    'grads',
    'grads_list',
    'jacobian',
    'value',
    # Config / errors
    'ADConfig',
    'AADError',
    'UnsupportedOperation',
    'ShapeMismatch',
    'TapeConsistencyError',
    # Ops and diagnostics
    'ops',
    'get_tape_stats',
    'print_tape_summary',
    'tape_table',
]

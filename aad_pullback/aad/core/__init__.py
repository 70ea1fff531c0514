# aad/core/__init__.py

"""
Core public API for the AAD package.

This module exposes the minimal set of symbols that users of the pullback
tape should import from `aad.core`.

Exports:
    Tape              : Explicit record of one forward pass (one per request).
    Var               : Handle on a tape slot; operators record primitives.
    record_op         : Evaluate one primitive and return (result, pullback).
    backpropagate     : Fold a seed cotangent backwards through a tape.
    compose_pullbacks : Fold a chain of single-operand pullbacks.
    pullback          : Trace a whole function and return (value, pullback).
    grad, grads, grads_list, jacobian, value : Convenience wrappers.
    ValueKind         : REAL / COMPLEX / VECTOR value variants.
    AADError, UnsupportedOperation, ShapeMismatch, TapeConsistencyError
"""

from .errors import AADError, UnsupportedOperation, ShapeMismatch, TapeConsistencyError
from .values import ValueKind, kind_of, as_value
from .var import Var
from .tape import Tape, record_op
from .engine import backpropagate, compose_pullbacks, check_seed, tape_pullbacks
from .seeds import pullback, grad, grads, grads_list, jacobian, value
from .config import ADConfig

__all__ = [
    "AADError", "UnsupportedOperation", "ShapeMismatch", "TapeConsistencyError",
    "ValueKind", "kind_of", "as_value",
    "Var",
    "Tape", "record_op",
    "backpropagate", "compose_pullbacks", "check_seed", "tape_pullbacks",
    "pullback", "grad", "grads", "grads_list", "jacobian", "value",
    "ADConfig",
]

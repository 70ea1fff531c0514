# aad/core/errors.py
"""
Error taxonomy of the pullback tape.

Every error here is a usage/programming error: there is no I/O and no
transient failure mode, so nothing is retried or recovered locally.
"""


class AADError(Exception):
    """Base class for all tape/engine errors."""


class UnsupportedOperation(AADError, LookupError):
    """A primitive was requested that has no registered pullback rule."""

    def __init__(self, op_tag: str):
        super().__init__(f"no pullback rule registered for operation {op_tag!r}")
        self.op_tag = op_tag


class ShapeMismatch(AADError, ValueError):
    """Operand kinds/lengths are incompatible for the requested primitive."""


class TapeConsistencyError(AADError, ValueError):
    """The tape, seed cotangent or differentiation targets do not fit together."""

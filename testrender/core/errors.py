"""Error taxonomy for both rendering engines.

Three families, all raised synchronously at the call site:
    - InvariantViolation: precondition violations (bad element shapes, wrong
      node kind handed to a wrapper, unknown tree-node kinds)
    - CardinalityError: ``find*`` helpers expecting exactly one match
    - UnmountedAccessError: reads from torn-down trees or wrappers

None of these are retried; they are contract violations meant to surface
immediately to the test author.
"""

from __future__ import annotations


class RendererError(Exception):
    """Base class for every error raised by testrender."""

    pass


class InvariantViolation(RendererError, ValueError):
    """Raised when a caller breaks a precondition."""

    pass


class CardinalityError(RendererError):
    """Raised when a search expecting exactly one match finds 0 or >1.

    Attributes
    ----------
    count : int
        Number of matches actually found.
    description : str
        Human-readable description of the predicate.
    """

    def __init__(self, count: int, description: str) -> None:
        if count == 0:
            prefix = "No instances found "
        else:
            prefix = f"Expected 1 but found {count} instances "
        super().__init__(prefix + description)
        self.count = count
        self.description = description


class UnmountedAccessError(RendererError):
    """Raised when reading from a tree position that is no longer mounted."""

    pass


def invariant(condition: object, message: str) -> None:
    """Raise :class:`InvariantViolation` with ``message`` unless ``condition``."""
    if not condition:
        raise InvariantViolation(message)

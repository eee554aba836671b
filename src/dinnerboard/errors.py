"""Exception types raised by Dinnerboard repositories and services."""

from __future__ import annotations


class DinnerboardError(Exception):
    """Base class for domain errors."""


class NotFoundError(DinnerboardError):
    """Raised when a referenced record does not exist."""


class ConflictError(DinnerboardError):
    """Raised when a unique name is already taken."""


__all__ = ["DinnerboardError", "NotFoundError", "ConflictError"]

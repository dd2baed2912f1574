"""Exceptions raised by the luminal engine."""


class LuminalError(Exception):
    """Base exception for engine operations."""


class InvalidParameterError(LuminalError, ValueError):
    """Raised when a generator receives input it cannot build from."""


class InvalidArgumentError(LuminalError, ValueError):
    """Raised when an operation references a node or level outside the current context."""

"""Exceptions raised by the jigsaw engine."""


class InvalidParameterError(ValueError):
    """Raised when a puzzle parameter falls outside its supported range."""

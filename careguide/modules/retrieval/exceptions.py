"""Exceptions for the retrieval module."""


class InvalidInputError(ValueError):
    """Raised when vectors handed to the ranker have unusable shapes.

    Signals an upstream data or programming error, so it is never
    converted into a default score.
    """

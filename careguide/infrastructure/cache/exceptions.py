"""Exceptions for response cache operations."""


class CacheError(Exception):
    """Base exception for cache operations."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CacheStorageError(CacheError):
    """Raised when the underlying cache store cannot be reached or written."""

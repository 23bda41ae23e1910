"""Database infrastructure for SQLite persistence."""

from careguide.infrastructure.database.connection import Database

__all__ = [
    "Database",
]

"""Query normalization and fingerprinting for cache keys."""

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def normalize_query(query: str) -> str:
    """Return the canonical form of a query.

    Lower-cases, trims, and collapses internal whitespace runs to a
    single space. Idempotent.
    """
    return _WHITESPACE.sub(" ", query.strip().lower())


def fingerprint_query(query: str) -> str:
    """Return the SHA-256 hex digest of the normalized query.

    Queries that normalize to the same text share a fingerprint. The
    empty string is a valid query.
    """
    canonical = normalize_query(query)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

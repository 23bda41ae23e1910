"""Cosine similarity and nearest-neighbour ranking over embedding vectors."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from careguide.modules.retrieval.exceptions import InvalidInputError

Vector = Sequence[float]


class EmbeddedItem(Protocol):
    """Any object carrying an identifier and an optional embedding."""

    id: int | str
    embedding: Vector | None


Candidate = tuple[int | str, Vector | None] | EmbeddedItem


@dataclass(frozen=True)
class SimilarityResult:
    """A candidate identifier with its cosine similarity to the query."""

    id: int | str
    score: float


def cosine_similarity(vector_a: Vector, vector_b: Vector) -> float:
    """Return the cosine of the angle between two vectors.

    Args:
        vector_a: First vector.
        vector_b: Second vector, same length as the first.

    Returns:
        dot(a, b) / (|a| * |b|), normally within [-1, 1] and not clamped.
        Exactly 0.0 when either vector has zero magnitude.

    Raises:
        InvalidInputError: If the lengths differ or either vector is empty.
    """
    if len(vector_a) != len(vector_b):
        raise InvalidInputError(
            f"Vectors must have the same dimension ({len(vector_a)} != {len(vector_b)})"
        )
    if len(vector_a) == 0:
        raise InvalidInputError("Vectors cannot be empty")

    a = np.asarray(vector_a, dtype=float)
    b = np.asarray(vector_b, dtype=float)
    norm_a, norm_b = np.linalg.norm(a), np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def _unpack(candidate: Candidate) -> tuple[int | str, Vector | None]:
    if isinstance(candidate, tuple):
        return candidate
    return candidate.id, candidate.embedding


def rank_candidates(
    query_vector: Vector,
    candidates: Iterable[Candidate],
    limit: int | None = None,
) -> list[SimilarityResult]:
    """Rank candidates by cosine similarity to a query vector.

    Candidates without a vector, or with an empty one, are left out of
    the result entirely. Ties keep their input order.

    Args:
        query_vector: Embedding of the query.
        candidates: (id, vector) pairs or objects with id and embedding.
        limit: Keep only this many top results when positive.

    Returns:
        Results sorted by descending score. Empty when nothing is scorable.

    Raises:
        InvalidInputError: If a candidate's dimension differs from the
            query's, or the query vector is empty while candidates exist.
    """
    scored: list[SimilarityResult] = []
    for candidate in candidates:
        item_id, vector = _unpack(candidate)
        if vector is None or len(vector) == 0:
            continue
        scored.append(SimilarityResult(id=item_id, score=cosine_similarity(query_vector, vector)))

    # sort is stable, so equal scores stay in input order
    scored.sort(key=lambda result: result.score, reverse=True)

    if limit is not None and limit > 0:
        return scored[:limit]
    return scored

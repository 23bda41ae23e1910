"""Semantic retrieval module.

Ranks guidance content (articles, FAQs, videos) against queries by
embedding similarity and answers through the response cache.
"""

from careguide.modules.retrieval.exceptions import InvalidInputError
from careguide.modules.retrieval.indexing import build_search_text
from careguide.modules.retrieval.schemas import (
    Answer,
    ContentItem,
    SearchResponse,
    SearchResultItem,
)
from careguide.modules.retrieval.service import ResponseGenerator, RetrievalService
from careguide.modules.retrieval.similarity import (
    SimilarityResult,
    cosine_similarity,
    rank_candidates,
)

__all__ = [
    "Answer",
    "ContentItem",
    "InvalidInputError",
    "ResponseGenerator",
    "RetrievalService",
    "SearchResponse",
    "SearchResultItem",
    "SimilarityResult",
    "build_search_text",
    "cosine_similarity",
    "rank_candidates",
]

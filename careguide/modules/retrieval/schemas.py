"""Schemas for the retrieval module."""

from dataclasses import dataclass, field
from typing import Any, Literal

from careguide.infrastructure.cache import CacheSource

ContentType = Literal["article", "faq", "video"]


@dataclass
class ContentItem:
    """A piece of guidance content eligible for retrieval.

    For FAQs, title holds the question and content the answer. For
    videos, content holds the summary. embedding is None until the item
    has been indexed.
    """

    id: int | str
    type: ContentType
    title: str
    content: str
    category: str
    embedding: list[float] | None = None
    url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResultItem:
    """A content item matched by a query."""

    id: int | str
    type: ContentType
    title: str
    content: str
    category: str
    score: float
    url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_content(cls, item: ContentItem, score: float) -> "SearchResultItem":
        return cls(
            id=item.id,
            type=item.type,
            title=item.title,
            content=item.content,
            category=item.category,
            score=score,
            url=item.url,
            metadata=dict(item.metadata),
        )

    def to_source(self) -> CacheSource:
        """Reference to this item for storing alongside a cached answer."""
        return CacheSource(
            type=self.type,
            id=self.id,
            title=self.title,
            url=self.url,
            category=self.category,
        )


@dataclass
class SearchResponse:
    """Ranked results for a query.

    total counts every match above the score threshold, before the
    result limit was applied.
    """

    query: str
    results: list[SearchResultItem]
    total: int


@dataclass
class Answer:
    """A generated or cached answer with the content it was based on."""

    query: str
    response: str
    sources: list[CacheSource]
    cached: bool = False
    hit_count: int | None = None  # Set when served from or written to the cache

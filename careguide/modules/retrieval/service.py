"""Content search and cache-aware answering."""

from collections.abc import Awaitable, Callable, Sequence

import structlog

from careguide.infrastructure.cache import ResponseCache
from careguide.infrastructure.embeddings import EmbeddingProvider
from careguide.infrastructure.observability import get_tracer
from careguide.modules.retrieval.indexing import build_search_text
from careguide.modules.retrieval.schemas import (
    Answer,
    ContentItem,
    SearchResponse,
    SearchResultItem,
)
from careguide.modules.retrieval.similarity import rank_candidates

logger = structlog.get_logger()
tracer = get_tracer(__name__)

ResponseGenerator = Callable[[str, list[SearchResultItem]], Awaitable[str]]


class RetrievalService:
    """Finds relevant content for a query and caches generated answers.

    Content items are supplied by the caller (they live in the content
    store); this service only embeds, ranks and caches.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        cache: ResponseCache | None = None,
        *,
        limit: int = 5,
        min_score: float = 0.3,
    ) -> None:
        """Initialize the retrieval service.

        Args:
            embedding_provider: Provider for query and content embeddings.
            cache: Response cache. When None, every answer is generated.
            limit: Default number of search results.
            min_score: Results must score above this similarity to be kept.
        """
        self._embeddings = embedding_provider
        self._cache = cache
        self._limit = limit
        self._min_score = min_score

    async def search(
        self,
        query: str,
        items: Sequence[ContentItem],
        *,
        limit: int | None = None,
        category: str | None = None,
    ) -> SearchResponse:
        """Rank content items against a query.

        Args:
            query: Natural-language query.
            items: Candidate content. Items without embeddings are skipped.
            limit: Maximum results, defaults to the service limit.
            category: Only consider items in this category.

        Returns:
            Results above the score threshold, best first.

        Raises:
            EmbeddingProviderError: If the query cannot be embedded.
            InvalidInputError: If stored vectors do not match the query's
                dimension.
        """
        limit = limit if limit is not None else self._limit

        with tracer.start_as_current_span("retrieval.search") as span:
            span.set_attribute("retrieval.query_length", len(query))
            span.set_attribute("retrieval.limit", limit)

            pool = [item for item in items if category is None or item.category == category]
            if not any(item.embedding is not None and len(item.embedding) for item in pool):
                logger.info("retrieval_no_embedded_content", category=category)
                return SearchResponse(query=query, results=[], total=0)

            query_vector = await self._embeddings.embed(query)

            # Rank by position so identical ids across content types stay distinct
            with tracer.start_as_current_span("retrieval.rank"):
                ranked = rank_candidates(
                    query_vector,
                    ((index, item.embedding) for index, item in enumerate(pool)),
                )

            matches = [
                SearchResultItem.from_content(pool[int(result.id)], result.score)
                for result in ranked
                if result.score > self._min_score
            ]
            results = matches[:limit] if limit > 0 else matches

            span.set_attribute("retrieval.results_count", len(results))
            logger.info(
                "retrieval_search_complete",
                query_length=len(query),
                candidates=len(pool),
                matched=len(matches),
                returned=len(results),
                top_score=results[0].score if results else 0,
            )
            return SearchResponse(query=query, results=results, total=len(matches))

    async def answer(
        self,
        query: str,
        items: Sequence[ContentItem],
        generate: ResponseGenerator,
    ) -> Answer:
        """Answer a query from the cache, or retrieve and generate.

        On a miss the generated response is cached with its sources,
        unless retrieval found nothing to ground it on.

        Args:
            query: Natural-language query.
            items: Candidate content for retrieval on a miss.
            generate: Produces a response from the query and the results.
        """
        with tracer.start_as_current_span("retrieval.answer") as span:
            if self._cache is not None:
                cached = await self._cache.lookup(query)
                if cached is not None:
                    span.set_attribute("retrieval.cached", True)
                    logger.info(
                        "retrieval_cache_hit",
                        query_length=len(query),
                        hit_count=cached.hit_count,
                    )
                    return Answer(
                        query=query,
                        response=cached.response,
                        sources=cached.sources or [],
                        cached=True,
                        hit_count=cached.hit_count,
                    )

            span.set_attribute("retrieval.cached", False)
            found = await self.search(query, items)
            response = await generate(query, found.results)
            sources = [result.to_source() for result in found.results]

            hit_count: int | None = None
            if self._cache is not None and found.results:
                entry = await self._cache.store(query, response, sources)
                hit_count = entry.hit_count if entry is not None else None

            return Answer(
                query=query,
                response=response,
                sources=sources,
                cached=False,
                hit_count=hit_count,
            )

    async def reindex(self, items: Sequence[ContentItem]) -> int:
        """Re-embed every item and invalidate cached answers.

        Vectors are written back onto the items in place.

        Returns:
            Number of items embedded.

        Raises:
            EmbeddingProviderError: If embedding fails. Items and cache are
                left untouched in that case.
        """
        if not items:
            return 0

        texts = [build_search_text(item) for item in items]
        vectors = await self._embeddings.embed_batch(texts)
        for item, vector in zip(items, vectors, strict=True):
            item.embedding = vector

        invalidated = 0
        if self._cache is not None:
            invalidated = await self._cache.invalidate_all()

        logger.info(
            "retrieval_reindex_complete",
            items=len(items),
            cache_entries_invalidated=invalidated,
        )
        return len(items)

"""Tests for the retrieval service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from careguide.infrastructure.cache import (
    CacheSource,
    InMemoryCacheStore,
    ResponseCache,
)
from careguide.infrastructure.embeddings import EmbeddingProviderError
from careguide.modules.retrieval import (
    ContentItem,
    RetrievalService,
    build_search_text,
)


@pytest.fixture
def items() -> list[ContentItem]:
    """A small content set with one unembedded video."""
    return [
        ContentItem(
            id=1,
            type="article",
            title="Preparing for egg retrieval",
            content="What to expect on the day.",
            category="ivf",
            embedding=[1.0, 0.0, 0.0],
            metadata={"tags": ["retrieval", "procedure"]},
        ),
        ContentItem(
            id=1,
            type="faq",
            title="Is egg retrieval painful?",
            content="You will be sedated.",
            category="ivf",
            embedding=[0.8, 0.6, 0.0],
        ),
        ContentItem(
            id=2,
            type="faq",
            title="How much does freezing cost?",
            content="Prices vary by clinic.",
            category="costs",
            embedding=[0.0, 0.0, 1.0],
        ),
        ContentItem(
            id=5,
            type="video",
            title="Clinic tour",
            content="A walk through the clinic.",
            category="ivf",
            url="https://example.org/videos/5",
            metadata={"key_topics": ["clinic", "tour"]},
        ),
    ]


@pytest.fixture
def mock_embeddings() -> MagicMock:
    """Create a mock embedding provider."""
    embeddings = MagicMock()
    embeddings.embed = AsyncMock(return_value=[1.0, 0.0, 0.0])
    embeddings.embed_batch = AsyncMock()
    embeddings.dimensions = 3
    return embeddings


@pytest.fixture
def cache(clock) -> ResponseCache:
    """Create an in-memory response cache."""
    return ResponseCache(InMemoryCacheStore(), ttl_hours=24, clock=clock)


@pytest.fixture
def service(mock_embeddings, cache) -> RetrievalService:
    """Create a retrieval service with a cache."""
    return RetrievalService(mock_embeddings, cache, limit=5, min_score=0.3)


class TestRetrievalServiceSearch:
    """Tests for RetrievalService.search()."""

    async def test_results_are_ranked_and_thresholded(self, service, items):
        """Matches above the threshold come back best first."""
        response = await service.search("egg retrieval", items)

        assert [(r.type, r.id) for r in response.results] == [("article", 1), ("faq", 1)]
        assert response.results[0].score == pytest.approx(1.0)
        assert response.results[1].score == pytest.approx(0.8)
        assert response.total == 2

    async def test_limit_truncates_but_total_counts_all(self, service, items):
        """total should report matches before truncation."""
        response = await service.search("egg retrieval", items, limit=1)

        assert len(response.results) == 1
        assert response.total == 2

    async def test_category_filter(self, service, items, mock_embeddings):
        """Only items in the requested category are ranked."""
        mock_embeddings.embed.return_value = [0.0, 0.0, 1.0]

        response = await service.search("freezing cost", items, category="costs")

        assert [r.id for r in response.results] == [2]

    async def test_no_embedded_content_skips_embedding_call(self, service, mock_embeddings):
        """Nothing to rank should not cost an embedding request."""
        items = [ContentItem(id=9, type="video", title="t", content="", category="ivf")]

        response = await service.search("anything", items)

        assert response.results == []
        assert response.total == 0
        mock_embeddings.embed.assert_not_called()

    async def test_score_equal_to_threshold_is_dropped(self, mock_embeddings):
        """Only scores strictly above the threshold count as matches."""
        service = RetrievalService(mock_embeddings, min_score=0.0)
        items = [
            ContentItem(id=1, type="faq", title="a", content="", category="c", embedding=[0.0, 1.0, 0.0]),
            ContentItem(id=2, type="faq", title="b", content="", category="c", embedding=[0.5, 0.5, 0.0]),
        ]

        response = await service.search("anything", items)

        assert [r.id for r in response.results] == [2]
        assert response.total == 1

    async def test_embedding_errors_propagate(self, service, items, mock_embeddings):
        """Embedding failures are not swallowed by search."""
        mock_embeddings.embed.side_effect = EmbeddingProviderError("down", provider="openai")

        with pytest.raises(EmbeddingProviderError):
            await service.search("egg retrieval", items)


class TestRetrievalServiceAnswer:
    """Tests for RetrievalService.answer()."""

    async def test_miss_generates_and_caches(self, service, items, cache):
        """A first question should be generated and then cached."""
        generate = AsyncMock(return_value="Sedation is used.")

        answer = await service.answer("Is egg retrieval painful?", items, generate)

        assert answer.cached is False
        assert answer.response == "Sedation is used."
        assert answer.hit_count == 1
        assert answer.sources[0] == CacheSource(
            type="article", id=1, title="Preparing for egg retrieval", category="ivf"
        )
        generate.assert_awaited_once()
        query, results = generate.call_args.args
        assert query == "Is egg retrieval painful?"
        assert len(results) == 2
        assert (await cache.stats()).total_entries == 1

    async def test_repeat_question_is_served_from_cache(
        self, service, items, mock_embeddings
    ):
        """An equivalent question should skip retrieval and generation."""
        generate = AsyncMock(return_value="Sedation is used.")
        await service.answer("Is egg retrieval painful?", items, generate)
        mock_embeddings.embed.reset_mock()

        answer = await service.answer("  is EGG retrieval   painful? ", items, generate)

        assert answer.cached is True
        assert answer.response == "Sedation is used."
        assert answer.hit_count == 2
        assert len(answer.sources) == 2
        generate.assert_awaited_once()
        mock_embeddings.embed.assert_not_called()

    async def test_answer_without_results_is_not_cached(
        self, service, cache, mock_embeddings
    ):
        """Ungrounded answers should not be cached."""
        mock_embeddings.embed.return_value = [0.0, 1.0, 0.0]
        items = [
            ContentItem(id=1, type="faq", title="q", content="a", category="c", embedding=[1.0, 0.0, 0.0])
        ]
        generate = AsyncMock(return_value="I could not find anything on that.")

        answer = await service.answer("unrelated", items, generate)

        assert answer.sources == []
        assert answer.hit_count is None
        assert (await cache.stats()).total_entries == 0

    async def test_works_without_cache(self, mock_embeddings, items):
        """The service should answer even when caching is disabled."""
        service = RetrievalService(mock_embeddings)
        generate = AsyncMock(return_value="answer")

        first = await service.answer("egg retrieval", items, generate)
        second = await service.answer("egg retrieval", items, generate)

        assert first.cached is False
        assert second.cached is False
        assert generate.await_count == 2

    async def test_cache_failure_falls_through_to_generation(self, mock_embeddings, items):
        """A broken cache store should not break answering."""
        store = MagicMock()
        store.fetch_live = AsyncMock(side_effect=RuntimeError("db down"))
        store.upsert = AsyncMock(side_effect=RuntimeError("db down"))
        service = RetrievalService(mock_embeddings, ResponseCache(store))
        generate = AsyncMock(return_value="answer")

        answer = await service.answer("egg retrieval", items, generate)

        assert answer.response == "answer"
        assert answer.cached is False
        assert answer.hit_count is None


class TestRetrievalServiceReindex:
    """Tests for RetrievalService.reindex()."""

    async def test_reindex_embeds_items_and_clears_cache(
        self, service, items, cache, mock_embeddings
    ):
        """Reindexing should refresh vectors and invalidate answers."""
        await cache.store("old question", "old answer")
        mock_embeddings.embed_batch.return_value = [[0.1, 0.2, 0.3]] * len(items)

        count = await service.reindex(items)

        assert count == len(items)
        assert all(item.embedding == [0.1, 0.2, 0.3] for item in items)
        texts = mock_embeddings.embed_batch.call_args.args[0]
        assert texts[0] == build_search_text(items[0])
        assert (await cache.stats()).total_entries == 0

    async def test_reindex_failure_leaves_cache(self, service, items, cache, mock_embeddings):
        """A failed embedding run should not invalidate anything."""
        await cache.store("old question", "old answer")
        mock_embeddings.embed_batch.side_effect = EmbeddingProviderError("down")

        with pytest.raises(EmbeddingProviderError):
            await service.reindex(items)

        assert (await cache.stats()).total_entries == 1

    async def test_reindex_nothing(self, service, mock_embeddings):
        """An empty content set should be a no-op."""
        assert await service.reindex([]) == 0
        mock_embeddings.embed_batch.assert_not_called()


class TestBuildSearchText:
    """Tests for build_search_text()."""

    def test_article_includes_tags(self, items):
        """Articles combine title, body, category and tags."""
        assert build_search_text(items[0]) == (
            "Preparing for egg retrieval What to expect on the day. ivf retrieval procedure"
        )

    def test_faq_combines_question_and_answer(self, items):
        """FAQs combine question, answer and category."""
        assert build_search_text(items[1]) == "Is egg retrieval painful? You will be sedated. ivf"

    def test_video_includes_key_topics(self, items):
        """Videos combine title, summary, topics and category."""
        assert build_search_text(items[3]) == "Clinic tour A walk through the clinic. clinic tour ivf"

    def test_missing_parts_are_skipped(self):
        """Empty fields should not leave double spaces."""
        item = ContentItem(id=1, type="video", title="Intro", content="", category="general")

        assert build_search_text(item) == "Intro general"

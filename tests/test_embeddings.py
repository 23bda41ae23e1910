"""Tests for the embedding provider."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import APIConnectionError, APITimeoutError, RateLimitError

from careguide.infrastructure.embeddings import (
    EmbeddingConfigurationError,
    EmbeddingProviderError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
    OpenAIEmbeddingProvider,
)


def _response(*vectors: list[float], shuffled: bool = False) -> MagicMock:
    """Build a fake embeddings response."""
    items = []
    for index, vector in enumerate(vectors):
        item = MagicMock()
        item.embedding = vector
        item.index = index
        items.append(item)
    response = MagicMock()
    response.data = list(reversed(items)) if shuffled else items
    return response


class TestOpenAIEmbeddingProviderInit:
    """Tests for provider construction."""

    def test_defaults(self):
        """Provider should default to the embo-01 model."""
        provider = OpenAIEmbeddingProvider(api_key="test-key")

        assert provider._model == "embo-01"
        assert provider._timeout == 30.0
        assert provider.dimensions == 1536

    def test_unknown_model_dimensions_default(self):
        """Unknown models should report the common 1536 dimensions."""
        provider = OpenAIEmbeddingProvider(api_key="test-key", model="custom-model")

        assert provider.dimensions == 1536

    def test_empty_api_key_raises(self):
        """A missing key should be a configuration error."""
        with pytest.raises(EmbeddingConfigurationError) as exc_info:
            OpenAIEmbeddingProvider(api_key="")

        assert "API key is required" in str(exc_info.value)
        assert exc_info.value.provider == "openai"


class TestOpenAIEmbeddingProviderEmbed:
    """Tests for embed()."""

    @pytest.fixture
    def provider(self) -> OpenAIEmbeddingProvider:
        """Create a provider whose client is replaced per test."""
        return OpenAIEmbeddingProvider(api_key="test-key")

    async def test_embed_returns_vector(self, provider):
        """embed should return the single vector."""
        provider._client.embeddings.create = AsyncMock(return_value=_response([0.1, 0.2]))

        assert await provider.embed("What is IVF?") == [0.1, 0.2]

    async def test_embed_sends_model_and_input(self, provider):
        """The request should name the model and wrap the text in a list."""
        provider._client.embeddings.create = AsyncMock(return_value=_response([0.1]))

        await provider.embed("What is IVF?")

        kwargs = provider._client.embeddings.create.call_args.kwargs
        assert kwargs["model"] == "embo-01"
        assert kwargs["input"] == ["What is IVF?"]

    async def test_timeout_raises_timeout_error(self, provider):
        """Timeouts should be retried, then surface as EmbeddingTimeoutError."""
        provider._client.embeddings.create = AsyncMock(
            side_effect=APITimeoutError(request=MagicMock())
        )

        with pytest.raises(EmbeddingTimeoutError, match="timed out"):
            await provider.embed("Hello")

        assert provider._client.embeddings.create.await_count == 2

    async def test_rate_limit_raises_rate_limit_error(self, provider):
        """Rate limits should not be retried."""
        provider._client.embeddings.create = AsyncMock(
            side_effect=RateLimitError(message="Rate limited", response=MagicMock(), body=None)
        )

        with pytest.raises(EmbeddingRateLimitError, match="Rate limited"):
            await provider.embed("Hello")

        assert provider._client.embeddings.create.await_count == 1

    async def test_connection_error_raises_provider_error(self, provider):
        """Connection failures should surface as EmbeddingProviderError."""
        provider._client.embeddings.create = AsyncMock(
            side_effect=APIConnectionError(request=MagicMock())
        )

        with pytest.raises(EmbeddingProviderError, match="Unable to connect"):
            await provider.embed("Hello")

    async def test_unexpected_error_is_wrapped(self, provider):
        """Other client errors should be hidden behind a generic message."""
        provider._client.embeddings.create = AsyncMock(side_effect=KeyError("data"))

        with pytest.raises(EmbeddingProviderError, match="unexpected"):
            await provider.embed("Hello")

    async def test_empty_response_raises(self, provider):
        """A response without vectors should be an error, not an IndexError."""
        provider._client.embeddings.create = AsyncMock(return_value=_response())

        with pytest.raises(EmbeddingProviderError):
            await provider.embed("Hello")


class TestOpenAIEmbeddingProviderEmbedBatch:
    """Tests for embed_batch()."""

    @pytest.fixture
    def provider(self) -> OpenAIEmbeddingProvider:
        """Create a provider whose client is replaced per test."""
        return OpenAIEmbeddingProvider(api_key="test-key")

    async def test_preserves_input_order(self, provider):
        """Vectors should be returned in input order even if the API reorders."""
        provider._client.embeddings.create = AsyncMock(
            return_value=_response([0.1], [0.2], [0.3], shuffled=True)
        )

        result = await provider.embed_batch(["first", "second", "third"])

        assert result == [[0.1], [0.2], [0.3]]

    async def test_empty_batch_makes_no_request(self, provider):
        """An empty batch should short-circuit."""
        provider._client.embeddings.create = AsyncMock()

        assert await provider.embed_batch([]) == []
        provider._client.embeddings.create.assert_not_called()

"""Protocol definition for embedding providers."""

from typing import Protocol


class EmbeddingProvider(Protocol):
    """Anything that turns text into fixed-length vectors.

    Content search and reindexing depend on this protocol only, so tests
    and alternative backends can stand in for the remote model API.
    """

    async def embed(self, text: str) -> list[float]:
        """Generate the embedding vector for a single text.

        Raises:
            EmbeddingProviderError: If embedding generation fails.
        """
        ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for several texts, in input order.

        Raises:
            EmbeddingProviderError: If embedding generation fails.
        """
        ...

    @property
    def dimensions(self) -> int:
        """Return the dimensionality of embeddings produced by this provider."""
        ...

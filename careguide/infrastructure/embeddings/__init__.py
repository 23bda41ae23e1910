"""Embedding provider infrastructure.

Content vectors and query vectors come from an external model API behind
the EmbeddingProvider protocol.
"""

from careguide.infrastructure.embeddings.exceptions import (
    EmbeddingConfigurationError,
    EmbeddingProviderError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
)
from careguide.infrastructure.embeddings.openai import OpenAIEmbeddingProvider
from careguide.infrastructure.embeddings.protocol import EmbeddingProvider

__all__ = [
    "EmbeddingConfigurationError",
    "EmbeddingProvider",
    "EmbeddingProviderError",
    "EmbeddingRateLimitError",
    "EmbeddingTimeoutError",
    "OpenAIEmbeddingProvider",
]

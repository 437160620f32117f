"""LLM and embedding provider abstraction layer."""

from .provider import (
    LLMProvider,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMResponseError,
    get_provider,
    create_provider_from_config,
    register_provider,
)
from .embeddings import (
    EmbeddingProvider,
    EmbeddingError,
    OpenAIEmbeddingProvider,
    SentenceTransformerEmbeddingProvider,
    create_embedding_provider,
)

# Import providers to register them
from . import openai

__all__ = [
    # Provider base
    "LLMProvider",
    "LLMError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "LLMResponseError",
    "get_provider",
    "create_provider_from_config",
    "register_provider",
    # Embeddings
    "EmbeddingProvider",
    "EmbeddingError",
    "OpenAIEmbeddingProvider",
    "SentenceTransformerEmbeddingProvider",
    "create_embedding_provider",
]

"""Embedding providers for semantic similarity."""

import time
from abc import ABC, abstractmethod
from typing import List, Optional

import requests

from ..config import EmbeddingConfig
from ..utils.logging import get_logger, log_llm_call

logger = get_logger(__name__)


class EmbeddingError(Exception):
    """Raised when an embedding cannot be obtained."""
    pass


class EmbeddingProvider(ABC):
    """Turns a single string into a fixed-length float vector."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """Return the embedding vector for ``text``.

        Raises:
            EmbeddingError: On transport failure or malformed response.
        """
        pass


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Calls ``POST {base_url}/embeddings`` (OpenAI-compatible)."""

    def __init__(self, config: EmbeddingConfig):
        self.config = config

    @property
    def provider_name(self) -> str:
        return "openai"

    def embed(self, text: str) -> List[float]:
        if not text:
            raise EmbeddingError("Missing text")

        start_time = time.time()
        try:
            response = requests.post(
                f"{self.config.base_url.rstrip('/')}/embeddings",
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.config.api_key}"
                },
                json={"model": self.config.model, "input": text, "encoding_format": "float"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            embedding = response.json()["data"][0]["embedding"]
        except requests.exceptions.RequestException as e:
            self._log(start_time, error=str(e))
            raise EmbeddingError(f"Embedding request failed: {e}")
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self._log(start_time, error=f"malformed response: {e}")
            raise EmbeddingError(f"Malformed embedding response: {e}")

        self._log(start_time)
        return [float(x) for x in embedding]

    def _log(self, start_time: float, error: Optional[str] = None) -> None:
        log_llm_call(
            logger=logger,
            provider=self.provider_name,
            model=self.config.model,
            duration_ms=int((time.time() - start_time) * 1000),
            success=error is None,
            operation="embedding",
            error=error,
        )


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Local embeddings via sentence-transformers; the model loads lazily."""

    def __init__(self, model_name: str = "paraphrase-multilingual-MiniLM-L12-v2"):
        self.model_name = model_name
        self._model = None

    @property
    def provider_name(self) -> str:
        return "sentence_transformers"

    @property
    def model(self):
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError as e:
                raise EmbeddingError(
                    "sentence-transformers is not installed. Install with: pip install 'geoword[local]'"
                ) from e
            logger.info(f"Loading embedding model: {self.model_name}")
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed(self, text: str) -> List[float]:
        if not text:
            raise EmbeddingError("Missing text")
        try:
            vector = self.model.encode(text, convert_to_numpy=True, show_progress_bar=False)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Local embedding failed: {e}") from e
        return vector.tolist()


def create_embedding_provider(config: EmbeddingConfig) -> Optional[EmbeddingProvider]:
    """Create the configured embedding provider.

    Returns None for the HTTP provider when no API key is configured.
    """
    if config.provider == "sentence_transformers":
        return SentenceTransformerEmbeddingProvider(config.model)
    if config.provider == "openai":
        if not config.api_key:
            logger.warning("No embedding API key configured, semantic signal disabled")
            return None
        return OpenAIEmbeddingProvider(config)
    raise ValueError(f"Unknown embedding provider: {config.provider}")

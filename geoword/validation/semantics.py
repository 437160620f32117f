"""Semantic signal: embedding similarity to a bank of known Georgian words."""

import threading
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..llm.embeddings import EmbeddingProvider
from ..models import SignalName, SemanticSignal, normalize_word
from ..utils.logging import get_logger
from .base import SignalValidator

logger = get_logger(__name__)

# Common, definitely valid words across greetings, nouns, verbs, adjectives,
# time/place and question words
BASELINE_GEORGIAN_WORDS = (
    'გამარჯობა', 'ნახვამდის', 'მადლობა',
    'სახლი', 'წიგნი', 'მანქანა', 'ადამიანი', 'ქალი', 'კაცი',
    'მიდის', 'ვარ', 'არის', 'ვიცი', 'მინდა',
    'კარგი', 'ცუდი', 'დიდი', 'პატარა', 'ლამაზი',
    'დღეს', 'ხვალ', 'აქ', 'იქ', 'როდის',
    'რა', 'ვინ', 'როგორ', 'რატომ', 'სად',
)

DEFAULT_CACHE_SIZE = 1000

# (minimum average similarity, confidence), checked top-down
SIMILARITY_TIERS = (
    (0.70, 0.90),
    (0.60, 0.75),
    (0.50, 0.60),
)


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Cosine similarity; 0.0 for empty, mismatched or zero-norm vectors."""
    if vec1 is None or vec2 is None:
        return 0.0
    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)
    if a.size == 0 or a.shape != b.shape:
        return 0.0

    norm1 = np.linalg.norm(a)
    norm2 = np.linalg.norm(b)
    if norm1 == 0 or norm2 == 0:
        return 0.0

    return float(np.dot(a, b) / (norm1 * norm2))


class EmbeddingCache:
    """Thread-safe memo of word -> vector.

    Entries are write-once and there is no eviction: once ``max_size`` words
    are cached, new words are simply not stored.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        self.max_size = max_size
        self._vectors: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[List[float]]:
        with self._lock:
            return self._vectors.get(key)

    def put(self, key: str, vector: List[float]) -> bool:
        """Store ``vector`` unless the key exists or the cache is full."""
        with self._lock:
            if key in self._vectors or len(self._vectors) >= self.max_size:
                return False
            self._vectors[key] = vector
            return True

    def clear(self) -> None:
        with self._lock:
            self._vectors.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._vectors)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._vectors


class EmbeddingValidator(SignalValidator):
    """Compares a word's embedding with every baseline word's embedding."""

    def __init__(
        self,
        provider: Optional[EmbeddingProvider],
        cache: Optional[EmbeddingCache] = None,
        baseline_words: Sequence[str] = BASELINE_GEORGIAN_WORDS,
    ):
        self.provider = provider
        self.cache = cache if cache is not None else EmbeddingCache()
        self.baseline_words = tuple(baseline_words)

    @property
    def signal_name(self) -> SignalName:
        return SignalName.SEMANTICS

    def get_embedding(self, word: str) -> List[float]:
        """Cache-first embedding lookup.

        Raises:
            EmbeddingError: If the provider fails.
        """
        key = normalize_word(word)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        vector = self.provider.embed(word)
        self.cache.put(key, vector)
        return vector

    def validate(self, word: str) -> SemanticSignal:
        if not word or self.provider is None:
            return SemanticSignal(False, 0.0, "semantic_error", error="Missing word or API key")

        try:
            word_vector = self.get_embedding(word)
            similarities = [
                (baseline, cosine_similarity(word_vector, self.get_embedding(baseline)))
                for baseline in self.baseline_words
            ]
        except Exception as e:
            logger.warning(f"Semantic validation failed for '{word}': {e}")
            return SemanticSignal(False, 0.0, "semantic_error", error=str(e))

        if not similarities:
            return SemanticSignal(False, 0.0, "semantic_error", error="Empty baseline word bank")

        scores = [score for _, score in similarities]
        avg_similarity = sum(scores) / len(scores)
        most_similar, max_similarity = max(similarities, key=lambda pair: pair[1])

        logger.debug(
            f"Semantics: '{word}' avg={avg_similarity:.3f} max={max_similarity:.3f} closest='{most_similar}'"
        )

        valid, confidence = False, avg_similarity
        for threshold, tier_confidence in SIMILARITY_TIERS:
            if avg_similarity >= threshold:
                valid, confidence = True, tier_confidence
                break

        return SemanticSignal(
            valid,
            confidence,
            "semantic_embedding",
            avg_similarity=avg_similarity,
            max_similarity=max_similarity,
            most_similar=most_similar,
        )

    def clear_cache(self) -> None:
        """Drop every memoized embedding."""
        self.cache.clear()
        logger.info("Embedding cache cleared")

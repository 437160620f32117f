"""Tests for embedding similarity validation."""

import math
import threading

import pytest

from geoword.models import SignalName
from geoword.validation.semantics import (
    BASELINE_GEORGIAN_WORDS,
    EmbeddingCache,
    EmbeddingValidator,
    cosine_similarity,
)
from tests.mocks.mock_llm_provider import MockEmbeddingProvider


class TestCosineSimilarity:
    """Tests for cosine_similarity."""

    def test_identical(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite(self):
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    @pytest.mark.parametrize("a, b", [
        ([], []),
        ([1.0, 0.0], [1.0]),
        ([0.0, 0.0], [1.0, 0.0]),
        (None, [1.0]),
    ])
    def test_degenerate_inputs(self, a, b):
        assert cosine_similarity(a, b) == 0.0


class TestEmbeddingCache:
    """Tests for the bounded, write-once embedding cache."""

    def test_put_and_get(self):
        cache = EmbeddingCache(max_size=2)
        assert cache.put("ა", [1.0])
        assert cache.get("ა") == [1.0]
        assert "ა" in cache

    def test_full_cache_drops_new_entries(self):
        cache = EmbeddingCache(max_size=1)
        assert cache.put("ა", [1.0])
        assert not cache.put("ბ", [2.0])
        assert len(cache) == 1
        assert cache.get("ბ") is None

    def test_entries_are_write_once(self):
        cache = EmbeddingCache(max_size=5)
        cache.put("ა", [1.0])
        assert not cache.put("ა", [9.0])
        assert cache.get("ა") == [1.0]

    def test_concurrent_puts_respect_the_cap(self):
        cache = EmbeddingCache(max_size=5)
        start = threading.Barrier(20)
        stored = []

        def put(i):
            start.wait()
            stored.append(cache.put(f"word-{i}", [float(i)]))

        threads = [threading.Thread(target=put, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 5
        assert stored.count(True) == 5
        assert len(stored) == 20


class TestEmbeddingValidator:
    """Tests for EmbeddingValidator."""

    def test_baseline_bank(self):
        assert len(BASELINE_GEORGIAN_WORDS) == 29
        assert "გამარჯობა" in BASELINE_GEORGIAN_WORDS

    def test_high_similarity(self):
        provider = MockEmbeddingProvider()
        validator = EmbeddingValidator(provider, baseline_words=("სახლი", "წიგნი"))
        signal = validator.validate("ბინა")

        assert signal.name is SignalName.SEMANTICS
        assert signal.valid
        assert signal.confidence == 0.90
        assert signal.source == "semantic_embedding"
        assert signal.avg_similarity == pytest.approx(1.0)
        assert signal.most_similar == "სახლი"

    def test_middle_tier(self):
        y = math.sqrt(1 - 0.65 ** 2)
        provider = MockEmbeddingProvider({"სახლი": [0.65, y], "წიგნი": [0.65, -y]})
        signal = EmbeddingValidator(provider, baseline_words=("სახლი", "წიგნი")).validate("ბინა")
        assert signal.valid
        assert signal.confidence == 0.75

    def test_low_similarity_uses_average_as_confidence(self):
        provider = MockEmbeddingProvider({"სახლი": [0.0, 1.0], "წიგნი": [0.6, 0.8]})
        signal = EmbeddingValidator(provider, baseline_words=("სახლი", "წიგნი")).validate("ხფქწ")

        assert not signal.valid
        assert signal.avg_similarity == pytest.approx(0.3)
        assert signal.confidence == pytest.approx(0.3)
        assert signal.max_similarity == pytest.approx(0.6)
        assert signal.most_similar == "წიგნი"

    def test_negative_similarity_clamps_confidence(self):
        provider = MockEmbeddingProvider({"სახლი": [-1.0, 0.0]})
        signal = EmbeddingValidator(provider, baseline_words=("სახლი",)).validate("ხფქწ")
        assert signal.avg_similarity == pytest.approx(-1.0)
        assert signal.confidence == 0.0

    def test_embeddings_are_cached(self):
        provider = MockEmbeddingProvider()
        validator = EmbeddingValidator(provider, baseline_words=("სახლი", "წიგნი"))
        validator.validate("ბინა")
        validator.validate("ბინა")
        assert len(provider.calls) == 3

        validator.clear_cache()
        validator.validate("ბინა")
        assert len(provider.calls) == 6

    def test_provider_failure_becomes_error_signal(self):
        provider = MockEmbeddingProvider(fail=True)
        signal = EmbeddingValidator(provider).validate("სახლი")
        assert not signal.valid
        assert signal.confidence == 0.0
        assert signal.source == "semantic_error"
        assert signal.error

    def test_missing_provider(self):
        assert EmbeddingValidator(None).validate("სახლი").source == "semantic_error"

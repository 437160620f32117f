"""Tests for the staged validation orchestrator."""

from unittest.mock import Mock

import pytest

from geoword.config import ValidationConfig, ThresholdsConfig
from geoword.llm.provider import LLMError
from geoword.models import (
    SignalName,
    CrowdSignal,
    PatternSignal,
    GPTSignal,
    TranslationSignal,
    SemanticSignal,
)
from geoword.store import StoreError
from geoword.validation import (
    CrowdValidator,
    EmbeddingValidator,
    LLMClassifier,
    RoundTripValidator,
    ValidationOrchestrator,
)
from tests.conftest import record_users
from tests.mocks.mock_llm_provider import (
    MockEmbeddingProvider,
    MockLLMProvider,
    georgian_llm,
)


def build(store, provider=None, embeddings=None, config=None):
    """Orchestrator wired the same way the service wires it."""
    gpt = translation = semantics = None
    if provider is not None:
        gpt = LLMClassifier(provider)
        translation = RoundTripValidator(provider)
    if embeddings is not None:
        semantics = EmbeddingValidator(embeddings, baseline_words=("სახლი", "წიგნი"))
    config = config or ValidationConfig()
    return ValidationOrchestrator(
        crowd=CrowdValidator(store, config.crowd),
        gpt=gpt,
        translation=translation,
        semantics=semantics,
        config=config,
    )


def with_thresholds(**overrides):
    return ValidationConfig(thresholds=ThresholdsConfig(**overrides))


class TestEarlyExits:
    """Each phase can end the run before any later signal is computed."""

    def test_crowd_strong_skips_everything(self, store):
        record_users(store, "გამარჯობა", 10)
        provider = georgian_llm()
        result = build(store, provider).validate("გამარჯობა")

        assert result.valid
        assert result.confidence == 0.95
        assert result.source == "crowd_strong"
        assert result.signal_names == ["crowd"]
        assert provider.call_count == 0

    @pytest.mark.parametrize("word", ["ა", "ააააააა", "hello"])
    def test_patterns_reject_before_llm(self, store, word):
        provider = georgian_llm()
        result = build(store, provider).validate(word)

        assert not result.valid
        assert result.source == "patterns_rejected"
        assert result.signal_names == ["crowd", "patterns"]
        assert result.confidence <= 0.5
        assert provider.call_count == 0

    def test_no_key_fallback_rejects_unknown_word(self, store):
        result = build(store).validate("სახლი")

        # 0 * 0.6 + 1.0 * 0.4
        assert result.source == "free_signals_only"
        assert result.confidence == pytest.approx(0.4)
        assert not result.valid

    def test_no_key_fallback_accepts_crowd_backed_word(self, store):
        record_users(store, "სახლი", 6)
        result = build(store).validate("სახლი")

        # 0.85 * 0.6 + 1.0 * 0.4
        assert result.source == "free_signals_only"
        assert result.confidence == pytest.approx(0.91)
        assert result.valid

    def test_gpt_accepts(self, store):
        provider = georgian_llm(gpt="YES")
        result = build(store, provider).validate("სახლი")

        assert result.valid
        assert result.source == "gpt_validated"
        assert result.confidence == 0.85
        assert result.signal_names == ["crowd", "patterns", "gpt"]
        assert provider.call_count == 1

    def test_gpt_accept_boosted_by_agreement(self, store):
        record_users(store, "სახლი", 3)
        result = build(store, georgian_llm(gpt="YES")).validate("სახლი")
        assert result.source == "gpt_validated"
        assert result.confidence == pytest.approx(0.90)

    def test_boost_is_capped(self, store):
        record_users(store, "სახლი", 3)
        config = with_thresholds(agreement_boost=0.5)
        result = build(store, georgian_llm(gpt="YES"), config=config).validate("სახლი")
        assert result.confidence == pytest.approx(0.98)

    def test_gpt_rejects_with_weak_patterns(self, store):
        config = with_thresholds(pattern_reject=0.3)
        result = build(store, georgian_llm(gpt="NO"), config=config).validate("ა")

        assert not result.valid
        assert result.source == "gpt_rejected"
        assert result.confidence == pytest.approx(0.5)

    def test_gpt_translation_agreement(self, store):
        config = with_thresholds(gpt_accept=0.9)
        provider = georgian_llm(gpt="YES", english="house", georgian="სახლი")
        result = build(store, provider, config=config).validate("სახლი")

        assert result.valid
        assert result.source == "gpt_translation_agreement"
        assert result.confidence == pytest.approx((0.85 + 0.90) / 2)
        assert result.signal_names == ["crowd", "patterns", "gpt", "translation"]


class TestFusion:
    """Weighted fusion over every collected signal."""

    def test_tied_votes_are_invalid(self, store):
        provider = georgian_llm(gpt="NO", english="house", georgian="სახლი")
        result = build(store, provider).validate("სახლი")

        assert result.source == "master_validation"
        assert not result.valid
        assert result.stats.valid_count == 2
        assert result.stats.invalid_count == 2
        # (0*0.10 + 1.0*0.10 + 0.15*0.35 + 0.9*0.25) / 0.80
        assert result.stats.weighted_confidence == pytest.approx(0.471875)
        assert result.confidence == pytest.approx(0.471875)

    def test_majority_and_confidence_accept(self, store):
        provider = georgian_llm(gpt="NO", english="house", georgian="სახლი")
        result = build(store, provider, embeddings=MockEmbeddingProvider()).validate("სახლი")

        assert result.source == "master_validation"
        assert result.signal_names == ["crowd", "patterns", "gpt", "translation", "semantics"]
        assert result.valid
        assert result.stats.valid_count == 3
        assert result.confidence == pytest.approx(0.5575)

    def test_majority_without_confidence_is_invalid(self, store):
        config = with_thresholds(fusion_min_confidence=0.6)
        provider = georgian_llm(gpt="NO", english="house", georgian="სახლი")
        result = build(store, provider, embeddings=MockEmbeddingProvider(), config=config).validate("სახლი")
        assert result.stats.valid_count > result.stats.invalid_count
        assert not result.valid

    def test_invalid_majority_outweighs_high_confidence(self, validation_config):
        """Three invalid votes against two valid ones reject even a confident mix."""
        def stub(signal):
            return Mock(**{"validate.return_value": signal})

        orchestrator = ValidationOrchestrator(
            crowd=stub(CrowdSignal(True, 0.85, "crowd_medium", unique_users=5)),
            patterns=stub(PatternSignal(False, 0.9, "linguistic_patterns")),
            gpt=stub(GPTSignal(False, 0.9, "gpt_validation")),
            translation=stub(TranslationSignal(False, 0.8, "translation_roundtrip")),
            semantics=stub(SemanticSignal(True, 0.9, "semantic_embedding")),
            config=validation_config,
        )
        result = orchestrator.validate("სახლი")

        assert result.source == "master_validation"
        assert result.signal_names == ["crowd", "patterns", "gpt", "translation", "semantics"]
        assert (result.stats.valid_count, result.stats.invalid_count) == (2, 3)
        expected = (0.85 * 0.25 + 0.9 * 0.10 + 0.9 * 0.35 + 0.8 * 0.25 + 0.9 * 0.20) / 1.15
        assert result.stats.weighted_confidence == pytest.approx(expected)
        assert result.stats.weighted_confidence >= 0.5
        assert not result.valid

    def test_crowd_weight_depends_on_confidence(self, validation_config):
        orchestrator = ValidationOrchestrator(crowd=Mock(), config=validation_config)
        strong = CrowdSignal(True, 0.85, "crowd_medium")
        weak = CrowdSignal(True, 0.60, "crowd_weak")
        assert orchestrator.signal_weight(strong) == 0.25
        assert orchestrator.signal_weight(weak) == 0.10

    def test_fuse_renormalizes_weights(self, validation_config):
        orchestrator = ValidationOrchestrator(crowd=Mock(), config=validation_config)
        stats = orchestrator.fuse([
            PatternSignal(True, 1.0, "linguistic_patterns"),
            GPTSignal(True, 0.85, "gpt_validation"),
            TranslationSignal(False, 0.2, "translation_roundtrip"),
            SemanticSignal(True, 0.6, "semantic_embedding"),
        ])
        expected = (1.0 * 0.10 + 0.85 * 0.35 + 0.2 * 0.25 + 0.6 * 0.20) / 0.90
        assert stats.weighted_confidence == pytest.approx(expected)
        assert stats.avg_confidence == pytest.approx((1.0 + 0.85 + 0.2 + 0.6) / 4)
        assert (stats.valid_count, stats.invalid_count) == (3, 1)

    def test_fuse_empty(self, validation_config):
        stats = ValidationOrchestrator(crowd=Mock(), config=validation_config).fuse([])
        assert stats.weighted_confidence == 0.0
        assert stats.valid_count == 0


class TestFailureHandling:
    """Dependency failures degrade signals instead of raising."""

    def test_store_failure(self):
        store = Mock()
        store.get_stats.side_effect = StoreError("locked")
        result = build(store).validate("სახლი")

        crowd = result.get_signal(SignalName.CROWD)
        assert crowd.source == "crowd_error"
        assert result.source == "free_signals_only"

    def test_llm_failure_falls_through_to_fusion(self, store):
        provider = MockLLMProvider(default=LLMError("HTTP 503"))
        result = build(store, provider).validate("სახლი")

        assert result.source == "master_validation"
        assert not result.valid
        assert result.get_signal(SignalName.GPT).source == "gpt_error"
        assert result.get_signal(SignalName.TRANSLATION).source == "translation_error"

    def test_embedding_failure(self, store):
        provider = georgian_llm(gpt="NO", english="house", georgian="სახლი")
        result = build(store, provider, embeddings=MockEmbeddingProvider(fail=True)).validate("სახლი")
        assert result.get_signal(SignalName.SEMANTICS).source == "semantic_error"
        assert result.source == "master_validation"

    def test_unexpected_exception_returns_best_effort(self):
        crowd = Mock()
        crowd.validate.side_effect = RuntimeError("boom")
        result = ValidationOrchestrator(crowd=crowd).validate("სახლი")

        assert result.source == "master_validation_error"
        assert not result.valid
        assert result.confidence == 0.0
        assert result.error == "boom"

    @pytest.mark.parametrize("word", ["", "   ", None])
    def test_missing_word(self, store, word):
        result = build(store).validate(word)
        assert not result.valid
        assert result.source == "master_validation"
        assert result.error == "Missing word"

    @pytest.mark.parametrize("word", ["სახლი", "ა", "xyz", "ბბბბბ", "გამარჯობა"])
    def test_confidence_in_bounds(self, store, word):
        result = build(store, georgian_llm(gpt="NO", georgian="ქალაქი")).validate(word)
        assert 0.0 <= result.confidence <= 1.0
        assert result.elapsed_ms >= 0

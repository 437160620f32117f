"""Tests for the LLM classifier and the translation round trip."""

import pytest

from geoword.llm.provider import LLMError, LLMTimeoutError
from geoword.models import SignalName
from geoword.validation import LLMClassifier, RoundTripValidator
from tests.mocks.mock_llm_provider import CLASSIFIER_KEY, MockLLMProvider, georgian_llm


class TestLLMClassifier:
    """Tests for the YES/NO classifier."""

    def test_yes_is_valid(self):
        provider = MockLLMProvider({CLASSIFIER_KEY: "YES"})
        signal = LLMClassifier(provider).validate("გამარჯობა")

        assert signal.name is SignalName.GPT
        assert signal.valid
        assert signal.confidence == 0.85
        assert signal.source == "gpt_validation"
        assert signal.answer == "YES"

    def test_no_is_invalid_with_low_confidence(self):
        provider = MockLLMProvider({CLASSIFIER_KEY: "no."})
        signal = LLMClassifier(provider).validate("ხფქწ")
        assert not signal.valid
        assert signal.confidence == 0.15

    def test_unexpected_answer(self):
        provider = MockLLMProvider({CLASSIFIER_KEY: "Maybe"})
        signal = LLMClassifier(provider).validate("სახლი")
        assert not signal.valid
        assert signal.confidence == 0.0
        assert signal.source == "gpt_validation"

    def test_request_parameters(self):
        """The classifier sends a short, low-temperature request with the word quoted."""
        provider = MockLLMProvider({CLASSIFIER_KEY: "YES"})
        LLMClassifier(provider).validate("სახლი")

        call = provider.call_history[0]
        assert '"სახლი"' in call["user_prompt"]
        assert call["temperature"] == 0.1
        assert call["max_tokens"] == 10
        assert call["timeout"] == 10.0

    def test_provider_error_becomes_error_signal(self):
        provider = MockLLMProvider({CLASSIFIER_KEY: LLMTimeoutError("timed out")})
        signal = LLMClassifier(provider).validate("სახლი")
        assert not signal.valid
        assert signal.confidence == 0.0
        assert signal.source == "gpt_error"
        assert "timed out" in signal.error

    def test_unexpected_exception_becomes_error_signal(self):
        provider = MockLLMProvider({CLASSIFIER_KEY: RuntimeError("boom")})
        assert LLMClassifier(provider).validate("სახლი").source == "gpt_error"

    def test_missing_provider(self):
        signal = LLMClassifier(None).validate("სახლი")
        assert signal.source == "gpt_error"
        assert signal.error == "Missing word or API key"


class TestRoundTripValidator:
    """Tests for the Georgian -> English -> Georgian round trip."""

    def test_exact_round_trip(self):
        provider = georgian_llm(english="house", georgian="სახლი")
        signal = RoundTripValidator(provider).validate("სახლი")

        assert signal.name is SignalName.TRANSLATION
        assert signal.valid
        assert signal.confidence == 0.90
        assert signal.source == "translation_roundtrip"
        assert signal.translation == "house"
        assert signal.round_trip == "სახლი"

    def test_round_trip_comparison_is_normalized(self):
        provider = georgian_llm(english="house", georgian="  სახლი \n")
        assert RoundTripValidator(provider).validate("სახლი").confidence == 0.90

    def test_close_round_trip(self):
        provider = georgian_llm(english="of the house", georgian="სახლის")
        signal = RoundTripValidator(provider).validate("სახლი")
        assert signal.valid
        assert signal.confidence == 0.70

    def test_mismatched_round_trip(self):
        provider = georgian_llm(english="city", georgian="ქალაქი")
        signal = RoundTripValidator(provider).validate("სახლი")
        assert not signal.valid
        assert signal.confidence == 0.20

    def test_single_character_containment_is_not_close(self):
        provider = georgian_llm(english="and", georgian="ა")
        assert RoundTripValidator(provider).validate("სახლი").confidence == 0.20

    def test_invalid_marker_stops_after_first_call(self):
        provider = georgian_llm(english="INVALID")
        signal = RoundTripValidator(provider).validate("ხფქწ")

        assert not signal.valid
        assert signal.confidence == 0.10
        assert signal.source == "translation_invalid"
        assert provider.call_count == 1

    def test_backward_prompt_uses_english(self):
        provider = georgian_llm(english="house", georgian="სახლი")
        RoundTripValidator(provider).validate("სახლი")

        assert provider.call_count == 2
        assert '"house"' in provider.call_history[1]["user_prompt"]
        assert provider.call_history[1]["max_tokens"] == 50

    def test_provider_error_becomes_error_signal(self):
        provider = georgian_llm(english="house", georgian=LLMError("HTTP 500"))
        signal = RoundTripValidator(provider).validate("სახლი")
        assert not signal.valid
        assert signal.confidence == 0.0
        assert signal.source == "translation_error"

    @pytest.mark.parametrize("word, provider", [("", georgian_llm()), ("სახლი", None)])
    def test_missing_inputs(self, word, provider):
        assert RoundTripValidator(provider).validate(word).source == "translation_error"

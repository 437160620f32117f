"""Translation round-trip signal: Georgian -> English -> Georgian."""

from typing import Optional

from ..llm.provider import LLMProvider, LLMError
from ..models import SignalName, TranslationSignal, normalize_word
from ..utils.logging import get_logger
from ..utils.prompts import load_prompt, format_prompt
from .base import SignalValidator

logger = get_logger(__name__)

INVALID_MARKER = "INVALID"
INVALID_CONFIDENCE = 0.10
EXACT_CONFIDENCE = 0.90
CLOSE_CONFIDENCE = 0.70
MISMATCH_CONFIDENCE = 0.20
MIN_CLOSE_LENGTH = 2


class RoundTripValidator(SignalValidator):
    """Translates the word to English and back, then compares the strings.

    A real word tends to survive the round trip; gibberish is either refused
    outright (the model answers INVALID) or comes back as something else.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider],
        temperature: float = 0.1,
        max_tokens: int = 50,
        timeout: float = 10.0,
    ):
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def signal_name(self) -> SignalName:
        return SignalName.TRANSLATION

    def validate(self, word: str) -> TranslationSignal:
        if not word or self.provider is None:
            return TranslationSignal(False, 0.0, "translation_error", error="Missing word or API key")

        try:
            english = self._ask("translate_to_english", word)
            if INVALID_MARKER in english.upper():
                logger.debug(f"Translation: '{word}' refused as invalid")
                return TranslationSignal(False, INVALID_CONFIDENCE, "translation_invalid")
            round_trip = self._ask("translate_to_georgian", english)
        except LLMError as e:
            logger.warning(f"Translation validation failed for '{word}': {e}")
            return TranslationSignal(False, 0.0, "translation_error", error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected translation failure for '{word}'")
            return TranslationSignal(False, 0.0, "translation_error", error=str(e))

        original = normalize_word(word)
        returned = normalize_word(round_trip)

        if original == returned:
            valid, confidence = True, EXACT_CONFIDENCE
        elif (original in returned or returned in original) and len(returned) >= MIN_CLOSE_LENGTH:
            valid, confidence = True, CLOSE_CONFIDENCE
        else:
            valid, confidence = False, MISMATCH_CONFIDENCE

        logger.debug(f"Translation: {word} -> {english} -> {round_trip} ({confidence:.2f})")
        return TranslationSignal(
            valid,
            confidence,
            "translation_roundtrip",
            translation=english,
            round_trip=round_trip,
        )

    def _ask(self, prompt_name: str, word: str) -> str:
        answer = self.provider.call(
            system_prompt=load_prompt(f"{prompt_name}_system"),
            user_prompt=format_prompt(f"{prompt_name}_user", word=word),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
        )
        return (answer or "").strip()

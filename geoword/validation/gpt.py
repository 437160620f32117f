"""LLM signal: ask a chat model for a YES/NO judgment."""

from typing import Optional

from ..llm.provider import LLMProvider, LLMError
from ..models import SignalName, GPTSignal
from ..utils.logging import get_logger
from ..utils.prompts import load_prompt, format_prompt
from .base import SignalValidator

logger = get_logger(__name__)

YES_CONFIDENCE = 0.85
NO_CONFIDENCE = 0.15  # Low confidence = probably invalid


class LLMClassifier(SignalValidator):
    """Binary classifier backed by a chat-completion model."""

    def __init__(
        self,
        provider: Optional[LLMProvider],
        temperature: float = 0.1,
        max_tokens: int = 10,
        timeout: float = 10.0,
    ):
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def signal_name(self) -> SignalName:
        return SignalName.GPT

    def validate(self, word: str) -> GPTSignal:
        if not word or self.provider is None:
            return GPTSignal(False, 0.0, "gpt_error", error="Missing word or API key")

        try:
            raw = self.provider.call(
                system_prompt=load_prompt("gpt_classify_system"),
                user_prompt=format_prompt("gpt_classify_user", word=word),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except LLMError as e:
            logger.warning(f"GPT validation failed for '{word}': {e}")
            return GPTSignal(False, 0.0, "gpt_error", error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected GPT provider failure for '{word}'")
            return GPTSignal(False, 0.0, "gpt_error", error=str(e))

        answer = (raw or "").strip().upper()
        if "YES" in answer:
            return GPTSignal(True, YES_CONFIDENCE, "gpt_validation", answer=answer)
        if "NO" in answer:
            return GPTSignal(False, NO_CONFIDENCE, "gpt_validation", answer=answer)

        logger.warning(f"Unexpected GPT answer for '{word}': {answer!r}")
        return GPTSignal(False, 0.0, "gpt_validation", answer=answer)

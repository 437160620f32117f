"""High-level entry point wiring stores, providers and validators together."""

import threading
from typing import List, Optional, Sequence

from .config import Config
from .llm import create_provider_from_config, create_embedding_provider
from .models import ValidationResult, WordStat
from .store import (
    WordStatsStore,
    VerdictCache,
    create_word_stats_store,
    create_verdict_cache,
)
from .utils.logging import get_logger
from .validation import (
    BatchValidator,
    CrowdValidator,
    EmbeddingCache,
    EmbeddingValidator,
    LLMClassifier,
    PatternValidator,
    RoundTripValidator,
    ValidationOrchestrator,
)

logger = get_logger(__name__)


class WordValidationService:
    """Validates words with verdict caching and tracks word usage.

    Example:
        service = WordValidationService.from_config(load_config())
        service.track_usage("გამარჯობა", "user-1")
        result = service.validate("გამარჯობა")
    """

    def __init__(
        self,
        orchestrator: ValidationOrchestrator,
        store: WordStatsStore,
        verdict_cache: Optional[VerdictCache] = None,
        config: Optional[Config] = None,
    ):
        self.orchestrator = orchestrator
        self.store = store
        self.verdict_cache = verdict_cache
        self.config = config or Config()
        self.batch = BatchValidator(self.validate, self.config.batch)

    @classmethod
    def from_config(cls, config: Config) -> "WordValidationService":
        """Build the full validation stack from configuration."""
        store = create_word_stats_store(config.store)
        llm = create_provider_from_config(config.llm)
        embeddings = create_embedding_provider(config.embeddings)

        gpt = translation = None
        if llm is not None:
            timeout = llm.config.timeout
            gpt = LLMClassifier(llm, temperature=llm.config.temperature, timeout=timeout)
            translation = RoundTripValidator(
                llm,
                temperature=llm.config.temperature,
                max_tokens=llm.config.max_tokens,
                timeout=timeout,
            )

        semantics = None
        if embeddings is not None:
            semantics = EmbeddingValidator(embeddings, EmbeddingCache(config.embeddings.cache_size))

        orchestrator = ValidationOrchestrator(
            crowd=CrowdValidator(store, config.validation.crowd),
            patterns=PatternValidator(),
            gpt=gpt,
            translation=translation,
            semantics=semantics,
            config=config.validation,
        )
        return cls(
            orchestrator,
            store,
            verdict_cache=create_verdict_cache(config.store, config.verdict_cache),
            config=config,
        )

    def validate(self, word: str, use_cache: bool = True) -> ValidationResult:
        """Validate one word, consulting and filling the verdict cache."""
        if use_cache and self.verdict_cache is not None:
            cached = self.verdict_cache.get(word)
            if cached is not None:
                logger.debug(f"Verdict cache hit for '{word}'")
                return cached

        result = self.orchestrator.validate(word)
        if self.verdict_cache is not None and self._is_cacheable(result):
            self.verdict_cache.put(result)
        return result

    def validate_many(
        self,
        words: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ValidationResult]:
        """Validate a list of words sequentially."""
        return self.batch.validate_all(words, cancel_event)

    def track_usage(self, word: str, user_id: str) -> None:
        """Record that ``user_id`` used ``word``. Never raises on store failure.

        New usage can only strengthen the crowd signal, so a cached rejection
        is dropped and the word is re-validated on its next lookup. Cached
        acceptances, seeded words included, are kept.
        """
        self.store.record_usage(word, user_id)
        if self.verdict_cache is None:
            return
        cached = self.verdict_cache.get(word)
        if cached is not None and not cached.valid:
            self.verdict_cache.invalidate(word)

    def get_stats(self, word: str) -> Optional[WordStat]:
        return self.store.get_stats(word)

    @staticmethod
    def _is_cacheable(result: ValidationResult) -> bool:
        # Verdicts reached while a dependency was failing are not kept
        if result.error or not result.word:
            return False
        return not any(signal.error for signal in result.signals)

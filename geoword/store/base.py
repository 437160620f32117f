"""Storage interfaces for word usage statistics and cached verdicts."""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from ..models import WordStat, ValidationResult, normalize_word
from ..utils.logging import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Raised by storage backends when a read or write fails."""
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WordStatsStore(ABC):
    """Durable per-word usage counter.

    Backends implement the keyed primitives; normalization and the
    non-fatal write policy live here so every backend behaves the same.
    """

    @abstractmethod
    def _record_usage(self, key: str, word: str, user_id: str, seen_at: datetime) -> None:
        """Atomically bump the counter, add the user and stamp timestamps.

        ``first_seen`` must only be set when the record is new.
        """
        pass

    @abstractmethod
    def _get_stats(self, key: str) -> Optional[WordStat]:
        pass

    def record_usage(self, word: str, user_id: str) -> None:
        """Record that ``user_id`` used ``word``. Never raises on store failure."""
        if not word or not user_id:
            logger.warning("record_usage: missing word or user_id")
            return

        key = normalize_word(word)
        if not key:
            logger.warning("record_usage: word is blank after normalization")
            return

        try:
            self._record_usage(key, word, user_id, utc_now())
        except StoreError as e:
            logger.error(f"Failed to track '{word}': {e}")
            return
        logger.debug(f"Tracked '{word}' by user {user_id}")

    def get_stats(self, word: str) -> Optional[WordStat]:
        """Look up statistics for ``word``.

        Returns:
            The stats, or None when the word was never recorded.

        Raises:
            StoreError: If the backend read fails.
        """
        if not word:
            return None
        key = normalize_word(word)
        if not key:
            return None
        return self._get_stats(key)


class VerdictCache(ABC):
    """Time-limited cache of final validation verdicts."""

    def __init__(self, ttl_days: int = 30):
        self.ttl_days = ttl_days

    @abstractmethod
    def _get(self, key: str) -> Optional[Tuple[dict, float]]:
        """Return (payload, expires_at epoch seconds) or None."""
        pass

    @abstractmethod
    def _put(self, key: str, payload: dict, expires_at: float) -> None:
        pass

    @abstractmethod
    def _delete(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def get(self, word: str) -> Optional[ValidationResult]:
        """Return the cached verdict for ``word`` if present and not expired."""
        if not word:
            return None
        key = normalize_word(word)
        try:
            entry = self._get(key)
            if entry is None:
                return None
            payload, expires_at = entry
            if expires_at <= time.time():
                self._delete(key)
                logger.debug(f"Verdict for '{word}' expired")
                return None
            result = ValidationResult.from_dict(payload)
        except StoreError as e:
            logger.error(f"Verdict cache read failed for '{word}': {e}")
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Dropping malformed verdict for '{word}': {e!r}")
            self.invalidate(word)
            return None

        result.cached = True
        return result

    def invalidate(self, word: str) -> None:
        """Remove any cached verdict for ``word``. Never raises on store failure."""
        if not word:
            return
        try:
            self._delete(normalize_word(word))
        except StoreError as e:
            logger.error(f"Verdict cache delete failed for '{word}': {e}")

    def put(self, result: ValidationResult, ttl_days: Optional[int] = None) -> None:
        """Store ``result`` for ``ttl_days`` (defaults to the cache TTL)."""
        if not result.word:
            return
        days = self.ttl_days if ttl_days is None else ttl_days
        payload = result.to_dict()
        payload.pop("cached", None)
        try:
            self._put(normalize_word(result.word), payload, time.time() + days * 86400)
        except StoreError as e:
            logger.error(f"Verdict cache write failed for '{result.word}': {e}")

    def seed(self, words: Iterable[str], confidence: float = 0.95) -> int:
        """Store curated words as valid verdicts with source ``seed``.

        Returns:
            Number of words seeded.
        """
        seeded = 0
        for word in words:
            if not word or not word.strip():
                continue
            self.put(ValidationResult(word=word, valid=True, confidence=confidence, source="seed"))
            seeded += 1
        logger.info(f"Seeded {seeded} verdicts")
        return seeded

"""Crowd signal: how many distinct users have used a word."""

from typing import Optional

from ..config import CrowdTiersConfig
from ..models import SignalName, CrowdSignal
from ..store.base import WordStatsStore, StoreError
from ..utils.logging import get_logger
from .base import SignalValidator

logger = get_logger(__name__)


class CrowdValidator(SignalValidator):
    """Maps the distinct-user count from the stats store to a confidence tier."""

    def __init__(self, store: WordStatsStore, tiers: Optional[CrowdTiersConfig] = None):
        self.store = store
        self.tiers = tiers or CrowdTiersConfig()

    @property
    def signal_name(self) -> SignalName:
        return SignalName.CROWD

    def validate(self, word: str) -> CrowdSignal:
        if not word:
            return CrowdSignal(valid=False, confidence=0.0, source="crowd_insufficient")

        try:
            stats = self.store.get_stats(word)
        except StoreError as e:
            logger.error(f"Crowd lookup failed for '{word}': {e}")
            return CrowdSignal(valid=False, confidence=0.0, source="crowd_error", error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected store failure for '{word}'")
            return CrowdSignal(valid=False, confidence=0.0, source="crowd_error", error=str(e))

        users = stats.unique_users if stats else 0
        signal = self.classify(users)
        logger.debug(f"Crowd: '{word}' used by {users} users -> {signal.source}")
        return signal

    def classify(self, unique_users: int) -> CrowdSignal:
        """Map a distinct-user count to its tier."""
        tiers = self.tiers
        if unique_users >= tiers.strong_users:
            return CrowdSignal(True, tiers.strong_confidence, "crowd_strong", unique_users=unique_users)
        if unique_users >= tiers.medium_users:
            return CrowdSignal(True, tiers.medium_confidence, "crowd_medium", unique_users=unique_users)
        if unique_users >= tiers.weak_users:
            return CrowdSignal(True, tiers.weak_confidence, "crowd_weak", unique_users=unique_users)
        return CrowdSignal(False, 0.0, "crowd_insufficient", unique_users=unique_users)

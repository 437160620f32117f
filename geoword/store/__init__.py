"""Storage backends for word statistics and cached verdicts."""

from typing import Optional

from ..config import StoreConfig, VerdictCacheConfig
from .base import WordStatsStore, VerdictCache, StoreError
from .memory import MemoryWordStatsStore, MemoryVerdictCache
from .sqlite import SQLiteWordStatsStore, SQLiteVerdictCache


def create_word_stats_store(config: StoreConfig) -> WordStatsStore:
    """Create the configured word statistics backend."""
    if config.backend == "memory":
        return MemoryWordStatsStore()
    if config.backend == "sqlite":
        return SQLiteWordStatsStore(config.path)
    raise ValueError(f"Unknown store backend: {config.backend}")


def create_verdict_cache(store_config: StoreConfig, cache_config: VerdictCacheConfig) -> Optional[VerdictCache]:
    """Create the verdict cache on the same backend as the stats store."""
    if not cache_config.enabled:
        return None
    if store_config.backend == "memory":
        return MemoryVerdictCache(cache_config.ttl_days)
    return SQLiteVerdictCache(store_config.path, ttl_days=cache_config.ttl_days)


__all__ = [
    "WordStatsStore",
    "VerdictCache",
    "StoreError",
    "MemoryWordStatsStore",
    "MemoryVerdictCache",
    "SQLiteWordStatsStore",
    "SQLiteVerdictCache",
    "create_word_stats_store",
    "create_verdict_cache",
]

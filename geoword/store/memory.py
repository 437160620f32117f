"""In-process, thread-safe storage backends."""

import threading
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..models import WordStat
from .base import WordStatsStore, VerdictCache


class MemoryWordStatsStore(WordStatsStore):
    """Word statistics held in a dict guarded by a lock."""

    def __init__(self):
        self._stats: Dict[str, WordStat] = {}
        self._lock = threading.Lock()

    def _record_usage(self, key: str, word: str, user_id: str, seen_at: datetime) -> None:
        with self._lock:
            stat = self._stats.get(key)
            if stat is None:
                stat = WordStat(word=word, key=key, first_seen=seen_at)
                self._stats[key] = stat
            stat.word = word
            stat.usage_count += 1
            stat.user_ids.add(user_id)
            stat.last_seen = seen_at

    def _get_stats(self, key: str) -> Optional[WordStat]:
        with self._lock:
            stat = self._stats.get(key)
            if stat is None:
                return None
            # Copy so callers never see later mutations
            return WordStat(
                word=stat.word,
                key=stat.key,
                usage_count=stat.usage_count,
                user_ids=set(stat.user_ids),
                first_seen=stat.first_seen,
                last_seen=stat.last_seen,
            )

    def __len__(self) -> int:
        return len(self._stats)


class MemoryVerdictCache(VerdictCache):
    """Verdict cache held in a dict guarded by a lock."""

    def __init__(self, ttl_days: int = 30):
        super().__init__(ttl_days)
        self._entries: Dict[str, Tuple[dict, float]] = {}
        self._lock = threading.Lock()

    def _get(self, key: str) -> Optional[Tuple[dict, float]]:
        with self._lock:
            return self._entries.get(key)

    def _put(self, key: str, payload: dict, expires_at: float) -> None:
        with self._lock:
            self._entries[key] = (payload, expires_at)

    def _delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

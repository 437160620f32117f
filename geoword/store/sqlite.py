"""SQLite-backed storage for word statistics and cached verdicts.

A connection is opened per operation, so instances can be shared across
threads. Each write is a single transaction of upsert statements, which keeps
the usage counter and user set consistent under concurrent writers.
"""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from ..models import WordStat
from ..utils.logging import get_logger
from .base import WordStatsStore, VerdictCache, StoreError

logger = get_logger(__name__)


class _SQLiteBase:
    """Connection handling shared by the SQLite backends."""

    SCHEMA = ""

    def __init__(self, db_path: str = "geoword.db", timeout: float = 5.0):
        if db_path == ":memory:":
            raise ValueError("SQLite backends need a file path; use the memory backend instead")
        self.db_path = str(db_path)
        self.timeout = timeout
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open {self.db_path}: {e}")

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            conn.executescript(self.SCHEMA)
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to initialize {self.db_path}: {e}")
        finally:
            conn.close()


class SQLiteWordStatsStore(_SQLiteBase, WordStatsStore):
    """Word statistics in two tables: counters and (word, user) pairs."""

    SCHEMA = '''
        CREATE TABLE IF NOT EXISTS word_stats (
            key TEXT PRIMARY KEY,
            word TEXT NOT NULL,
            usage_count INTEGER NOT NULL DEFAULT 0,
            first_seen TEXT NOT NULL,
            last_seen TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS word_users (
            key TEXT NOT NULL,
            user_id TEXT NOT NULL,
            PRIMARY KEY (key, user_id)
        );
    '''

    def _record_usage(self, key: str, word: str, user_id: str, seen_at: datetime) -> None:
        timestamp = seen_at.isoformat()
        conn = self._connect()
        try:
            conn.execute('''
                INSERT INTO word_stats (key, word, usage_count, first_seen, last_seen)
                VALUES (?, ?, 1, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    usage_count = usage_count + 1,
                    word = excluded.word,
                    last_seen = excluded.last_seen
            ''', (key, word, timestamp, timestamp))
            conn.execute(
                'INSERT OR IGNORE INTO word_users (key, user_id) VALUES (?, ?)',
                (key, user_id)
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to record usage of '{key}': {e}")
        finally:
            conn.close()

    def _get_stats(self, key: str) -> Optional[WordStat]:
        conn = self._connect()
        try:
            row = conn.execute(
                'SELECT word, usage_count, first_seen, last_seen FROM word_stats WHERE key = ?',
                (key,)
            ).fetchone()
            if row is None:
                return None
            users = conn.execute(
                'SELECT user_id FROM word_users WHERE key = ?', (key,)
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read stats for '{key}': {e}")
        finally:
            conn.close()

        word, usage_count, first_seen, last_seen = row
        return WordStat(
            word=word,
            key=key,
            usage_count=usage_count,
            user_ids={user_id for (user_id,) in users},
            first_seen=datetime.fromisoformat(first_seen),
            last_seen=datetime.fromisoformat(last_seen),
        )


class SQLiteVerdictCache(_SQLiteBase, VerdictCache):
    """Verdicts stored as JSON payloads with an expiry timestamp."""

    SCHEMA = '''
        CREATE TABLE IF NOT EXISTS verdicts (
            key TEXT PRIMARY KEY,
            payload TEXT NOT NULL,
            expires_at REAL NOT NULL
        );
    '''

    def __init__(self, db_path: str = "geoword.db", ttl_days: int = 30, timeout: float = 5.0):
        VerdictCache.__init__(self, ttl_days)
        _SQLiteBase.__init__(self, db_path, timeout)

    def _get(self, key: str) -> Optional[Tuple[dict, float]]:
        conn = self._connect()
        try:
            row = conn.execute(
                'SELECT payload, expires_at FROM verdicts WHERE key = ?', (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read verdict for '{key}': {e}")
        finally:
            conn.close()

        if row is None:
            return None
        try:
            return json.loads(row[0]), row[1]
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt verdict payload for '{key}': {e}")

    def _put(self, key: str, payload: dict, expires_at: float) -> None:
        self._execute(
            'INSERT OR REPLACE INTO verdicts (key, payload, expires_at) VALUES (?, ?, ?)',
            (key, json.dumps(payload, ensure_ascii=False), expires_at),
        )

    def _delete(self, key: str) -> None:
        self._execute('DELETE FROM verdicts WHERE key = ?', (key,))

    def clear(self) -> None:
        self._execute('DELETE FROM verdicts', ())
        logger.info("Verdict cache cleared")

    def _execute(self, sql: str, params: tuple) -> None:
        conn = self._connect()
        try:
            conn.execute(sql, params)
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Verdict cache write failed: {e}")
        finally:
            conn.close()

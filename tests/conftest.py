"""Shared fixtures for unit tests."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from geoword.config import ValidationConfig
from geoword.store import MemoryWordStatsStore, MemoryVerdictCache


@pytest.fixture
def store():
    """Empty in-memory word statistics store."""
    return MemoryWordStatsStore()


@pytest.fixture
def verdict_cache():
    """Empty in-memory verdict cache."""
    return MemoryVerdictCache(ttl_days=30)


@pytest.fixture
def validation_config():
    """Validation config with default tiers, weights and thresholds."""
    return ValidationConfig()


def record_users(store, word, count):
    """Record ``count`` distinct users for ``word``."""
    for i in range(count):
        store.record_usage(word, f"user-{i}")

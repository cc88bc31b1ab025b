# tests/conftest.py
"""
Shared pytest fixtures: a default access key in the environment, a fresh
in-memory rate store per test, and a clean settings cache.
"""
import os

import pytest

os.environ.setdefault("FIXER_API_KEY", "test_access_key_123456")

from fxsync.adapters.persistence.rate_store import RateStore  # noqa: E402
from fxsync.config.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    rate_store = RateStore.from_url("sqlite://")
    rate_store.create_schema()
    yield rate_store
    rate_store.dispose()

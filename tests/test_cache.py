"""
Tests for the in-memory cache
"""
import pytest
from sqlalchemy.orm import Session

from app.core import cache as cache_module
from app.core.cache import cached, clear_cache
from app.core.config import settings


@pytest.fixture(autouse=True)
def enable_cache(monkeypatch):
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    clear_cache()
    yield
    clear_cache()


class TestCache:
    """Tests for the cached decorator"""

    def test_sync_results_cached(self):
        calls = []

        @cached(key_prefix="square")
        def square(x):
            calls.append(x)
            return x * x

        assert square(3) == 9
        assert square(3) == 9
        assert square(4) == 16
        assert calls == [3, 4]

    def test_session_not_part_of_key(self, db_session):
        calls = []

        @cached(key_prefix="count")
        def count(db):
            calls.append(db)
            return len(calls)

        other_session = Session()
        try:
            assert count(db_session) == 1
            assert count(other_session) == 1
        finally:
            other_session.close()
        assert len(calls) == 1

    def test_disabled_cache_bypassed(self, monkeypatch):
        monkeypatch.setattr(settings, "CACHE_ENABLED", False)
        calls = []

        @cached(key_prefix="noop")
        def value():
            calls.append(1)
            return len(calls)

        assert value() == 1
        assert value() == 2

    @pytest.mark.asyncio
    async def test_async_results_cached(self):
        calls = []

        @cached(key_prefix="async")
        async def double(x):
            calls.append(x)
            return x * 2

        assert await double(2) == 4
        assert await double(2) == 4
        assert calls == [2]

    def test_clear_by_prefix(self):
        cache_module.cache["stats:a"] = 1
        cache_module.cache["other:b"] = 2
        clear_cache("stats")
        assert "stats:a" not in cache_module.cache
        assert "other:b" in cache_module.cache

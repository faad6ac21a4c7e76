"""
Unit tests for store adapters.
"""
import pytest
from django.core.cache import caches

from core.infrastructure.store_adapters import DjangoCacheStore, InMemoryStore


@pytest.mark.asyncio
class TestInMemoryStore:
    """Tests for InMemoryStore."""

    async def test_get_missing_returns_default(self):
        """Test absent keys return the default."""
        store = InMemoryStore()
        assert await store.get("missing") is None
        assert await store.get("missing", False) is False

    async def test_set_and_get(self):
        """Test values round-trip."""
        store = InMemoryStore()
        await store.set("isExpired", True)
        assert await store.get("isExpired") is True

    async def test_set_none_removes_key(self):
        """Test setting None removes the key."""
        store = InMemoryStore({"license_key": "abc"})
        await store.set("license_key", None)
        assert "license_key" not in store.snapshot()

    async def test_values_are_copied(self):
        """Test callers cannot mutate stored values through references."""
        store = InMemoryStore()
        record = {"licenseKey": "abc"}
        await store.set("stored_license_info", record)
        record["licenseKey"] = "changed"

        loaded = await store.get("stored_license_info")
        loaded["licenseKey"] = "changed again"

        assert (await store.get("stored_license_info"))["licenseKey"] == "abc"


@pytest.mark.asyncio
class TestDjangoCacheStore:
    """Tests for DjangoCacheStore on the locmem test cache."""

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        caches["default"].clear()
        yield
        caches["default"].clear()

    async def test_set_and_get(self):
        """Test values round-trip through the Django cache."""
        store = DjangoCacheStore()
        await store.set("last_online_timestamp", 1705320000000)
        assert await store.get("last_online_timestamp") == 1705320000000

    async def test_get_missing_returns_default(self):
        """Test absent keys return the default."""
        store = DjangoCacheStore()
        assert await store.get("isExpired", False) is False

    async def test_set_none_deletes(self):
        """Test setting None removes the key."""
        store = DjangoCacheStore()
        await store.set("license_key", "abc")
        await store.set("license_key", None)
        assert await store.get("license_key") is None

    async def test_get_error_returns_default(self, monkeypatch):
        """Test read errors fall back to the default."""
        store = DjangoCacheStore()

        def broken_get(*args, **kwargs):
            raise RuntimeError("cache down")

        monkeypatch.setattr(caches["default"], "get", broken_get)
        assert await store.get("license_key", "fallback") == "fallback"

    async def test_set_error_propagates(self, monkeypatch):
        """Test write errors are raised."""
        store = DjangoCacheStore()

        def broken_set(*args, **kwargs):
            raise RuntimeError("cache down")

        monkeypatch.setattr(caches["default"], "set", broken_set)
        with pytest.raises(RuntimeError):
            await store.set("license_key", "abc")

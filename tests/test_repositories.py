"""
Tests for the Redis and in-memory repositories.
"""

import json
from unittest.mock import AsyncMock

import pytest
from conftest import ACME_ROW

from org_overview.entities import AggregatedRow, CacheEntryEntity
from org_overview.protocols import AggregateCache, KeyValueStore
from org_overview.repositories import (
    InMemoryAggregateCache,
    InMemoryKeyValueStore,
    RedisAggregateCache,
    RedisKeyValueStore,
)


@pytest.fixture
def redis_client():
    """Create a mocked asyncio Redis client."""
    return AsyncMock()


def test_implementations_satisfy_protocols(redis_client):
    assert isinstance(RedisKeyValueStore(redis_client), KeyValueStore)
    assert isinstance(InMemoryKeyValueStore(), KeyValueStore)
    assert isinstance(RedisAggregateCache(redis_client), AggregateCache)
    assert isinstance(InMemoryAggregateCache(), AggregateCache)


@pytest.mark.asyncio
async def test_redis_store_reads_values(redis_client):
    redis_client.get.return_value = '["A1"]'
    store = RedisKeyValueStore(redis_client, name="ORG_DATA")

    assert await store.get("org_list") == '["A1"]'
    assert store.name == "ORG_DATA"
    redis_client.get.assert_awaited_once_with("org_list")


@pytest.mark.asyncio
async def test_redis_store_decodes_bytes_and_missing_keys(redis_client):
    store = RedisKeyValueStore(redis_client)

    redis_client.get.return_value = "Malmö".encode()
    assert await store.get("A1") == "Malmö"

    redis_client.get.return_value = None
    assert await store.get("A2") is None


@pytest.mark.asyncio
async def test_redis_store_ping(redis_client):
    store = RedisKeyValueStore(redis_client)

    redis_client.ping.return_value = True
    assert await store.ping() is True

    redis_client.ping.side_effect = ConnectionError("refused")
    assert await store.ping() is False


@pytest.mark.asyncio
async def test_redis_cache_writes_json_with_expiry(redis_client):
    cache = RedisAggregateCache(redis_client)
    entry = CacheEntryEntity(rows=(ACME_ROW,), written_at=1700000000.0)

    await cache.put("org_overview:data.json", entry, ttl=3600)

    key, payload = redis_client.set.await_args.args
    assert key == "org_overview:data.json"
    assert redis_client.set.await_args.kwargs == {"ex": 3600}
    decoded = json.loads(payload)
    assert decoded["written_at"] == 1700000000.0
    assert decoded["rows"][0]["legalForm"] == "AB"
    assert decoded["rows"][0]["addedDate"] == "2024-01-05"


@pytest.mark.asyncio
async def test_redis_cache_reads_back_what_it_wrote(redis_client):
    cache = RedisAggregateCache(redis_client)
    entry = CacheEntryEntity(rows=(ACME_ROW, AggregatedRow(id="A2")), written_at=1.0)

    await cache.put("k", entry, ttl=60)
    redis_client.get.return_value = redis_client.set.await_args.args[1]

    assert await cache.get("k") == entry


@pytest.mark.asyncio
async def test_redis_cache_miss_and_corrupt_entries(redis_client, caplog):
    cache = RedisAggregateCache(redis_client)

    redis_client.get.return_value = None
    assert await cache.get("k") is None

    redis_client.get.return_value = '{"rows": "nope"}'
    assert await cache.get("k") is None
    assert "Discarding unreadable cache entry" in caplog.text


@pytest.mark.asyncio
async def test_memory_cache_expires_lazily(clock, memory_cache):
    entry = CacheEntryEntity(rows=(ACME_ROW,))

    await memory_cache.put("k", entry, ttl=10)
    clock.advance(9.5)
    assert await memory_cache.get("k") is entry
    assert len(memory_cache) == 1

    clock.advance(0.5)
    assert await memory_cache.get("k") is None
    assert len(memory_cache) == 0


@pytest.mark.asyncio
async def test_memory_store_is_read_only_view_of_its_data():
    data = {"A1": "{}"}
    store = InMemoryKeyValueStore(data)
    data["A2"] = "{}"

    assert await store.get("A1") == "{}"
    assert await store.get("A2") is None
    assert await store.ping() is True


def test_row_requires_an_id():
    with pytest.raises(ValueError):
        AggregatedRow(id="")

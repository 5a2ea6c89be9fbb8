"""Shared fixtures for the organization overview tests."""

import asyncio
import json

import pytest

from org_overview.entities import AggregatedRow
from org_overview.repositories import InMemoryAggregateCache, InMemoryKeyValueStore

ACME_REPRESENTATIVE = {
    "organizationDisplayName": "Acme Rep",
    "firstSeen": "2024-01-05T00:00:00Z",
}

ACME_REGISTRY = {
    "data": {
        "organisationer": [
            {
                "organisationsnamn": {"organisationsnamnLista": [{"namn": "Acme Inc"}]},
                "juridiskForm": {"klartext": "AB"},
                "postadressOrganisation": {"postadress": {"postort": "Stockholm"}},
            }
        ]
    }
}

ACME_ROW = AggregatedRow(
    id="A1",
    name="Acme Inc",
    legal_form="AB",
    locality="Stockholm",
    representative="Acme Rep",
    added_date="2024-01-05",
)


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingStore:
    """KeyValueStore whose reads always fail."""

    name = "BROKEN"

    async def get(self, key: str) -> str | None:
        raise ConnectionError("store unavailable")

    async def ping(self) -> bool:
        return False


class SlowStore:
    """KeyValueStore that takes longer than any test timeout."""

    name = "SLOW"

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(5)
        return None

    async def ping(self) -> bool:
        return True


class FakeAggregator:
    """Aggregator stand-in that counts builds.

    If ``gate`` is set, each build waits for it before returning.
    """

    def __init__(self, rows=None, error: Exception | None = None) -> None:
        self.rows = list(rows or [])
        self.error = error
        self.calls = 0
        self.gate: asyncio.Event | None = None

    async def build(self) -> list[AggregatedRow]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.rows)


@pytest.fixture
def primary_data():
    """Primary store contents for the A1/A2 scenario."""
    return {
        "org_list": json.dumps(["A1", "A2"]),
        "A1": json.dumps(ACME_REPRESENTATIVE),
    }


@pytest.fixture
def secondary_data():
    """Secondary store contents for the A1/A2 scenario."""
    return {"A1": json.dumps(ACME_REGISTRY)}


@pytest.fixture
def primary_store(primary_data):
    return InMemoryKeyValueStore(primary_data, name="ORG_DATA")


@pytest.fixture
def secondary_store(secondary_data):
    return InMemoryKeyValueStore(secondary_data, name="ORG_CACHE")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    return InMemoryAggregateCache(clock=clock)

#!/usr/bin/env python3
"""
Demo script for the organization overview.

Seeds the two backing stores with a handful of sample organizations and
runs the cache-aside pipeline against them twice (miss, then hit).

Usage:
    python scripts/demo.py            # seed Redis and aggregate
    python scripts/demo.py --memory   # no Redis needed
"""

import asyncio
import json
import sys
import time

from org_overview.config import configure_logging, get_redis_client, settings
from org_overview.encoders import encode_csv, encode_names
from org_overview.repositories import (
    InMemoryAggregateCache,
    InMemoryKeyValueStore,
    RedisKeyValueStore,
)
from org_overview.services import build_cache_service

SAMPLE_REPRESENTATIVES = {
    "5560000001": {"organizationDisplayName": "Redovisningsbyrån AB", "firstSeen": "2024-01-05T08:00:00Z"},
    "5560000002": {"organizationDisplayName": "Ombud & Co", "firstSeen": "2024-03-17T12:30:00Z"},
    "5560000003": {"organizationDisplayName": "Solo Konsult"},
}

SAMPLE_REGISTRY = {
    "5560000001": {
        "data": {
            "organisationer": [
                {
                    "organisationsnamn": {"organisationsnamnLista": [{"namn": "Acme Aktiebolag"}]},
                    "juridiskForm": {"klartext": "Aktiebolag"},
                    "postadressOrganisation": {"postadress": {"postort": "STOCKHOLM"}},
                }
            ]
        }
    },
    "5560000002": {"name": "Beta; Handelsbolag", "form": "Handelsbolag", "postort": "MALMÖ"},
}


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def sample_data() -> tuple[dict[str, str], dict[str, str]]:
    primary = {key: json.dumps(value) for key, value in SAMPLE_REPRESENTATIVES.items()}
    primary[settings.org_list_key] = json.dumps([*SAMPLE_REPRESENTATIVES, "5560000004"])
    secondary = {key: json.dumps(value) for key, value in SAMPLE_REGISTRY.items()}
    return primary, secondary


async def seed_redis(primary: dict[str, str], secondary: dict[str, str]) -> None:
    """Write the sample documents into the configured Redis databases."""
    for url, documents in ((settings.org_data_url, primary), (settings.org_cache_url, secondary)):
        client = get_redis_client(url)
        try:
            await client.mset(documents)
            print(f"  ✓ Seeded {len(documents)} keys into {url}")
        finally:
            await client.aclose()


async def main(use_memory: bool) -> None:
    configure_logging()
    primary, secondary = sample_data()

    print_section("Backing stores")
    if use_memory:
        primary_store = InMemoryKeyValueStore(primary, name="ORG_DATA")
        secondary_store = InMemoryKeyValueStore(secondary, name="ORG_CACHE")
        print("  ✓ Using in-memory stores")
    else:
        await seed_redis(primary, secondary)
        primary_store = RedisKeyValueStore.create(settings.org_data_url, name="ORG_DATA")
        secondary_store = RedisKeyValueStore.create(settings.org_cache_url, name="ORG_CACHE")

    service = build_cache_service(primary_store, secondary_store, InMemoryAggregateCache())

    print_section("First request (cache miss)")
    start = time.time()
    rows = await service.get_aggregate()
    await service.wait_for_pending_writes()
    print(f"  Built {len(rows)} rows in {(time.time() - start) * 1000:.1f} ms")
    for row in rows:
        print(f"  {row.id}: {row.name} | {row.legal_form} | {row.locality} | {row.representative} | {row.added_date}")

    print_section("Second request (cache hit)")
    start = time.time()
    rows = await service.get_aggregate()
    print(f"  Served {len(rows)} rows in {(time.time() - start) * 1000:.1f} ms")

    print_section("Name list")
    print(f"  {encode_names(rows)}")

    print_section("CSV export")
    print(encode_csv(rows))

    print_section("Stats")
    for key, value in service.get_stats().items():
        print(f"  {key}: {value}")

    if not use_memory:
        await primary_store.close()
        await secondary_store.close()


if __name__ == "__main__":
    asyncio.run(main(use_memory="--memory" in sys.argv))

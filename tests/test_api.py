"""
Tests for the organization overview API.
"""

import pytest
from fastapi.testclient import TestClient

from org_overview.api.app import create_app
from org_overview.api.dependencies import Bindings
from org_overview.encoders import CSV_BOM
from org_overview.repositories import InMemoryAggregateCache, InMemoryKeyValueStore


@pytest.fixture
def bindings(primary_store, secondary_store):
    """In-memory stores holding the A1/A2 scenario."""
    return Bindings(
        primary_store=primary_store,
        secondary_store=secondary_store,
        cache=InMemoryAggregateCache(),
    )


@pytest.fixture
def client(bindings):
    """Create a test client with the lifespan running."""
    with TestClient(create_app(bindings)) as test_client:
        yield test_client


def by_id(items):
    return sorted(items, key=lambda item: item["id"])


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Organization Overview API"
    assert data["endpoints"]["names"] == "/org-via-ombud.json"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "primary_store": True,
        "secondary_store": True,
        "cache": True,
    }


def test_data_json(client):
    """Full aggregate for the A1/A2 scenario."""
    response = client.get("/data.json")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert by_id(response.json()) == [
        {
            "id": "A1",
            "name": "Acme Inc",
            "legalForm": "AB",
            "locality": "Stockholm",
            "representative": "Acme Rep",
            "addedDate": "2024-01-05",
        },
        {
            "id": "A2",
            "name": "N/A",
            "legalForm": "N/A",
            "locality": "N/A",
            "representative": "N/A",
            "addedDate": "N/A",
        },
    ]


def test_names_json(client):
    """Name-only view drops rows without a known name."""
    response = client.get("/org-via-ombud.json")
    assert response.status_code == 200
    assert response.json() == ["Acme Inc"]


def test_export_csv(client):
    """CSV export is an attachment with a byte-order marker."""
    response = client.get("/export.csv")
    assert response.status_code == 200
    assert response.headers["content-type"] == "text/csv; charset=utf-8"
    assert response.headers["content-disposition"] == 'attachment; filename="export.csv"'
    text = response.content.decode("utf-8")
    assert text.startswith(CSV_BOM + "id;name;legalForm;locality;representative;addedDate\n")
    assert "A1;Acme Inc;AB;Stockholm;Acme Rep;2024-01-05" in text


def test_second_request_is_served_from_cache(client):
    """Views share one cached aggregate."""
    client.get("/data.json")
    client.get("/export.csv")

    stats = client.get("/stats").json()
    assert stats["misses"] == 1
    assert stats["hits"] == 1


def test_refresh_flag_forces_a_rebuild(client):
    """A bare ?refresh bypasses the cache for that request only."""
    client.get("/data.json")
    response = client.get("/data.json?refresh")
    assert response.status_code == 200
    client.get("/org-via-ombud.json")

    stats = client.get("/stats").json()
    assert stats["forced_refreshes"] == 1
    assert stats["misses"] == 2
    assert stats["hits"] == 1


def test_missing_key_list_returns_error_body(secondary_store):
    """A missing identifier list surfaces as a JSON error with status 500."""
    bindings = Bindings(
        primary_store=InMemoryKeyValueStore({}, name="ORG_DATA"),
        secondary_store=secondary_store,
        cache=InMemoryAggregateCache(),
    )
    with TestClient(create_app(bindings)) as client:
        for path in ("/data.json", "/org-via-ombud.json", "/export.csv"):
            response = client.get(path)
            assert response.status_code == 500
            assert "org_list" in response.json()["error"]


def test_missing_binding_is_a_configuration_error(secondary_store):
    """Requests fail before any other logic when a binding is missing."""
    bindings = Bindings(
        primary_store=None,
        secondary_store=secondary_store,
        cache=InMemoryAggregateCache(),
    )
    with TestClient(create_app(bindings)) as client:
        response = client.get("/data.json")
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert "Configuration error" in response.text
        assert "primary_store" in response.text

        for path in ("/", "/health", "/stats"):
            assert client.get(path).status_code == 500

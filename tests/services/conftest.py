"""Service test fixtures — tmp JSON hive store, fake ledger/publisher, FastAPI test client.

Invariants:
    - Every test gets its own hives.json under tmp_path (seeded with three hives)
    - Ledger, publisher and store dependencies overridden; no network access
    - dependency_overrides cleared after each test
"""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from hivemint.api.dependencies import (
    get_hive_store, get_ledger_client, get_metadata_publisher,
)
from hivemint.infrastructure.json_hive_store import JsonHiveStore
from hivemint.main import app
from tests.services.mock_ledger import FakeLedgerClient, FakePublisher

SEED_HIVES = [
    {
        "id": "HIVE-001", "name": "Golden Hive #1",
        "description": "Premium beehive in Nairobi",
        "image": "https://example.com/hive1.jpg",
        "location": "Nairobi, Kenya", "farmer": "Jane Kamau",
        "price": 5000, "status": "available",
    },
    {
        "id": "HIVE-002", "name": "Acacia Hive #2",
        "description": "Acacia honey beehive",
        "image": "https://example.com/hive2.jpg",
        "location": "Machakos, Kenya", "farmer": "Peter Mwangi",
        "price": 3500, "status": "available",
    },
    {
        "id": "HIVE-003", "name": "Sold Hive #3",
        "description": "Already purchased",
        "image": "https://example.com/hive3.jpg",
        "location": "Nyeri, Kenya", "farmer": "Grace Wanjiru",
        "price": 4200, "status": "sold", "owner": "0.0.999",
        "serialNumber": 4, "soldAt": "2025-01-01T00:00:00+00:00",
    },
]


@pytest.fixture
def hives_file(tmp_path):
    path = tmp_path / "hives.json"
    path.write_text(json.dumps(SEED_HIVES, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def hive_store(hives_file):
    return JsonHiveStore(hives_file)


@pytest.fixture
def ledger():
    return FakeLedgerClient()


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
async def client(hive_store, ledger, publisher):
    """FastAPI test client with ledger, publisher and store overridden."""
    app.dependency_overrides[get_hive_store] = lambda: hive_store
    app.dependency_overrides[get_ledger_client] = lambda: ledger
    app.dependency_overrides[get_metadata_publisher] = lambda: publisher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


def read_hive(hives_file, hive_id: str) -> dict:
    """Raw persisted record, straight from the JSON file."""
    records = json.loads(hives_file.read_text(encoding="utf-8"))
    return next(r for r in records if r["id"] == hive_id)

import datetime
import json
from decimal import Decimal

import pytest

from sales_reports.common.errors import SalesFetchError
from sales_reports.features.sales.models import Sale
from sales_reports.features.sales.store import (
    FirestoreSalesStore,
    InMemorySalesStore,
    TortoiseSalesStore,
    init_sales_store,
)

UTC = datetime.timezone.utc


class FakeSnapshot:
    def __init__(self, data):
        self._data = data

    def to_dict(self):
        return self._data


class FakeQuery:
    def __init__(self, client, documents):
        self._client = client
        self._documents = documents

    def order_by(self, field, direction=None):
        self._client.order_calls.append((field, direction))
        return self

    def stream(self):
        if self._client.error:
            raise self._client.error
        return [FakeSnapshot(d) for d in self._documents]


class FakeFirestoreClient:
    def __init__(self, documents=(), error=None):
        self.documents = list(documents)
        self.error = error
        self.collections = []
        self.order_calls = []

    def collection(self, name):
        self.collections.append(name)
        return FakeQuery(self, self.documents)


@pytest.mark.asyncio
async def test_in_memory_store_orders_newest_first_and_undated_last():
    store = InMemorySalesStore([
        {"timestamp": datetime.datetime(2025, 1, 1, tzinfo=UTC), "total": 1},
        {"total": 2},
        {"timestamp": "2025-03-01T10:00:00+00:00", "total": 3},
        {"timestamp": datetime.datetime(2025, 2, 1), "total": 4},
    ])
    documents = await store.fetch_sales("sales")
    assert [d["total"] for d in documents] == [3, 4, 1, 2]


@pytest.mark.asyncio
async def test_in_memory_store_orders_epoch_timestamps():
    store = InMemorySalesStore([
        {"timestamp": 1735689600, "employee_email": "old@technorth.mx"},
        {"timestamp": None, "employee_email": "nodate@technorth.mx"},
        {"timestamp": 1741910400, "employee_email": "new@technorth.mx"},
    ])
    documents = await store.fetch_sales("sales")
    assert [d["employee_email"] for d in documents] == [
        "new@technorth.mx", "old@technorth.mx", "nodate@technorth.mx",
    ]


@pytest.mark.asyncio
async def test_in_memory_store_reads_utc_z_suffix():
    store = InMemorySalesStore([
        {"timestamp": "2025-01-01T00:00:00Z", "total": 1},
        {"timestamp": "", "total": 2},
        {"timestamp": "2025-03-14T18:30:00Z", "total": 3},
        {"timestamp": datetime.datetime(2025, 2, 1, tzinfo=UTC), "total": 4},
    ])
    documents = await store.fetch_sales("sales")
    assert [d["total"] for d in documents] == [3, 4, 1, 2]


@pytest.mark.asyncio
async def test_in_memory_store_leaves_unreadable_timestamps_to_validation():
    store = InMemorySalesStore([
        {"timestamp": "not a date", "total": 1},
        {"timestamp": "2025-03-14T18:30:00Z", "total": 2},
    ])
    documents = await store.fetch_sales("sales")
    assert [d["total"] for d in documents] == [2, 1]


@pytest.mark.asyncio
async def test_tortoise_store_orders_by_timestamp_descending(db):
    await Sale.create(timestamp=datetime.datetime(2025, 1, 10, tzinfo=UTC), employee_email="a@technorth.mx", total=Decimal("10.00"))
    await Sale.create(timestamp=None, employee_email="nodate@technorth.mx", total=Decimal("5.00"))
    await Sale.create(timestamp=datetime.datetime(2025, 3, 1, tzinfo=UTC), employee_email="b@technorth.mx", total=Decimal("30.00"))
    await Sale.create(timestamp=datetime.datetime(2025, 2, 1, tzinfo=UTC), employee_email=None, subtotal=None, total=None)

    store = TortoiseSalesStore(manage_connections=False)
    documents = await store.fetch_sales("sales")

    assert [d["employee_email"] for d in documents] == [
        "b@technorth.mx", None, "a@technorth.mx", "nodate@technorth.mx",
    ]
    assert documents[0]["total"] == Decimal("30.00")
    assert documents[1]["total"] is None
    assert documents[-1]["timestamp"] is None


@pytest.mark.asyncio
async def test_tortoise_store_empty_table(db):
    store = TortoiseSalesStore(manage_connections=False)
    assert await store.fetch_sales("sales") == []


@pytest.mark.asyncio
async def test_firestore_store_queries_collection_descending():
    client = FakeFirestoreClient([{"total": 3}, {"total": 1}])
    store = FirestoreSalesStore(client)

    documents = await store.fetch_sales("ventas")

    assert documents == [{"total": 3}, {"total": 1}]
    assert client.collections == ["ventas"]
    assert client.order_calls == [("timestamp", "DESCENDING")]


@pytest.mark.asyncio
async def test_firestore_store_wraps_query_errors():
    store = FirestoreSalesStore(FakeFirestoreClient(error=RuntimeError("deadline exceeded")))
    with pytest.raises(SalesFetchError, match="deadline exceeded"):
        await store.fetch_sales("sales")


def test_init_firestore_without_credentials_is_an_error_result(tmp_path):
    result = init_sales_store("firestore", credentials_path=str(tmp_path / "missing.json"))
    assert not result.ok
    assert result.store is None
    assert "missing.json" in result.error


def test_init_firestore_with_invalid_credentials_is_an_error_result(tmp_path):
    bad = tmp_path / "serviceAccountKey.json"
    bad.write_text(json.dumps({"type": "not_a_service_account"}))
    result = init_sales_store("firestore", credentials_path=str(bad))
    assert not result.ok
    assert "Invalid Firestore credential file" in result.error


def test_init_unknown_backend_is_an_error_result():
    result = init_sales_store("mongodb")
    assert not result.ok
    assert "mongodb" in result.error


def test_init_tortoise_backend():
    result = init_sales_store("Tortoise")
    assert result.ok
    assert isinstance(result.store, TortoiseSalesStore)
    assert result.store.name == "tortoise"

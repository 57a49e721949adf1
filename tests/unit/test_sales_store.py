"""Unit tests for the SalesStore."""

from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from pydantic import ValidationError

from backoffice.application.interfaces import Domain
from backoffice.application.schemas import SaleCreate
from backoffice.application.services import SalesStore
from backoffice.domain.entities import DateRange
from backoffice.domain.exceptions import BackendError, EntityNotFoundError
from tests.support.fake_backend import FakeDataBackend

NOW = datetime(2024, 3, 15, 14, 30)

SALES = [
    {
        "id": 1,
        "saleNumber": "V-001",
        "customerName": "Ana Torres",
        "paymentMethod": "CASH",
        "status": "COMPLETED",
        "total": 180000,
        "createdAt": "2024-03-15T09:00:00",
        "items": [
            {"productCode": "ZAP01", "productName": "Zapato Azul", "quantity": 2,
             "subtotal": 180000},
        ],
    },
    {
        "id": 2,
        "saleNumber": "V-002",
        "customerName": "Luis Gómez",
        "paymentMethod": "CARD",
        "status": "COMPLETED",
        "total": 150000,
        "createdAt": "2024-03-15T11:00:00",
        "items": [
            {"productCode": "BOT01", "productName": "Bota Negra", "quantity": 1,
             "subtotal": 150000},
        ],
    },
    {
        "id": 3,
        "saleNumber": "V-003",
        "customerName": "Eva Ruiz",
        "paymentMethod": "CASH",
        "status": "CANCELLED",
        "total": 90000,
        "createdAt": "2024-03-15T12:00:00",
    },
    {
        "id": 4,
        "saleNumber": "V-004",
        "customerName": "Ana Torres",
        "paymentMethod": "TRANSFER",
        "status": "COMPLETED",
        "total": 50000,
        "createdAt": "2024-03-01T10:00:00",
    },
]


@pytest.fixture
def backend() -> FakeDataBackend:
    return FakeDataBackend({Domain.SALES: SALES})


@pytest_asyncio.fixture
async def store(backend: FakeDataBackend) -> SalesStore:
    store = SalesStore(backend, clock=lambda: NOW)
    await store.fetch_sales()
    return store


@pytest.mark.asyncio
async def test_default_view_shows_todays_completed_sales_newest_first(store: SalesStore):
    assert [s.id for s in store.view.get_filtered_records()] == [2, 1]


@pytest.mark.asyncio
async def test_clearing_filters_returns_to_default_view(store: SalesStore):
    store.view.set_date_range(DateRange.ALL)
    store.view.set_filters(status="all")
    assert [s.id for s in store.view.get_filtered_records()] == [3, 2, 1, 4]

    store.view.clear_filters()

    assert [s.id for s in store.view.get_filtered_records()] == [2, 1]


@pytest.mark.asyncio
async def test_search_matches_item_product_names(store: SalesStore):
    store.view.set_search_term("bota")

    assert [s.id for s in store.view.get_filtered_records()] == [2]


@pytest.mark.asyncio
async def test_create_sale_inserts_backend_record(store, backend):
    data = SaleCreate(
        customer_name="Nuevo Cliente",
        payment_method="MIXED",
        items=[{"product_id": 1, "size": "38", "quantity": 1}],
    )

    sale = await store.create_sale(data)

    payload = backend.calls[-1][2]
    assert payload["paymentMethod"] == "MIXED"
    assert payload["items"] == [{"productId": 1, "size": "38", "quantity": 1}]
    assert store.get_sale(sale.id).customer_name == "Nuevo Cliente"
    assert sale.total_items == 1


def test_sale_needs_at_least_one_item():
    with pytest.raises(ValidationError):
        SaleCreate(customer_name="X", payment_method="CASH", items=[])


def test_sale_rejects_unknown_payment_method():
    with pytest.raises(ValidationError):
        SaleCreate(
            customer_name="X",
            payment_method="BARTER",
            items=[{"product_id": 1, "size": "38", "quantity": 1}],
        )


@pytest.mark.asyncio
async def test_cancel_sale_removes_it_locally(store, backend):
    cancelled = await store.cancel_sale(1)

    assert cancelled.id == 1
    assert backend.calls[-1] == ("patch", Domain.SALES, 1, "cancel", None)
    with pytest.raises(EntityNotFoundError):
        store.get_sale(1)


@pytest.mark.asyncio
async def test_failed_cancel_keeps_sale(store, backend):
    backend.fail("patch")

    with pytest.raises(BackendError):
        await store.cancel_sale(1)

    assert store.get_sale(1).status == "COMPLETED"


@pytest.mark.asyncio
async def test_stats_use_every_sale(store: SalesStore):
    stats = store.get_stats()

    assert stats.today.count == 3
    assert stats.today.total == Decimal("420000")
    assert stats.month.count == 4
    assert stats.payment_methods["CASH"] == 2
    assert stats.top_products[0].reference == "ZAP01"

"""Unit tests for the ProvidersStore."""

from datetime import datetime

import pytest
import pytest_asyncio

from backoffice.application.interfaces import Domain
from backoffice.application.schemas import ProviderCreate
from backoffice.application.services import ProvidersStore
from backoffice.domain.exceptions import BackendError, DuplicateEntityError
from tests.support.fake_backend import FakeDataBackend

NOW = datetime(2024, 3, 15, 14, 30)

PROVIDERS = [
    {
        "id": 10,
        "document": "900123",
        "name": "Textiles SA",
        "email": "ventas@textiles.co",
        "city": "Bogotá",
        "isActive": True,
        "createdAt": "2024-01-10T08:00:00",
    },
    {
        "id": 11,
        "document": "900456",
        "name": "Cueros Ltda",
        "email": "info@cueros.co",
        "city": "Medellín",
        "isActive": True,
        "createdAt": "2024-02-10T08:00:00",
    },
    {
        "id": 12,
        "document": "900789",
        "name": "Hebillas SAS",
        "city": "Bogotá",
        "isActive": False,
    },
]


@pytest.fixture
def backend() -> FakeDataBackend:
    return FakeDataBackend({Domain.PROVIDERS: PROVIDERS})


@pytest_asyncio.fixture
async def store(backend: FakeDataBackend) -> ProvidersStore:
    store = ProvidersStore(backend, clock=lambda: NOW)
    await store.fetch_providers()
    return store


@pytest.mark.asyncio
async def test_default_view_lists_active_providers_newest_first(store: ProvidersStore):
    assert [p.id for p in store.view.get_filtered_records()] == [11, 10]


@pytest.mark.asyncio
async def test_city_filter_and_undated_records_last(store: ProvidersStore):
    store.view.set_filters(status="all", city="Bogotá")

    assert [p.id for p in store.view.get_filtered_records()] == [10, 12]


@pytest.mark.asyncio
async def test_add_provider_normalizes_and_checks_uniqueness(store, backend):
    with pytest.raises(DuplicateEntityError):
        await store.add_provider(ProviderCreate(document=" 900123 ", name="Copia"))
    with pytest.raises(DuplicateEntityError):
        await store.add_provider(
            ProviderCreate(document="111", name="Otro", email="VENTAS@textiles.co")
        )

    created = await store.add_provider(
        ProviderCreate(document="111", name="  Botones SA ", email=" Compras@Botones.co ")
    )

    payload = backend.calls[-1][2]
    assert payload["name"] == "Botones SA"
    assert payload["email"] == "compras@botones.co"
    assert store.get_provider(created.id).name == "Botones SA"


@pytest.mark.asyncio
async def test_update_provider_keeps_own_document(store: ProvidersStore):
    updated = await store.update_provider(
        10, ProviderCreate(document="900123", name="Textiles S.A.")
    )

    assert updated.name == "Textiles S.A."


@pytest.mark.asyncio
async def test_toggle_status_uses_delete_then_activate(store, backend):
    deactivated = await store.toggle_status(10)
    assert deactivated.is_active is False
    assert backend.calls[-1] == ("remove", Domain.PROVIDERS, 10)

    activated = await store.toggle_status(10)
    assert activated.is_active is True
    assert backend.calls[-1] == ("patch", Domain.PROVIDERS, 10, "activate", None)


@pytest.mark.asyncio
async def test_failed_toggle_keeps_status(store, backend):
    backend.fail("remove")

    with pytest.raises(BackendError):
        await store.toggle_status(10)

    assert store.get_provider(10).is_active is True


@pytest.mark.asyncio
async def test_stats(store: ProvidersStore):
    stats = store.get_stats()

    assert (stats.total_providers, stats.active_providers, stats.inactive_providers) == (3, 2, 1)
    assert store.is_document_unique("900123", exclude_id=10) is True
    assert store.is_email_unique("info@cueros.co") is False

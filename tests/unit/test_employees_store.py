"""Unit tests for the EmployeesStore."""

from datetime import date, datetime
from decimal import Decimal

import pytest
import pytest_asyncio

from backoffice.application.interfaces import Domain
from backoffice.application.schemas import EmployeeCreate
from backoffice.application.services import EmployeesStore
from backoffice.domain.entities import EmployeeRole
from backoffice.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from tests.support.fake_backend import FakeDataBackend

NOW = datetime(2024, 3, 15, 14, 30)

EMPLOYEES = [
    {
        "id": 3,
        "document": "123",
        "firstName": "Ana",
        "lastName": "Torres",
        "email": "ana@tienda.co",
        "position": "Cajera",
        "department": "Ventas",
        "status": "ACTIVE",
        "contractType": "FIJO",
        "salary": 1800000,
        "hireDate": "2020-02-01",
        "username": "ana.torres",
    },
    {
        "id": 7,
        "document": "456",
        "firstName": "Luis",
        "lastName": "Gómez",
        "email": "luis@tienda.co",
        "position": "Bodeguero",
        "department": "Bodega",
        "status": "VACATION",
        "salary": 1500000,
        "hireDate": "2023-09-15T00:00:00",
    },
]


@pytest.fixture
def backend() -> FakeDataBackend:
    return FakeDataBackend({Domain.EMPLOYEES: EMPLOYEES})


@pytest_asyncio.fixture
async def store(backend: FakeDataBackend) -> EmployeesStore:
    store = EmployeesStore(backend, clock=lambda: NOW)
    await store.fetch_employees()
    return store


def _employee_data(document: str = "789", email: str = "eva@tienda.co") -> EmployeeCreate:
    return EmployeeCreate(
        document=document,
        first_name="Eva",
        last_name="Ruiz",
        email=email,
        position="Vendedora",
        department="Ventas",
        salary=Decimal("1600000"),
        hire_date=date(2024, 3, 1),
    )


@pytest.mark.asyncio
async def test_fetch_normalizes_hire_dates(store: EmployeesStore):
    assert store.get_employee(7).hire_date == date(2023, 9, 15)
    assert store.get_employee(3).years_of_service(NOW) == 4


@pytest.mark.asyncio
async def test_document_uniqueness_with_exclusion(store: EmployeesStore):
    assert store.is_document_unique("123", exclude_id=7) is False
    assert store.is_document_unique("123", exclude_id=3) is True
    assert store.is_email_unique("ANA@tienda.co") is False


@pytest.mark.asyncio
async def test_add_employee_rejects_duplicates_before_backend(store, backend):
    calls_before = len(backend.calls)

    with pytest.raises(DuplicateEntityError):
        await store.add_employee(_employee_data(document="123"))
    with pytest.raises(DuplicateEntityError):
        await store.add_employee(_employee_data(email="luis@tienda.co"))

    assert len(backend.calls) == calls_before


@pytest.mark.asyncio
async def test_add_and_update_employee(store: EmployeesStore):
    created = await store.add_employee(_employee_data())
    assert store.get_employee(created.id).full_name == "Eva Ruiz"

    updated = await store.update_employee(created.id, _employee_data())
    assert updated.id == created.id


@pytest.mark.asyncio
async def test_delete_employee_is_a_hard_removal(store: EmployeesStore):
    await store.delete_employee(7)

    with pytest.raises(EntityNotFoundError):
        store.get_employee(7)


@pytest.mark.asyncio
async def test_toggle_status(store, backend):
    toggled = await store.toggle_status(3)
    assert toggled.status == "INACTIVE"
    assert backend.calls[-1] == (
        "patch", Domain.EMPLOYEES, 3, "status", {"status": "INACTIVE"}
    )

    reactivated = await store.toggle_status(7)
    assert reactivated.status == "ACTIVE"


@pytest.mark.asyncio
async def test_department_and_role_lookups_only_return_active(store: EmployeesStore):
    assert [e.id for e in store.employees_by_department("Ventas")] == [3]
    assert store.employees_by_department("Bodega") == []
    assert [e.id for e in store.employees_by_role(EmployeeRole.ADMIN)] == [3]
    assert store.employees_by_role("EMPLOYEE") == []


@pytest.mark.asyncio
async def test_role_filter_and_stats(store: EmployeesStore):
    store.view.set_filters(role="EMPLOYEE")
    assert [e.id for e in store.view.get_filtered_records()] == [7]

    stats = store.get_stats()
    assert stats.total_payroll == Decimal("1800000")
    assert stats.vacation_employees == 1
    assert stats.role_count == {"ADMIN": 1, "EMPLOYEE": 1}

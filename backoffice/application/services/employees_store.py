"""Application service for staff records."""

import logging
from datetime import datetime

from backoffice.application.interfaces import DataBackend, Domain
from backoffice.application.schemas import EmployeeCreate, EmployeeRecord
from backoffice.domain.entities import Employee, EmployeeRole, EmployeeStats, EmployeeStatus
from backoffice.domain.exceptions import BackendError, EntityNotFoundError

from .aggregation import employee_stats
from .derived_view import DEFAULT_PAGE_SIZE, Clock, DerivedView
from .predicates import FilterRules
from .record_repository import RecordId, RecordRepository
from .uniqueness import MatchMode, UniqueKey, UniquenessValidator

logger = logging.getLogger(__name__)

EMPLOYEE_RULES: FilterRules[Employee] = FilterRules(
    search_fields=lambda e: (
        e.first_name,
        e.last_name,
        e.document,
        e.email,
        e.phone,
        e.position,
        e.department,
    ),
    filter_fields={
        "department": lambda e, now: e.department,
        "position": lambda e, now: e.position,
        "status": lambda e, now: e.status,
        "contractType": lambda e, now: e.contract_type,
        "role": lambda e, now: e.role,
    },
    date_field=lambda e: e.hire_date,
)


class EmployeesStore:
    def __init__(
        self,
        backend: DataBackend,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Clock = datetime.now,
    ):
        self._backend = backend
        self.repository: RecordRepository[Employee] = RecordRepository(
            Domain.EMPLOYEES, EmployeeRecord, backend
        )
        self.view: DerivedView[Employee, EmployeeStats] = DerivedView(
            self.repository,
            EMPLOYEE_RULES,
            lambda employees, now: employee_stats(employees),
            page_size=page_size,
            clock=clock,
        )
        self.validator = UniquenessValidator(
            self.repository,
            {
                "email": UniqueKey(lambda e: e.email),
                "document": UniqueKey(lambda e: e.document, MatchMode.EXACT),
            },
        )

    async def fetch_employees(self) -> list[Employee]:
        return await self.repository.load()

    def get_employee(self, employee_id: RecordId) -> Employee:
        employee = self.repository.find_by_id(employee_id)
        if employee is None:
            raise EntityNotFoundError("Employee", employee_id)
        return employee

    def is_email_unique(self, email: str, exclude_id: RecordId | None = None) -> bool:
        return self.validator.is_unique("email", email, exclude_id)

    def is_document_unique(self, document: str, exclude_id: RecordId | None = None) -> bool:
        return self.validator.is_unique("document", document, exclude_id)

    async def add_employee(self, data: EmployeeCreate) -> Employee:
        self.validator.ensure_unique("document", data.document)
        self.validator.ensure_unique("email", data.email)
        try:
            raw = await self._backend.create(Domain.EMPLOYEES, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not create employee '%s': %s", data.document, exc)
            raise
        employee = self.repository.insert(self.repository.ingest(raw))
        logger.info("Created employee %s (%s)", employee.id, employee.full_name)
        return employee

    async def update_employee(self, employee_id: RecordId, data: EmployeeCreate) -> Employee:
        self.get_employee(employee_id)
        self.validator.ensure_unique("document", data.document, exclude_id=employee_id)
        self.validator.ensure_unique("email", data.email, exclude_id=employee_id)
        try:
            raw = await self._backend.update(Domain.EMPLOYEES, employee_id, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not update employee %s: %s", employee_id, exc)
            raise
        logger.info("Updated employee %s", employee_id)
        return self.repository.replace(employee_id, self.repository.ingest(raw))

    async def delete_employee(self, employee_id: RecordId) -> Employee:
        self.get_employee(employee_id)
        try:
            await self._backend.remove(Domain.EMPLOYEES, employee_id)
        except BackendError as exc:
            logger.warning("Could not delete employee %s: %s", employee_id, exc)
            raise
        logger.info("Deleted employee %s", employee_id)
        return self.repository.remove(employee_id)

    async def toggle_status(self, employee_id: RecordId) -> Employee:
        """ACTIVE employees become INACTIVE; any other status becomes ACTIVE."""
        employee = self.get_employee(employee_id)
        new_status = EmployeeStatus.INACTIVE if employee.is_active else EmployeeStatus.ACTIVE
        try:
            await self._backend.patch(
                Domain.EMPLOYEES, employee_id, "status", {"status": new_status.value}
            )
        except BackendError as exc:
            logger.warning("Could not change status of employee %s: %s", employee_id, exc)
            raise
        logger.info("Employee %s is now %s", employee_id, new_status.value)
        return self.repository.patch(employee_id, status=new_status.value)

    def employees_by_department(self, department: str) -> list[Employee]:
        return [e for e in self.repository if e.is_active and e.department == department]

    def employees_by_role(self, role: EmployeeRole | str) -> list[Employee]:
        wanted = EmployeeRole(role)
        return [e for e in self.repository if e.is_active and e.role is wanted]

    def get_stats(self) -> EmployeeStats:
        return self.view.get_stats()

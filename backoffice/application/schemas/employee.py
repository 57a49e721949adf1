"""Pydantic schemas for employees."""

from datetime import date
from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from backoffice.domain.entities import Employee
from backoffice.domain.entities.employee import EmployeeStatus

from .base import CalendarDate, LocalDateTime, Money, RecordSchema, WritePayload


class EmployeeRecord(RecordSchema):
    entity_type: ClassVar[str] = "Employee"

    id: int | str
    document: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    position: str = ""
    department: str = ""
    status: str = EmployeeStatus.ACTIVE.value
    contract_type: str = ""
    salary: Decimal = Decimal(0)
    hire_date: CalendarDate | None = None
    username: str = ""
    created_at: LocalDateTime | None = None

    def to_entity(self) -> Employee:
        return Employee(
            id=self.id,
            document=self.document,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone,
            position=self.position,
            department=self.department,
            status=self.status,
            contract_type=self.contract_type,
            salary=self.salary,
            hire_date=self.hire_date,
            username=self.username,
            created_at=self.created_at,
        )


class EmployeeCreate(WritePayload):
    """Schema for creating or updating an employee."""

    document: str = Field(..., min_length=1, max_length=30)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = ""
    phone: str = ""
    position: str = Field(..., min_length=1)
    department: str = ""
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    contract_type: str = ""
    salary: Money = Field(..., gt=0)
    hire_date: date

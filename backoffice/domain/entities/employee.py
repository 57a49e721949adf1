"""Domain entities for staff records."""

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

_DAYS_PER_YEAR = 365.25


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    VACATION = "VACATION"
    SUSPENDED = "SUSPENDED"


class EmployeeRole(str, Enum):
    """System role: employees with a login username are administrators."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


@dataclass(frozen=True)
class Employee:
    id: int | str
    document: str
    first_name: str
    last_name: str = ""
    email: str = ""
    phone: str = ""
    position: str = ""
    department: str = ""
    status: str = EmployeeStatus.ACTIVE.value
    contract_type: str = ""
    salary: Decimal = Decimal(0)
    hire_date: date | None = None
    username: str = ""
    created_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE.value

    @property
    def role(self) -> EmployeeRole:
        return EmployeeRole.ADMIN if self.username else EmployeeRole.EMPLOYEE

    def years_of_service(self, as_of: datetime) -> int:
        """Whole years elapsed since ``hire_date`` (0 when unknown or in the future)."""
        if self.hire_date is None:
            return 0
        hired = datetime.combine(self.hire_date, datetime.min.time())
        elapsed_days = (as_of - hired).total_seconds() / 86400
        return max(0, math.floor(elapsed_days / _DAYS_PER_YEAR))

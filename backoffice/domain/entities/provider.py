"""Domain entity: a merchandise supplier."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Provider:
    id: int | str
    document: str
    name: str
    business_name: str = ""
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    mobile: str = ""
    address: str = ""
    city: str = ""
    payment_terms: str = ""
    payment_days: int | None = None
    notes: str = ""
    is_active: bool = True
    created_at: datetime | None = None

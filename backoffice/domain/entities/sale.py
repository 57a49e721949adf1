"""Domain entities for point-of-sale transactions."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    TRANSFER = "TRANSFER"
    MIXED = "MIXED"


class SaleStatus(str, Enum):
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class SaleItem:
    """One line of a sale: a product size and the quantity sold."""

    product_id: int | str | None = None
    product_code: str = ""
    product_name: str = ""
    size: str = ""
    quantity: int = 0
    unit_price: Decimal = Decimal(0)
    subtotal: Decimal = Decimal(0)


@dataclass(frozen=True)
class Sale:
    id: int | str
    sale_number: str = ""
    customer_name: str = ""
    customer_document: str = ""
    customer_phone: str = ""
    payment_method: str = ""
    status: str = SaleStatus.COMPLETED.value
    subtotal: Decimal = Decimal(0)
    discount: Decimal = Decimal(0)
    tax: Decimal = Decimal(0)
    total: Decimal = Decimal(0)
    total_items: int = 0
    employee_name: str = ""
    notes: str = ""
    created_at: datetime | None = None
    items: tuple[SaleItem, ...] = field(default_factory=tuple)

"""Domain entities for accounts payable: provider invoices and payments.

Payment status is derived from the amounts and the due date. The
``status`` string sent by the backend is not kept on the entity.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


@dataclass(frozen=True)
class Invoice:
    id: int | str
    invoice_number: str
    provider_id: int | str | None = None
    provider_name: str = ""
    issue_date: date | None = None
    due_date: date | None = None
    subtotal: Decimal = Decimal(0)
    tax: Decimal = Decimal(0)
    discount: Decimal = Decimal(0)
    total: Decimal = Decimal(0)
    paid_amount: Decimal = Decimal(0)
    balance: Decimal = Decimal(0)
    description: str = ""
    notes: str = ""
    created_at: datetime | None = None

    @property
    def settlement_status(self) -> PaymentStatus:
        """PENDING / PARTIAL / PAID from the amounts alone."""
        if self.total > 0 and self.balance <= 0:
            return PaymentStatus.PAID
        if self.paid_amount > 0:
            return PaymentStatus.PARTIAL
        return PaymentStatus.PENDING

    def is_overdue(self, as_of: datetime) -> bool:
        if self.due_date is None:
            return False
        return (
            self.due_date < as_of.date()
            and self.settlement_status is not PaymentStatus.PAID
        )

    def status_at(self, as_of: datetime) -> PaymentStatus:
        if self.is_overdue(as_of):
            return PaymentStatus.OVERDUE
        return self.settlement_status

    def with_payment(self, amount: Decimal) -> "Invoice":
        """Return a copy reflecting a registered (or reverted, if negative) payment."""
        paid = self.paid_amount + amount
        return replace(self, paid_amount=paid, balance=self.total - paid)


@dataclass(frozen=True)
class Payment:
    id: int | str
    invoice_id: int | str | None = None
    payment_number: str = ""
    provider_name: str = ""
    amount: Decimal = Decimal(0)
    payment_method: str = ""
    payment_date: date | None = None
    reference_number: str = ""
    notes: str = ""


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def calculate_invoice_totals(
    line_totals: list[Decimal],
    discount: Decimal = Decimal(0),
    tax_rate: Decimal = Decimal("0.19"),
) -> InvoiceTotals:
    """Subtotal of the lines, tax on the subtotal, discount applied after tax."""
    subtotal = sum(line_totals, Decimal(0))
    tax = subtotal * tax_rate
    return InvoiceTotals(
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=subtotal + tax - discount,
    )

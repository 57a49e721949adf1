"""Pydantic schemas for provider invoices and their payments."""

from datetime import date
from decimal import Decimal
from typing import ClassVar

from pydantic import Field, model_validator

from backoffice.domain.entities import Invoice, Payment

from .base import CalendarDate, LocalDateTime, Money, RecordSchema, WritePayload


class InvoiceRecord(RecordSchema):
    """An invoice as returned by ``GET /accounting/invoices``.

    The stored ``status`` field is ignored; status is re-derived from the
    amounts and due date on every read.
    """

    entity_type: ClassVar[str] = "Invoice"

    id: int | str
    invoice_number: str = ""
    provider_id: int | str | None = None
    provider_name: str = ""
    issue_date: CalendarDate | None = None
    due_date: CalendarDate | None = None
    subtotal: Decimal = Decimal(0)
    tax: Decimal = Decimal(0)
    discount: Decimal = Decimal(0)
    total: Decimal = Decimal(0)
    paid_amount: Decimal = Decimal(0)
    balance: Decimal | None = None
    description: str = ""
    notes: str = ""
    created_at: LocalDateTime | None = None

    def to_entity(self) -> Invoice:
        balance = self.balance
        if balance is None:
            balance = self.total - self.paid_amount
        return Invoice(
            id=self.id,
            invoice_number=self.invoice_number,
            provider_id=self.provider_id,
            provider_name=self.provider_name,
            issue_date=self.issue_date,
            due_date=self.due_date,
            subtotal=self.subtotal,
            tax=self.tax,
            discount=self.discount,
            total=self.total,
            paid_amount=self.paid_amount,
            balance=balance,
            description=self.description,
            notes=self.notes,
            created_at=self.created_at,
        )


class PaymentRecord(RecordSchema):
    entity_type: ClassVar[str] = "Payment"

    id: int | str
    invoice_id: int | str | None = None
    payment_number: str = ""
    provider_name: str = ""
    amount: Decimal = Decimal(0)
    payment_method: str = ""
    payment_date: CalendarDate | None = None
    reference_number: str = ""
    notes: str = ""

    def to_entity(self) -> Payment:
        return Payment(
            id=self.id,
            invoice_id=self.invoice_id,
            payment_number=self.payment_number,
            provider_name=self.provider_name,
            amount=self.amount,
            payment_method=self.payment_method,
            payment_date=self.payment_date,
            reference_number=self.reference_number,
            notes=self.notes,
        )


class InvoiceCreate(WritePayload):
    """Schema for registering or updating a provider invoice."""

    invoice_number: str = Field(..., min_length=1, max_length=50)
    provider_id: int | str
    issue_date: date
    due_date: date
    subtotal: Money = Field(..., ge=0)
    tax: Money = Field(Decimal(0), ge=0)
    discount: Money = Field(Decimal(0), ge=0)
    total: Money = Field(..., ge=0)
    description: str = ""
    notes: str = ""

    @model_validator(mode="after")
    def _due_after_issue(self) -> "InvoiceCreate":
        if self.due_date < self.issue_date:
            raise ValueError("due_date must not be earlier than issue_date")
        return self


class PaymentCreate(WritePayload):
    invoice_id: int | str
    amount: Money = Field(..., gt=0)
    payment_method: str = Field(..., min_length=1)
    payment_date: date | None = None
    reference_number: str = ""
    notes: str = ""

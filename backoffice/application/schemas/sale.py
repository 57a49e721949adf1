"""Pydantic schemas for sales."""

from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from backoffice.domain.entities import Sale, SaleItem
from backoffice.domain.entities.sale import PaymentMethod, SaleStatus

from .base import LocalDateTime, Money, NestedRecord, RecordSchema, WritePayload


class SaleItemRecord(NestedRecord):
    product_id: int | str | None = None
    product_code: str = ""
    product_name: str = ""
    size: str = ""
    quantity: int = 0
    unit_price: Decimal = Decimal(0)
    subtotal: Decimal = Decimal(0)


class SaleRecord(RecordSchema):
    entity_type: ClassVar[str] = "Sale"

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
    total_items: int | None = None
    employee_name: str = ""
    notes: str = ""
    created_at: LocalDateTime | None = None
    items: list[SaleItemRecord] = Field(default_factory=list)

    def to_entity(self) -> Sale:
        items = tuple(
            SaleItem(
                product_id=item.product_id,
                product_code=item.product_code,
                product_name=item.product_name,
                size=item.size,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
            )
            for item in self.items
        )
        total_items = self.total_items
        if total_items is None:
            total_items = sum(item.quantity for item in items)
        return Sale(
            id=self.id,
            sale_number=self.sale_number,
            customer_name=self.customer_name,
            customer_document=self.customer_document,
            customer_phone=self.customer_phone,
            payment_method=self.payment_method,
            status=self.status,
            subtotal=self.subtotal,
            discount=self.discount,
            tax=self.tax,
            total=self.total,
            total_items=total_items,
            employee_name=self.employee_name,
            notes=self.notes,
            created_at=self.created_at,
            items=items,
        )


class SaleItemCreate(WritePayload):
    product_id: int | str
    size: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class SaleCreate(WritePayload):
    """Schema for registering a new sale; prices are resolved by the backend."""

    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_document: str = ""
    customer_phone: str = ""
    payment_method: PaymentMethod
    discount: Money = Field(Decimal(0), ge=0)
    tax: Money = Field(Decimal(0), ge=0)
    notes: str = ""
    items: list[SaleItemCreate] = Field(..., min_length=1)

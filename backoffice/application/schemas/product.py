"""Pydantic schemas for inventory products."""

from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from backoffice.domain.entities import Product, SizeStock

from .base import LocalDateTime, Money, NestedRecord, RecordSchema, WritePayload


class SizeStockRecord(NestedRecord):
    size: str = ""
    quantity: int = 0


class ProductRecord(RecordSchema):
    """A product as returned by ``GET /products``."""

    entity_type: ClassVar[str] = "Product"

    id: int | str
    code: str = ""
    name: str = ""
    description: str = ""
    brand: str = ""
    category: str = ""
    color: str = ""
    material: str = ""
    purchase_price: Decimal = Decimal(0)
    sale_price: Decimal = Decimal(0)
    min_stock: int = 0
    total_stock: int | None = None
    is_active: bool = True
    stocks: list[SizeStockRecord] = Field(default_factory=list)
    created_at: LocalDateTime | None = None

    def to_entity(self) -> Product:
        stocks = tuple(SizeStock(size=s.size, quantity=s.quantity) for s in self.stocks)
        total_stock = self.total_stock
        if total_stock is None:
            total_stock = sum(s.quantity for s in stocks)
        return Product(
            id=self.id,
            code=self.code,
            name=self.name,
            description=self.description,
            brand=self.brand,
            category=self.category,
            color=self.color,
            material=self.material,
            purchase_price=self.purchase_price,
            sale_price=self.sale_price,
            min_stock=self.min_stock,
            total_stock=total_stock,
            is_active=self.is_active,
            stocks=stocks,
            created_at=self.created_at,
        )


class SizeStockPayload(WritePayload):
    size: str = Field(..., min_length=1)
    quantity: int = Field(0, ge=0)


class ProductCreate(WritePayload):
    """Schema for creating or fully updating a product."""

    code: str = Field(..., min_length=1, max_length=50, examples=["ZAP01"])
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1)
    description: str = ""
    brand: str = "Sin marca"
    color: str = ""
    material: str = ""
    purchase_price: Money = Field(..., ge=0)
    sale_price: Money = Field(..., ge=0)
    min_stock: int = Field(0, ge=0)
    is_active: bool = True
    stocks: list[SizeStockPayload] = Field(default_factory=list)

    @classmethod
    def from_product(cls, product: Product) -> "ProductCreate":
        """Rebuild a full write payload from a local product.

        The stored values were already accepted at ingestion, so they are
        passed through as they are (an empty category stays empty) instead
        of being validated again as new input.
        """
        return cls.model_construct(
            code=product.code,
            name=product.name,
            category=product.category,
            description=product.description,
            brand=product.brand or "Sin marca",
            color=product.color,
            material=product.material,
            purchase_price=product.purchase_price,
            sale_price=product.sale_price,
            min_stock=product.min_stock,
            is_active=product.is_active,
            stocks=[
                SizeStockPayload.model_construct(size=s.size, quantity=s.quantity)
                for s in product.stocks
            ],
        )

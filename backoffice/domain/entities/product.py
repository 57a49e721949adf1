"""Domain entities for the inventory: products and their per-size stock."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class StockStatus(str, Enum):
    """Stock classification derived from ``total_stock`` vs ``min_stock``."""

    OUT = "out"
    LOW = "low"
    GOOD = "good"


@dataclass(frozen=True)
class SizeStock:
    size: str
    quantity: int = 0


@dataclass(frozen=True)
class Product:
    """A catalogue product with its stock broken down by size.

    ``total_stock`` is whatever the backend reported (the ingestion schema
    falls back to the sum of ``stocks`` when it is missing). Stock status
    is never stored: it is derived from the current quantities.
    """

    id: int | str
    code: str
    name: str
    category: str = ""
    description: str = ""
    brand: str = ""
    color: str = ""
    material: str = ""
    purchase_price: Decimal = Decimal(0)
    sale_price: Decimal = Decimal(0)
    min_stock: int = 0
    total_stock: int = 0
    is_active: bool = True
    stocks: tuple[SizeStock, ...] = field(default_factory=tuple)
    created_at: datetime | None = None

    @property
    def stock_status(self) -> StockStatus:
        if self.total_stock <= 0:
            return StockStatus.OUT
        if self.total_stock <= self.min_stock:
            return StockStatus.LOW
        return StockStatus.GOOD

    @property
    def is_low_stock(self) -> bool:
        return self.stock_status is StockStatus.LOW

    @property
    def stock_value(self) -> Decimal:
        """Inventory value at purchase price."""
        return self.purchase_price * self.total_stock

    @property
    def margin(self) -> Decimal:
        return self.sale_price - self.purchase_price

    def quantity_for(self, size: str) -> int:
        for entry in self.stocks:
            if entry.size == size:
                return entry.quantity
        return 0


@dataclass(frozen=True)
class ProductOptions:
    """Distinct values offered by the catalogue filters, each sorted."""

    categories: tuple[str, ...] = ()
    materials: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()

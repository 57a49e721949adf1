"""Application service for the product catalogue and its per-size stock."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import datetime

from backoffice.application.interfaces import DataBackend, Domain
from backoffice.application.schemas import ProductCreate, ProductRecord
from backoffice.domain.entities import (
    InventoryStats,
    Product,
    ProductOptions,
    SizeStock,
    StockStatus,
)
from backoffice.domain.exceptions import BackendError, EntityNotFoundError

from .aggregation import inventory_stats
from .derived_view import DEFAULT_PAGE_SIZE, Clock, DerivedView
from .predicates import FilterRules
from .record_repository import RecordId, RecordRepository
from .uniqueness import UniqueKey, UniquenessValidator

logger = logging.getLogger(__name__)


def _product_status(product: Product, now: datetime) -> str:
    return "active" if product.is_active else "inactive"


PRODUCT_RULES: FilterRules[Product] = FilterRules(
    search_fields=lambda p: (p.name, p.code, p.category),
    filter_fields={
        "category": lambda p, now: p.category,
        "color": lambda p, now: p.color,
        "material": lambda p, now: p.material,
        "brand": lambda p, now: p.brand,
        "stockStatus": lambda p, now: p.stock_status,
        "productStatus": _product_status,
    },
    date_field=lambda p: p.created_at,
)


class InventoryStore:
    """Products: backend writes first, then the local collection follows."""

    def __init__(
        self,
        backend: DataBackend,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Clock = datetime.now,
    ):
        self._backend = backend
        self.repository: RecordRepository[Product] = RecordRepository(
            Domain.PRODUCTS, ProductRecord, backend
        )
        self.view: DerivedView[Product, InventoryStats] = DerivedView(
            self.repository,
            PRODUCT_RULES,
            lambda products, now: inventory_stats(products),
            page_size=page_size,
            clock=clock,
        )
        self.validator = UniquenessValidator(
            self.repository, {"code": UniqueKey(lambda p: p.code)}
        )

    async def fetch_products(self) -> list[Product]:
        return await self.repository.load()

    def get_product(self, product_id: RecordId) -> Product:
        product = self.repository.find_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product", product_id)
        return product

    def is_reference_unique(self, code: str, exclude_id: RecordId | None = None) -> bool:
        return self.validator.is_unique("code", code, exclude_id)

    async def add_product(self, data: ProductCreate) -> Product:
        self.validator.ensure_unique("code", data.code)
        try:
            raw = await self._backend.create(Domain.PRODUCTS, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not create product '%s': %s", data.code, exc)
            raise
        product = self.repository.insert(self.repository.ingest(raw))
        logger.info("Created product %s (%s)", product.id, product.code)
        return product

    async def update_product(self, product_id: RecordId, data: ProductCreate) -> Product:
        self.get_product(product_id)
        self.validator.ensure_unique("code", data.code, exclude_id=product_id)
        return await self._put(product_id, data)

    async def deactivate_product(self, product_id: RecordId) -> Product:
        """Soft delete: the backend's DELETE only flags the product inactive."""
        self.get_product(product_id)
        try:
            await self._backend.remove(Domain.PRODUCTS, product_id)
        except BackendError as exc:
            logger.warning("Could not deactivate product %s: %s", product_id, exc)
            raise
        logger.info("Deactivated product %s", product_id)
        return self.repository.patch(product_id, is_active=False)

    async def activate_product(self, product_id: RecordId) -> Product:
        self.get_product(product_id)
        try:
            await self._backend.patch(Domain.PRODUCTS, product_id, "activate")
        except BackendError as exc:
            logger.warning("Could not activate product %s: %s", product_id, exc)
            raise
        logger.info("Activated product %s", product_id)
        return self.repository.patch(product_id, is_active=True)

    async def deactivate_products(self, product_ids: Iterable[RecordId]) -> int:
        """Deactivate several products one by one.

        Stops at the first failure; products already confirmed by the
        backend stay deactivated.
        """
        count = 0
        for product_id in product_ids:
            await self.deactivate_product(product_id)
            count += 1
        return count

    async def update_stock(
        self, product_id: RecordId, quantities: Mapping[str, int]
    ) -> Product:
        """Set the quantity of each given size, keeping the other sizes as they are."""
        product = self.get_product(product_id)
        stocks = [
            SizeStock(size=s.size, quantity=quantities.get(s.size, s.quantity))
            for s in product.stocks
        ]
        known = {s.size for s in product.stocks}
        stocks.extend(
            SizeStock(size=size, quantity=quantity)
            for size, quantity in quantities.items()
            if size not in known
        )
        data = ProductCreate.from_product(replace(product, stocks=tuple(stocks)))
        return await self._put(product_id, data)

    def low_stock_products(self) -> list[Product]:
        """Active products that need restocking (low or out of stock)."""
        return [
            p
            for p in self.repository
            if p.is_active and p.stock_status is not StockStatus.GOOD
        ]

    def product_options(self) -> ProductOptions:
        """Distinct categories, materials and colors for the catalogue filters."""

        def distinct(values: Iterable[str]) -> tuple[str, ...]:
            return tuple(sorted({v.strip() for v in values if v and v.strip()}))

        products = self.repository.records
        return ProductOptions(
            categories=distinct(p.category for p in products),
            materials=distinct(p.material for p in products),
            colors=distinct(p.color for p in products),
        )

    def get_stats(self) -> InventoryStats:
        return self.view.get_stats()

    async def _put(self, product_id: RecordId, data: ProductCreate) -> Product:
        try:
            raw = await self._backend.update(Domain.PRODUCTS, product_id, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not update product %s: %s", product_id, exc)
            raise
        product = self.repository.replace(product_id, self.repository.ingest(raw))
        logger.info("Updated product %s", product_id)
        return product

"""Application service for point-of-sale records."""

import logging
from datetime import datetime

from backoffice.application.interfaces import DataBackend, Domain
from backoffice.application.schemas import SaleCreate, SaleRecord
from backoffice.domain.entities import DateRange, FilterSpec, Sale, SalesStats, SaleStatus
from backoffice.domain.exceptions import BackendError, EntityNotFoundError

from .aggregation import DEFAULT_TOP_N, sales_stats
from .derived_view import DEFAULT_PAGE_SIZE, Clock, DerivedView, newest_first
from .predicates import FilterRules
from .record_repository import RecordId, RecordRepository

logger = logging.getLogger(__name__)


def _sale_search_fields(sale: Sale) -> list[object]:
    fields: list[object] = [
        sale.customer_name,
        sale.customer_phone,
        sale.sale_number,
        str(sale.id),
    ]
    for item in sale.items:
        fields.append(item.product_name)
        fields.append(item.product_code)
    return fields


SALE_RULES: FilterRules[Sale] = FilterRules(
    search_fields=_sale_search_fields,
    filter_fields={
        "paymentMethod": lambda s, now: s.payment_method,
        "status": lambda s, now: s.status,
        "employee": lambda s, now: s.employee_name,
    },
    date_field=lambda s: s.created_at,
)

# The sales screen opens on today's completed sales.
DEFAULT_SALES_FILTER = FilterSpec(
    filters={"status": SaleStatus.COMPLETED.value},
    date_range=DateRange.TODAY,
)


class SalesStore:
    def __init__(
        self,
        backend: DataBackend,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        top_n: int = DEFAULT_TOP_N,
        clock: Clock = datetime.now,
    ):
        self._backend = backend
        self.repository: RecordRepository[Sale] = RecordRepository(
            Domain.SALES, SaleRecord, backend
        )
        self.view: DerivedView[Sale, SalesStats] = DerivedView(
            self.repository,
            SALE_RULES,
            lambda sales, now: sales_stats(sales, now, top_n),
            default_spec=DEFAULT_SALES_FILTER,
            ordering=newest_first(lambda s: s.created_at),
            page_size=page_size,
            clock=clock,
        )

    async def fetch_sales(self) -> list[Sale]:
        return await self.repository.load()

    def get_sale(self, sale_id: RecordId) -> Sale:
        sale = self.repository.find_by_id(sale_id)
        if sale is None:
            raise EntityNotFoundError("Sale", sale_id)
        return sale

    async def create_sale(self, data: SaleCreate) -> Sale:
        """Register a sale; the backend prices the items and assigns the number."""
        try:
            raw = await self._backend.create(Domain.SALES, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not register sale for '%s': %s", data.customer_name, exc)
            raise
        sale = self.repository.insert(self.repository.ingest(raw))
        logger.info(
            "Registered sale %s (%s items)", sale.sale_number or sale.id, sale.total_items
        )
        return sale

    async def cancel_sale(self, sale_id: RecordId) -> Sale:
        """Cancel a sale on the backend and drop it from the local collection."""
        self.get_sale(sale_id)
        try:
            await self._backend.patch(Domain.SALES, sale_id, "cancel")
        except BackendError as exc:
            logger.warning("Could not cancel sale %s: %s", sale_id, exc)
            raise
        logger.info("Cancelled sale %s", sale_id)
        return self.repository.remove(sale_id)

    def get_stats(self) -> SalesStats:
        return self.view.get_stats()

"""Application service for accounts payable: provider invoices and their payments.

Invoices and payments live in two repositories. Registering or deleting a
payment also adjusts the paid amount and balance of its invoice locally,
so the invoice's derived status follows without a reload.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from backoffice.application.interfaces import DataBackend, Domain
from backoffice.application.schemas import (
    InvoiceCreate,
    InvoiceRecord,
    PaymentCreate,
    PaymentRecord,
)
from backoffice.domain.entities import (
    AccountingStats,
    DateRange,
    FilterSpec,
    Invoice,
    InvoiceTotals,
    Payment,
    calculate_invoice_totals,
)
from backoffice.domain.exceptions import BackendError, EntityNotFoundError

from .aggregation import DEFAULT_TOP_N, accounting_stats
from .derived_view import DEFAULT_PAGE_SIZE, Clock, DerivedView
from .predicates import FilterRules
from .record_repository import RecordId, RecordRepository
from .uniqueness import UniqueKey, UniquenessValidator

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.19")

INVOICE_RULES: FilterRules[Invoice] = FilterRules(
    search_fields=lambda i: (i.invoice_number, i.provider_name, i.notes),
    filter_fields={
        "status": lambda i, now: i.status_at(now),
        "provider": lambda i, now: i.provider_name,
    },
    date_field=lambda i: i.issue_date,
)

PAYMENT_RULES: FilterRules[Payment] = FilterRules(
    search_fields=lambda p: (p.payment_number, p.provider_name, p.reference_number),
    filter_fields={
        "paymentMethod": lambda p, now: p.payment_method,
        "provider": lambda p, now: p.provider_name,
    },
    date_field=lambda p: p.payment_date,
)

DEFAULT_INVOICE_FILTER = FilterSpec(date_range=DateRange.MONTH)


class AccountingStore:
    def __init__(
        self,
        backend: DataBackend,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        top_n: int = DEFAULT_TOP_N,
        tax_rate: Decimal = DEFAULT_TAX_RATE,
        clock: Clock = datetime.now,
    ):
        self._backend = backend
        self._tax_rate = tax_rate
        self._top_n = top_n
        self.invoices: RecordRepository[Invoice] = RecordRepository(
            Domain.INVOICES, InvoiceRecord, backend
        )
        self.payments: RecordRepository[Payment] = RecordRepository(
            Domain.PAYMENTS, PaymentRecord, backend
        )
        self.invoice_view: DerivedView[Invoice, AccountingStats] = DerivedView(
            self.invoices,
            INVOICE_RULES,
            lambda invoices, now: accounting_stats(
                invoices, self.payments.records, now, self._top_n
            ),
            default_spec=DEFAULT_INVOICE_FILTER,
            page_size=page_size,
            clock=clock,
        )
        self.payment_view: DerivedView[Payment, AccountingStats] = DerivedView(
            self.payments,
            PAYMENT_RULES,
            lambda payments, now: accounting_stats(
                self.invoices.records, payments, now, self._top_n
            ),
            page_size=page_size,
            clock=clock,
        )
        self.validator = UniquenessValidator(
            self.invoices, {"invoice_number": UniqueKey(lambda i: i.invoice_number)}
        )

    # ── Loading ───────────────────────────────────────────────────────

    async def fetch_invoices(self) -> list[Invoice]:
        return await self.invoices.load()

    async def fetch_payments(self) -> list[Payment]:
        return await self.payments.load()

    async def fetch_all(self) -> None:
        await asyncio.gather(self.fetch_invoices(), self.fetch_payments())

    def get_invoice(self, invoice_id: RecordId) -> Invoice:
        invoice = self.invoices.find_by_id(invoice_id)
        if invoice is None:
            raise EntityNotFoundError("Invoice", invoice_id)
        return invoice

    def get_payment(self, payment_id: RecordId) -> Payment:
        payment = self.payments.find_by_id(payment_id)
        if payment is None:
            raise EntityNotFoundError("Payment", payment_id)
        return payment

    def is_invoice_number_unique(
        self, invoice_number: str, exclude_id: RecordId | None = None
    ) -> bool:
        return self.validator.is_unique("invoice_number", invoice_number, exclude_id)

    # ── Invoices ──────────────────────────────────────────────────────

    async def create_invoice(self, data: InvoiceCreate) -> Invoice:
        self.validator.ensure_unique("invoice_number", data.invoice_number)
        try:
            raw = await self._backend.create(Domain.INVOICES, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not create invoice '%s': %s", data.invoice_number, exc)
            raise
        invoice = self.invoices.insert(self.invoices.ingest(raw))
        logger.info("Created invoice %s (%s)", invoice.id, invoice.invoice_number)
        return invoice

    async def update_invoice(self, invoice_id: RecordId, data: InvoiceCreate) -> Invoice:
        self.get_invoice(invoice_id)
        self.validator.ensure_unique("invoice_number", data.invoice_number, exclude_id=invoice_id)
        try:
            raw = await self._backend.update(Domain.INVOICES, invoice_id, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not update invoice %s: %s", invoice_id, exc)
            raise
        logger.info("Updated invoice %s", invoice_id)
        return self.invoices.replace(invoice_id, self.invoices.ingest(raw))

    async def delete_invoice(self, invoice_id: RecordId) -> Invoice:
        self.get_invoice(invoice_id)
        try:
            await self._backend.remove(Domain.INVOICES, invoice_id)
        except BackendError as exc:
            logger.warning("Could not delete invoice %s: %s", invoice_id, exc)
            raise
        logger.info("Deleted invoice %s", invoice_id)
        return self.invoices.remove(invoice_id)

    def overdue_invoices(self) -> list[Invoice]:
        now = self.invoice_view.now()
        return [i for i in self.invoices if i.is_overdue(now)]

    # ── Payments ──────────────────────────────────────────────────────

    async def create_payment(self, data: PaymentCreate) -> Payment:
        self.get_invoice(data.invoice_id)
        try:
            raw = await self._backend.create(Domain.PAYMENTS, data.to_payload())
        except BackendError as exc:
            logger.warning(
                "Could not register payment on invoice %s: %s", data.invoice_id, exc
            )
            raise
        payment = self.payments.insert(self.payments.ingest(raw))
        self._apply_to_invoice(data.invoice_id, data.amount)
        logger.info(
            "Registered payment %s of %s on invoice %s", payment.id, data.amount, data.invoice_id
        )
        return payment

    async def delete_payment(self, payment_id: RecordId) -> Payment:
        payment = self.get_payment(payment_id)
        try:
            await self._backend.remove(Domain.PAYMENTS, payment_id)
        except BackendError as exc:
            logger.warning("Could not delete payment %s: %s", payment_id, exc)
            raise
        removed = self.payments.remove(payment_id)
        if payment.invoice_id is not None:
            self._apply_to_invoice(payment.invoice_id, -payment.amount)
        logger.info("Deleted payment %s", payment_id)
        return removed

    def _apply_to_invoice(self, invoice_id: RecordId, amount: Decimal) -> None:
        invoice = self.invoices.find_by_id(invoice_id)
        if invoice is None:
            return
        self.invoices.replace(invoice.id, invoice.with_payment(amount))

    # ── Derived ───────────────────────────────────────────────────────

    def get_stats(self) -> AccountingStats:
        return self.invoice_view.get_stats()

    def calculate_invoice_totals(
        self, line_totals: Sequence[Decimal], discount: Decimal = Decimal(0)
    ) -> InvoiceTotals:
        return calculate_invoice_totals(list(line_totals), discount, self._tax_rate)

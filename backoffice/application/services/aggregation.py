"""Aggregation engine: summary statistics over record collections.

Every function is pure: it reads the records it is given, never mutates
them, and returns a freshly built stats object. Monetary sums use Decimal
and histograms are emitted with sorted keys, so the result does not depend
on the order of the input collection. The one exception is the tie-break
of the top-N rankings, which keeps first-encountered order.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from backoffice.domain.entities import (
    AccountingPeriodStats,
    AccountingStats,
    DashboardStats,
    Employee,
    EmployeeRole,
    EmployeeStats,
    EmployeeStatus,
    InventoryStats,
    Invoice,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PeriodStats,
    Product,
    Provider,
    ProviderStats,
    Sale,
    SaleStatus,
    SalesStats,
    StockStatus,
    TopProduct,
    TopProvider,
)

from .predicates import start_of_day

DEFAULT_TOP_N = 5
DEFAULT_RECENT_SALES = 5


def histogram(values: Iterable[str | None]) -> dict[str, int]:
    """Count occurrences of each truthy value; falsy values are skipped."""
    counts = Counter(value for value in values if value)
    return dict(sorted(counts.items()))


def _money(values: Iterable[Decimal]) -> Decimal:
    return sum(values, Decimal(0))


# ── Inventory ─────────────────────────────────────────────────────────


def inventory_stats(products: Sequence[Product]) -> InventoryStats:
    return InventoryStats(
        total_products=len(products),
        total_value=_money(p.stock_value for p in products),
        low_stock_products=sum(1 for p in products if p.stock_status is StockStatus.LOW),
        out_of_stock_products=sum(1 for p in products if p.stock_status is StockStatus.OUT),
        active_products=sum(1 for p in products if p.is_active),
        inactive_products=sum(1 for p in products if not p.is_active),
        categories_count=histogram(p.category for p in products),
    )


# ── Sales ─────────────────────────────────────────────────────────────


def _period(sales: Sequence[Sale], since: datetime) -> PeriodStats:
    bucket = [s for s in sales if s.created_at is not None and s.created_at >= since]
    return PeriodStats(
        count=len(bucket),
        total=_money(s.total for s in bucket),
        items=sum(s.total_items for s in bucket),
    )


def start_of_week(moment: datetime) -> datetime:
    """Midnight of the most recent Sunday."""
    days_since_sunday = (moment.weekday() + 1) % 7
    return start_of_day(moment) - timedelta(days=days_since_sunday)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)


def start_of_year(moment: datetime) -> datetime:
    return start_of_day(moment).replace(month=1, day=1)


def _payment_method_counts(methods: Iterable[str]) -> dict[str, int]:
    """Known methods are always reported, unknown ones are counted after them."""
    counts = Counter(m for m in methods if m)
    known = {method.value: counts.pop(method.value, 0) for method in PaymentMethod}
    known.update(sorted(counts.items()))
    return known


@dataclass
class _ProductTally:
    reference: str
    name: str = ""
    named_at: tuple[datetime, str] | None = None
    quantity: int = 0
    total: Decimal = Decimal(0)

    def offer_name(self, name: str, sold_at: datetime | None) -> None:
        """Keep the name from the latest sale; equal dates fall back to the greater name."""
        if not name:
            return
        candidate = (sold_at or datetime.min, name)
        if self.named_at is None or candidate > self.named_at:
            self.named_at = candidate
            self.name = name


def top_products(sales: Sequence[Sale], limit: int = DEFAULT_TOP_N) -> list[TopProduct]:
    """Best sellers by quantity; ties keep the order products were first seen."""
    tallies: dict[str, _ProductTally] = {}
    for sale in sales:
        for item in sale.items:
            reference = item.product_code or str(item.product_id or "")
            tally = tallies.setdefault(reference, _ProductTally(reference=reference))
            tally.offer_name(item.product_name, sale.created_at)
            tally.quantity += item.quantity
            tally.total += item.subtotal

    ranked = sorted(tallies.values(), key=lambda t: t.quantity, reverse=True)
    return [
        TopProduct(reference=t.reference, name=t.name, quantity=t.quantity, total=t.total)
        for t in ranked[:limit]
    ]


def sales_stats(
    sales: Sequence[Sale], as_of: datetime, top_n: int = DEFAULT_TOP_N
) -> SalesStats:
    return SalesStats(
        today=_period(sales, start_of_day(as_of)),
        week=_period(sales, start_of_week(as_of)),
        month=_period(sales, start_of_month(as_of)),
        payment_methods=_payment_method_counts(s.payment_method for s in sales),
        top_products=top_products(sales, top_n),
    )


# ── Accounting ────────────────────────────────────────────────────────


def _accounting_period(
    invoices: Sequence[Invoice], payments: Sequence[Payment], since: datetime
) -> AccountingPeriodStats:
    first_day = since.date()
    period_invoices = [
        i for i in invoices if i.issue_date is not None and i.issue_date >= first_day
    ]
    period_payments = [
        p for p in payments if p.payment_date is not None and p.payment_date >= first_day
    ]
    return AccountingPeriodStats(
        invoices_count=len(period_invoices),
        invoices_amount=_money(i.total for i in period_invoices),
        payments_count=len(period_payments),
        payments_amount=_money(p.amount for p in period_payments),
    )


def top_providers(invoices: Sequence[Invoice], limit: int = DEFAULT_TOP_N) -> list[TopProvider]:
    totals: dict[str, Decimal] = {}
    for invoice in invoices:
        name = invoice.provider_name
        totals[name] = totals.get(name, Decimal(0)) + invoice.total
    ranked = sorted(totals.items(), key=lambda entry: entry[1], reverse=True)
    return [TopProvider(name=name, total=total) for name, total in ranked[:limit]]


def accounting_stats(
    invoices: Sequence[Invoice],
    payments: Sequence[Payment],
    as_of: datetime,
    top_n: int = DEFAULT_TOP_N,
) -> AccountingStats:
    """Invoice buckets come from the derived settlement status; overdue from dates."""
    pending = [i for i in invoices if i.settlement_status is PaymentStatus.PENDING]
    partial = [i for i in invoices if i.settlement_status is PaymentStatus.PARTIAL]
    paid = [i for i in invoices if i.settlement_status is PaymentStatus.PAID]
    overdue = [i for i in invoices if i.is_overdue(as_of)]

    return AccountingStats(
        total_invoices=len(invoices),
        total_invoices_amount=_money(i.total for i in invoices),
        pending_invoices=len(pending),
        pending_amount=_money(i.balance for i in pending),
        paid_invoices=len(paid),
        paid_amount=_money(i.total for i in paid),
        partial_invoices=len(partial),
        partial_amount=_money(i.balance for i in partial),
        overdue_invoices=len(overdue),
        overdue_amount=_money(i.balance for i in overdue),
        monthly=_accounting_period(invoices, payments, start_of_month(as_of)),
        yearly=_accounting_period(invoices, payments, start_of_year(as_of)),
        payment_methods=histogram(p.payment_method for p in payments),
        top_providers=top_providers(invoices, top_n),
    )


# ── Employees ─────────────────────────────────────────────────────────


def employee_stats(employees: Sequence[Employee]) -> EmployeeStats:
    by_status = Counter(e.status for e in employees)
    admins = sum(1 for e in employees if e.role is EmployeeRole.ADMIN)
    return EmployeeStats(
        total_employees=len(employees),
        active_employees=by_status[EmployeeStatus.ACTIVE.value],
        inactive_employees=by_status[EmployeeStatus.INACTIVE.value],
        vacation_employees=by_status[EmployeeStatus.VACATION.value],
        suspended_employees=by_status[EmployeeStatus.SUSPENDED.value],
        total_payroll=_money(e.salary for e in employees if e.is_active),
        department_count=histogram(e.department for e in employees),
        role_count={
            EmployeeRole.ADMIN.value: admins,
            EmployeeRole.EMPLOYEE.value: len(employees) - admins,
        },
        contract_type_count=histogram(e.contract_type for e in employees),
    )


# ── Providers ─────────────────────────────────────────────────────────


def provider_stats(providers: Sequence[Provider]) -> ProviderStats:
    active = sum(1 for p in providers if p.is_active)
    return ProviderStats(
        total_providers=len(providers),
        active_providers=active,
        inactive_providers=len(providers) - active,
    )


# ── Dashboard ─────────────────────────────────────────────────────────


def percent_change(current: Decimal | int, previous: Decimal | int) -> int:
    """Whole-percent change against ``previous``, or 0 when it is not positive."""
    if previous <= 0:
        return 0
    change = (Decimal(current) - Decimal(previous)) / Decimal(previous) * 100
    return int(change.to_integral_value(rounding=ROUND_HALF_UP))


def _between(sales: Sequence[Sale], start: datetime, end: datetime) -> PeriodStats:
    bucket = [s for s in sales if s.created_at is not None and start <= s.created_at < end]
    return PeriodStats(
        count=len(bucket),
        total=_money(s.total for s in bucket),
        items=sum(s.total_items for s in bucket),
    )


def recent_sales(sales: Sequence[Sale], limit: int = DEFAULT_RECENT_SALES) -> list[Sale]:
    """Latest dated sales first; equal timestamps are ordered by sale number."""
    dated = [s for s in sales if s.created_at is not None]
    dated.sort(key=lambda s: (s.created_at, s.sale_number, str(s.id)), reverse=True)
    return dated[:limit]


def dashboard_stats(
    products: Sequence[Product],
    sales: Sequence[Sale],
    employees: Sequence[Employee],
    as_of: datetime,
    recent_limit: int = DEFAULT_RECENT_SALES,
) -> DashboardStats:
    """Today against yesterday over non-cancelled sales.

    Catalogue figures (product count, low stock, categories) cover active
    products only.
    """
    valid_sales = [s for s in sales if s.status != SaleStatus.CANCELLED.value]
    active_products = [p for p in products if p.is_active]

    midnight = start_of_day(as_of)
    today = _between(valid_sales, midnight, midnight + timedelta(days=1))
    yesterday = _between(valid_sales, midnight - timedelta(days=1), midnight)

    return DashboardStats(
        total_products=len(active_products),
        low_stock_items=sum(
            1 for p in active_products if p.stock_status is not StockStatus.GOOD
        ),
        total_employees=len(employees),
        today=today,
        yesterday=yesterday,
        sales_change=percent_change(today.count, yesterday.count),
        revenue_change=percent_change(today.total, yesterday.total),
        category_distribution=histogram(p.category for p in active_products),
        recent_sales=recent_sales(valid_sales, recent_limit),
    )

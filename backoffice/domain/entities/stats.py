"""Aggregate snapshots computed from record collections.

Every stats object is built in one pass by the aggregation functions and is
never updated field by field afterwards.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from .sale import Sale


@dataclass(frozen=True)
class InventoryStats:
    total_products: int = 0
    total_value: Decimal = Decimal(0)
    low_stock_products: int = 0
    out_of_stock_products: int = 0
    active_products: int = 0
    inactive_products: int = 0
    categories_count: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PeriodStats:
    count: int = 0
    total: Decimal = Decimal(0)
    items: int = 0


@dataclass(frozen=True)
class TopProduct:
    reference: str
    name: str
    quantity: int
    total: Decimal


@dataclass(frozen=True)
class SalesStats:
    today: PeriodStats = field(default_factory=PeriodStats)
    week: PeriodStats = field(default_factory=PeriodStats)
    month: PeriodStats = field(default_factory=PeriodStats)
    payment_methods: dict[str, int] = field(default_factory=dict)
    top_products: list[TopProduct] = field(default_factory=list)


@dataclass(frozen=True)
class AccountingPeriodStats:
    invoices_count: int = 0
    invoices_amount: Decimal = Decimal(0)
    payments_count: int = 0
    payments_amount: Decimal = Decimal(0)


@dataclass(frozen=True)
class TopProvider:
    name: str
    total: Decimal


@dataclass(frozen=True)
class AccountingStats:
    total_invoices: int = 0
    total_invoices_amount: Decimal = Decimal(0)
    pending_invoices: int = 0
    pending_amount: Decimal = Decimal(0)
    paid_invoices: int = 0
    paid_amount: Decimal = Decimal(0)
    partial_invoices: int = 0
    partial_amount: Decimal = Decimal(0)
    overdue_invoices: int = 0
    overdue_amount: Decimal = Decimal(0)
    monthly: AccountingPeriodStats = field(default_factory=AccountingPeriodStats)
    yearly: AccountingPeriodStats = field(default_factory=AccountingPeriodStats)
    payment_methods: dict[str, int] = field(default_factory=dict)
    top_providers: list[TopProvider] = field(default_factory=list)


@dataclass(frozen=True)
class EmployeeStats:
    total_employees: int = 0
    active_employees: int = 0
    inactive_employees: int = 0
    vacation_employees: int = 0
    suspended_employees: int = 0
    total_payroll: Decimal = Decimal(0)
    department_count: dict[str, int] = field(default_factory=dict)
    role_count: dict[str, int] = field(default_factory=dict)
    contract_type_count: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderStats:
    total_providers: int = 0
    active_providers: int = 0
    inactive_providers: int = 0


@dataclass(frozen=True)
class DashboardStats:
    """Front-page summary: today against yesterday, plus catalogue health.

    ``sales_change`` and ``revenue_change`` are whole percentages relative
    to yesterday, and 0 when yesterday had no sales.
    """

    total_products: int = 0
    low_stock_items: int = 0
    total_employees: int = 0
    today: PeriodStats = field(default_factory=PeriodStats)
    yesterday: PeriodStats = field(default_factory=PeriodStats)
    sales_change: int = 0
    revenue_change: int = 0
    category_distribution: dict[str, int] = field(default_factory=dict)
    recent_sales: list[Sale] = field(default_factory=list)

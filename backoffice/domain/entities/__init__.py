from .product import Product, ProductOptions, SizeStock, StockStatus
from .sale import PaymentMethod, Sale, SaleItem, SaleStatus
from .invoice import (
    Invoice,
    InvoiceTotals,
    Payment,
    PaymentStatus,
    calculate_invoice_totals,
)
from .employee import Employee, EmployeeRole, EmployeeStatus
from .provider import Provider
from .filtering import DateRange, FilterSpec, UNCONSTRAINED_VALUES
from .stats import (
    AccountingPeriodStats,
    AccountingStats,
    DashboardStats,
    EmployeeStats,
    InventoryStats,
    PeriodStats,
    ProviderStats,
    SalesStats,
    TopProduct,
    TopProvider,
)

__all__ = [
    "Product",
    "ProductOptions",
    "SizeStock",
    "StockStatus",
    "PaymentMethod",
    "Sale",
    "SaleItem",
    "SaleStatus",
    "Invoice",
    "InvoiceTotals",
    "Payment",
    "PaymentStatus",
    "calculate_invoice_totals",
    "Employee",
    "EmployeeRole",
    "EmployeeStatus",
    "Provider",
    "DateRange",
    "FilterSpec",
    "UNCONSTRAINED_VALUES",
    "AccountingPeriodStats",
    "AccountingStats",
    "DashboardStats",
    "EmployeeStats",
    "InventoryStats",
    "PeriodStats",
    "ProviderStats",
    "SalesStats",
    "TopProduct",
    "TopProvider",
]

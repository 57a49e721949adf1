from .base import NestedRecord, RecordSchema, WritePayload
from .product import ProductCreate, ProductRecord, SizeStockPayload, SizeStockRecord
from .sale import SaleCreate, SaleItemCreate, SaleItemRecord, SaleRecord
from .invoice import InvoiceCreate, InvoiceRecord, PaymentCreate, PaymentRecord
from .employee import EmployeeCreate, EmployeeRecord
from .provider import ProviderCreate, ProviderRecord

__all__ = [
    "NestedRecord",
    "RecordSchema",
    "WritePayload",
    "ProductCreate",
    "ProductRecord",
    "SizeStockPayload",
    "SizeStockRecord",
    "SaleCreate",
    "SaleItemCreate",
    "SaleItemRecord",
    "SaleRecord",
    "InvoiceCreate",
    "InvoiceRecord",
    "PaymentCreate",
    "PaymentRecord",
    "EmployeeCreate",
    "EmployeeRecord",
    "ProviderCreate",
    "ProviderRecord",
]

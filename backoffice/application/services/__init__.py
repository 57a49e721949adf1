from .record_repository import ChangeKind, RecordRepository, RepositoryEvent
from .predicates import FilterRules, filter_records, matches
from .derived_view import DerivedView
from .uniqueness import MatchMode, UniqueKey, UniquenessValidator
from .inventory_store import InventoryStore
from .sales_store import SalesStore
from .accounting_store import AccountingStore
from .employees_store import EmployeesStore
from .providers_store import ProvidersStore

__all__ = [
    "ChangeKind",
    "RecordRepository",
    "RepositoryEvent",
    "FilterRules",
    "filter_records",
    "matches",
    "DerivedView",
    "MatchMode",
    "UniqueKey",
    "UniquenessValidator",
    "InventoryStore",
    "SalesStore",
    "AccountingStore",
    "EmployeesStore",
    "ProvidersStore",
]

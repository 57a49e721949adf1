"""Abstract data backend interface (port): the remote source of truth for every domain.

The engine only ever talks to the backend through this port; the HTTP
wire format, authentication and retry policy belong to the adapter.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

RawRecord = dict[str, Any]


class Domain(str, Enum):
    PRODUCTS = "products"
    SALES = "sales"
    INVOICES = "invoices"
    PAYMENTS = "payments"
    EMPLOYEES = "employees"
    PROVIDERS = "providers"


class DataBackend(ABC):
    """Port, implemented in the infrastructure layer."""

    @abstractmethod
    async def list(self, domain: Domain) -> list[RawRecord]:
        """Fetch the full collection for a domain (no server-side filtering)."""
        ...

    @abstractmethod
    async def create(self, domain: Domain, payload: dict[str, Any]) -> RawRecord:
        """Create a record and return it, including its backend-assigned id."""
        ...

    @abstractmethod
    async def update(
        self, domain: Domain, record_id: int | str, payload: dict[str, Any]
    ) -> RawRecord:
        """Replace a record and return the stored version."""
        ...

    @abstractmethod
    async def remove(self, domain: Domain, record_id: int | str) -> None:
        """Delete a record.

        For products and providers the backend treats this as a
        deactivation; the caller decides how to mirror it locally.
        """
        ...

    @abstractmethod
    async def patch(
        self,
        domain: Domain,
        record_id: int | str,
        action: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> RawRecord | None:
        """Apply a partial state change (activate, cancel, status change).

        Args:
            domain: Target collection.
            record_id: Record to change.
            action: Optional sub-resource naming the change (e.g. 'activate').
            params: Optional query parameters (e.g. {'status': 'INACTIVE'}).

        Returns:
            The updated record when the backend sends one, else None.

        Raises:
            BackendError: If the backend rejects the change.
        """
        ...

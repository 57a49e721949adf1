"""Dependency wiring: connects the REST adapter to the domain stores."""

import logging
from collections.abc import Callable
from datetime import datetime
from types import TracebackType

import httpx

from backoffice.application.interfaces import DataBackend
from backoffice.application.services import (
    AccountingStore,
    EmployeesStore,
    InventoryStore,
    ProvidersStore,
    SalesStore,
)
from backoffice.application.services.aggregation import DEFAULT_RECENT_SALES, dashboard_stats
from backoffice.config import Settings, get_settings
from backoffice.domain.entities import DashboardStats
from backoffice.infrastructure.http import RestDataBackend

logger = logging.getLogger(__name__)


def build_backend(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> RestDataBackend:
    """Provides a RestDataBackend configured from settings."""
    settings = settings or get_settings()
    return RestDataBackend(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout,
        token=settings.api_token,
        http_client=http_client,
    )


class BackofficeSession:
    """One backend connection plus one store per domain.

    Usage:
        async with BackofficeSession() as session:
            await session.inventory.fetch_products()
            page = session.inventory.view.current_page()

    When no backend is given, a pooled ``httpx.AsyncClient`` is opened on
    entry and closed on exit.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        backend: DataBackend | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._settings = settings or get_settings()
        self._backend = backend
        self._clock = clock
        self._http_client: httpx.AsyncClient | None = None

        self.inventory: InventoryStore | None = None
        self.sales: SalesStore | None = None
        self.accounting: AccountingStore | None = None
        self.employees: EmployeesStore | None = None
        self.providers: ProvidersStore | None = None

    @property
    def backend(self) -> DataBackend | None:
        return self._backend

    def get_dashboard(self, recent_limit: int = DEFAULT_RECENT_SALES) -> DashboardStats:
        """Front-page summary over the records the stores have loaded."""
        if self.inventory is None or self.sales is None or self.employees is None:
            raise RuntimeError("BackofficeSession is not open")
        return dashboard_stats(
            self.inventory.repository.records,
            self.sales.repository.records,
            self.employees.repository.records,
            self._clock(),
            recent_limit,
        )

    async def __aenter__(self) -> "BackofficeSession":
        if self._backend is None:
            self._http_client = httpx.AsyncClient(timeout=self._settings.api_timeout)
            self._backend = build_backend(self._settings, self._http_client)

        settings = self._settings
        page_size = settings.default_page_size
        self.inventory = InventoryStore(self._backend, page_size=page_size, clock=self._clock)
        self.sales = SalesStore(
            self._backend, page_size=page_size, top_n=settings.top_n, clock=self._clock
        )
        self.accounting = AccountingStore(
            self._backend,
            page_size=page_size,
            top_n=settings.top_n,
            tax_rate=settings.invoice_tax_rate,
            clock=self._clock,
        )
        self.employees = EmployeesStore(self._backend, page_size=page_size, clock=self._clock)
        self.providers = ProvidersStore(self._backend, page_size=page_size, clock=self._clock)
        logger.debug("Back-office session opened against %s", settings.api_base_url)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._backend = None
        logger.debug("Back-office session closed")

"""Application service for the supplier directory."""

import logging
from datetime import datetime

from backoffice.application.interfaces import DataBackend, Domain
from backoffice.application.schemas import ProviderCreate, ProviderRecord
from backoffice.domain.entities import FilterSpec, Provider, ProviderStats
from backoffice.domain.exceptions import BackendError, EntityNotFoundError

from .aggregation import provider_stats
from .derived_view import DEFAULT_PAGE_SIZE, Clock, DerivedView, newest_first
from .predicates import FilterRules
from .record_repository import RecordId, RecordRepository
from .uniqueness import MatchMode, UniqueKey, UniquenessValidator

logger = logging.getLogger(__name__)

PROVIDER_RULES: FilterRules[Provider] = FilterRules(
    search_fields=lambda p: (p.name, p.email, p.city, p.contact_name),
    filter_fields={
        "status": lambda p, now: "active" if p.is_active else "inactive",
        "city": lambda p, now: p.city,
    },
    date_field=lambda p: p.created_at,
)

DEFAULT_PROVIDER_FILTER = FilterSpec(filters={"status": "active"})


class ProvidersStore:
    def __init__(
        self,
        backend: DataBackend,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Clock = datetime.now,
    ):
        self._backend = backend
        self.repository: RecordRepository[Provider] = RecordRepository(
            Domain.PROVIDERS, ProviderRecord, backend
        )
        self.view: DerivedView[Provider, ProviderStats] = DerivedView(
            self.repository,
            PROVIDER_RULES,
            lambda providers, now: provider_stats(providers),
            default_spec=DEFAULT_PROVIDER_FILTER,
            ordering=newest_first(lambda p: p.created_at),
            page_size=page_size,
            clock=clock,
        )
        self.validator = UniquenessValidator(
            self.repository,
            {
                "document": UniqueKey(lambda p: p.document, MatchMode.EXACT),
                "email": UniqueKey(lambda p: p.email),
            },
        )

    async def fetch_providers(self) -> list[Provider]:
        return await self.repository.load()

    def get_provider(self, provider_id: RecordId) -> Provider:
        provider = self.repository.find_by_id(provider_id)
        if provider is None:
            raise EntityNotFoundError("Provider", provider_id)
        return provider

    def is_document_unique(self, document: str, exclude_id: RecordId | None = None) -> bool:
        return self.validator.is_unique("document", document, exclude_id)

    def is_email_unique(self, email: str, exclude_id: RecordId | None = None) -> bool:
        return self.validator.is_unique("email", email, exclude_id)

    async def add_provider(self, data: ProviderCreate) -> Provider:
        self.validator.ensure_unique("document", data.document)
        self.validator.ensure_unique("email", data.email)
        try:
            raw = await self._backend.create(Domain.PROVIDERS, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not create provider '%s': %s", data.name, exc)
            raise
        provider = self.repository.insert(self.repository.ingest(raw))
        logger.info("Created provider %s (%s)", provider.id, provider.name)
        return provider

    async def update_provider(self, provider_id: RecordId, data: ProviderCreate) -> Provider:
        self.get_provider(provider_id)
        self.validator.ensure_unique("document", data.document, exclude_id=provider_id)
        self.validator.ensure_unique("email", data.email, exclude_id=provider_id)
        try:
            raw = await self._backend.update(Domain.PROVIDERS, provider_id, data.to_payload())
        except BackendError as exc:
            logger.warning("Could not update provider %s: %s", provider_id, exc)
            raise
        logger.info("Updated provider %s", provider_id)
        return self.repository.replace(provider_id, self.repository.ingest(raw))

    async def toggle_status(self, provider_id: RecordId) -> Provider:
        """Deactivate an active provider (DELETE) or reactivate an inactive one."""
        provider = self.get_provider(provider_id)
        try:
            if provider.is_active:
                await self._backend.remove(Domain.PROVIDERS, provider_id)
            else:
                await self._backend.patch(Domain.PROVIDERS, provider_id, "activate")
        except BackendError as exc:
            logger.warning("Could not toggle provider %s: %s", provider_id, exc)
            raise
        logger.info(
            "Provider %s %s", provider_id, "deactivated" if provider.is_active else "activated"
        )
        return self.repository.patch(provider_id, is_active=not provider.is_active)

    def get_stats(self) -> ProviderStats:
        return self.view.get_stats()

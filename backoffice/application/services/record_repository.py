"""In-memory record repository: the canonical collection for one domain.

The repository is the only owner of the collection. Views and validators
read from it on demand and never keep copies. Local mutations
(``insert``/``replace``/``remove``/``patch``) mirror writes that the
backend has already confirmed; ``load`` is the only method that talks to
the backend itself.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace as dataclass_replace
from enum import Enum
from typing import Any, Generic, TypeVar

from backoffice.application.interfaces import DataBackend, Domain
from backoffice.application.schemas import RecordSchema
from backoffice.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    RecordValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
RecordId = int | str


class ChangeKind(str, Enum):
    LOADED = "loaded"
    INSERTED = "inserted"
    REPLACED = "replaced"
    REMOVED = "removed"
    PATCHED = "patched"


@dataclass(frozen=True)
class RepositoryEvent:
    kind: ChangeKind
    record_id: RecordId | None
    version: int


Listener = Callable[[RepositoryEvent], None]


def id_key(record_id: RecordId) -> str:
    """Identity used for lookups: ``7`` and ``"7"`` address the same record."""
    return str(record_id).strip()


class RecordRepository(Generic[T]):
    """Holds the records of one domain and notifies listeners on every mutation."""

    def __init__(
        self,
        domain: Domain,
        schema: type[RecordSchema],
        backend: DataBackend,
    ):
        self._domain = domain
        self._schema = schema
        self._backend = backend
        self._records: list[T] = []
        self._version = 0
        self._listeners: list[Listener] = []

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def entity_type(self) -> str:
        return self._schema.entity_type

    @property
    def version(self) -> int:
        """Bumped on every mutation, including reloads."""
        return self._version

    @property
    def records(self) -> tuple[T, ...]:
        return tuple(self._records)

    def snapshot(self) -> list[T]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._records))

    # ── Backend-facing ────────────────────────────────────────────────

    async def load(self) -> list[T]:
        """Replace the collection with a fresh fetch.

        Raises:
            BackendError: If the fetch fails.
            RecordValidationError: If any record is malformed or ids repeat.

        In both cases the previous collection is kept.
        """
        raw_records = await self._backend.list(self._domain)
        records = [self._schema.ingest(raw) for raw in raw_records]

        seen: set[str] = set()
        for record in records:
            key = id_key(self._id_of(record))
            if key in seen:
                raise RecordValidationError(
                    self.entity_type, f"duplicate id '{key}' in backend response"
                )
            seen.add(key)

        self._records = records
        self._notify(ChangeKind.LOADED, None)
        logger.info("Loaded %d %s record(s)", len(records), self._domain.value)
        return list(records)

    def ingest(self, raw: dict[str, Any]) -> T:
        """Normalize a single raw backend record into this domain's entity."""
        return self._schema.ingest(raw)

    # ── Local mirror of confirmed writes ──────────────────────────────

    def find_by_id(self, record_id: RecordId) -> T | None:
        index = self._index_of(record_id)
        return self._records[index] if index is not None else None

    def insert(self, record: T) -> T:
        record_id = self._id_of(record)
        if record_id is None:
            raise RecordValidationError(
                self.entity_type, "cannot insert a record without a backend-assigned id"
            )
        if self._index_of(record_id) is not None:
            raise DuplicateEntityError(self.entity_type, "id", str(record_id))
        self._records.append(record)
        self._notify(ChangeKind.INSERTED, record_id)
        return record

    def replace(self, record_id: RecordId, record: T) -> T:
        index = self._require_index(record_id)
        if id_key(self._id_of(record)) != id_key(record_id):
            raise RecordValidationError(
                self.entity_type,
                f"record id cannot change from '{record_id}' to '{self._id_of(record)}'",
            )
        self._records[index] = record
        self._notify(ChangeKind.REPLACED, record_id)
        return record

    def remove(self, record_id: RecordId) -> T:
        index = self._require_index(record_id)
        removed = self._records.pop(index)
        self._notify(ChangeKind.REMOVED, record_id)
        return removed

    def patch(self, record_id: RecordId, **fields: Any) -> T:
        """Flip fields on a record in place (soft delete, activation, status change)."""
        if "id" in fields:
            raise RecordValidationError(self.entity_type, "record id is immutable")
        index = self._require_index(record_id)
        patched = dataclass_replace(self._records[index], **fields)
        self._records[index] = patched
        self._notify(ChangeKind.PATCHED, record_id)
        return patched

    # ── Listeners ─────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a mutation listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Internals ─────────────────────────────────────────────────────

    @staticmethod
    def _id_of(record: T) -> RecordId | None:
        return getattr(record, "id", None)

    def _index_of(self, record_id: RecordId) -> int | None:
        key = id_key(record_id)
        for index, record in enumerate(self._records):
            if id_key(self._id_of(record)) == key:
                return index
        return None

    def _require_index(self, record_id: RecordId) -> int:
        index = self._index_of(record_id)
        if index is None:
            raise EntityNotFoundError(self.entity_type, record_id)
        return index

    def _notify(self, kind: ChangeKind, record_id: RecordId | None) -> None:
        self._version += 1
        event = RepositoryEvent(kind=kind, record_id=record_id, version=self._version)
        for listener in list(self._listeners):
            listener(event)

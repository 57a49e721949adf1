"""Uniqueness checks against the in-memory collection (no backend round trip)."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from backoffice.domain.exceptions import DuplicateEntityError

from .record_repository import RecordId, RecordRepository, id_key

T = TypeVar("T")


class MatchMode(str, Enum):
    CASE_INSENSITIVE = "case_insensitive"
    EXACT = "exact"


@dataclass(frozen=True)
class UniqueKey(Generic[T]):
    """A field that must not repeat across a domain's records."""

    getter: Callable[[T], object]
    mode: MatchMode = MatchMode.CASE_INSENSITIVE

    def normalize(self, value: object) -> str:
        text = "" if value is None else str(value).strip()
        if self.mode is MatchMode.CASE_INSENSITIVE:
            return text.casefold()
        return text


class UniquenessValidator(Generic[T]):
    def __init__(self, repository: RecordRepository[T], keys: Mapping[str, UniqueKey[T]]):
        self._repository = repository
        self._keys = dict(keys)

    def is_unique(
        self, field: str, candidate: object, exclude_id: RecordId | None = None
    ) -> bool:
        """True when no other record holds ``candidate`` for ``field``.

        Empty candidates never collide. ``exclude_id`` skips the record
        being edited so it does not collide with itself.

        Raises:
            KeyError: If ``field`` has no registered uniqueness rule.
        """
        key = self._keys.get(field)
        if key is None:
            raise KeyError(f"no uniqueness rule registered for '{field}'")

        wanted = key.normalize(candidate)
        if not wanted:
            return True

        skipped = id_key(exclude_id) if exclude_id is not None else None
        for record in self._repository:
            if skipped is not None and id_key(getattr(record, "id", None)) == skipped:
                continue
            if key.normalize(key.getter(record)) == wanted:
                return False
        return True

    def ensure_unique(
        self, field: str, candidate: object, exclude_id: RecordId | None = None
    ) -> None:
        if not self.is_unique(field, candidate, exclude_id):
            raise DuplicateEntityError(
                self._repository.entity_type, field, str(candidate).strip()
            )

"""Shared pydantic plumbing for backend records and write payloads.

Backend records arrive in camelCase with optional fields that may be
missing or null. ``RecordSchema`` normalizes them once, at ingestion, so
that entities downstream never have to guess at defaults.
"""

from abc import abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar

from pydantic import (
    BaseModel,
    AfterValidator,
    BeforeValidator,
    ConfigDict,
    PlainSerializer,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from backoffice.domain.exceptions import RecordValidationError


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _to_date(value: Any) -> Any:
    """Accept plain dates as well as full timestamps for date-only fields."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


# Timestamps are compared against a local, naive clock.
LocalDateTime = Annotated[datetime, AfterValidator(_to_local_naive)]
CalendarDate = Annotated[date, BeforeValidator(_to_date)]
# Sent to the backend as JSON numbers rather than strings.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class NestedRecord(CamelModel):
    """A record, or a part of one: null values fall back to field defaults."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class RecordSchema(NestedRecord):
    """Base for top-level backend records that map onto a domain entity."""

    entity_type: ClassVar[str] = "Record"

    @abstractmethod
    def to_entity(self) -> Any:
        """Map the validated record onto its domain entity."""

    @classmethod
    def ingest(cls, raw: dict[str, Any]) -> Any:
        """Validate a raw backend record and map it to its domain entity."""
        try:
            return cls.model_validate(raw).to_entity()
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise RecordValidationError(cls.entity_type, errors) from exc


class WritePayload(CamelModel):
    """Base for create/update payloads sent to the backend."""

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

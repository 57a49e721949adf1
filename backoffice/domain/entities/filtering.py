"""Domain entities for list filtering: what the user has selected to narrow a view."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping

# Selected filter values that mean "no constraint".
UNCONSTRAINED_VALUES = frozenset({"", "all"})


class DateRange(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"
    CUSTOM = "custom"


@dataclass(frozen=True)
class FilterSpec:
    """Free-text search + field equality filters + date window.

    Immutable: every ``with_*`` method returns a new spec, so a view can
    tell a change happened simply by being handed a new value.
    """

    search_term: str = ""
    filters: Mapping[str, str] = field(default_factory=dict)
    date_range: DateRange | None = None
    custom_start: date | datetime | None = None
    custom_end: date | datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", MappingProxyType(dict(self.filters)))
        if self.date_range is not None:
            object.__setattr__(self, "date_range", DateRange(self.date_range))

    def __hash__(self) -> int:
        return hash(
            (
                self.search_term,
                tuple(sorted(self.filters.items())),
                self.date_range,
                self.custom_start,
                self.custom_end,
            )
        )

    @property
    def active_filters(self) -> dict[str, str]:
        """Filter keys whose selected value actually constrains the result."""
        active: dict[str, str] = {}
        for key, value in self.filters.items():
            if value is None:
                continue
            normalized = str(value).strip()
            if normalized.lower() in UNCONSTRAINED_VALUES:
                continue
            active[key] = normalized
        return active

    @property
    def is_empty(self) -> bool:
        return (
            not self.search_term.strip()
            and not self.active_filters
            and self.date_range in (None, DateRange.ALL)
        )

    def with_search_term(self, term: str) -> "FilterSpec":
        return replace(self, search_term=term or "")

    def with_filters(self, **values: str) -> "FilterSpec":
        merged = dict(self.filters)
        merged.update(values)
        return replace(self, filters=merged)

    def with_date_range(
        self,
        date_range: DateRange | str | None,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
    ) -> "FilterSpec":
        selected = DateRange(date_range) if date_range is not None else None
        if selected is not DateRange.CUSTOM:
            start = end = None
        return replace(self, date_range=selected, custom_start=start, custom_end=end)

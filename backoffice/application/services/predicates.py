"""Predicate engine: decides whether a record belongs to a filtered view.

Three independent constraints are ANDed:

  1. Field equality filters (cheap, evaluated first).
  2. A date window on the domain's designated date field.
  3. A case-insensitive free-text search over the domain's text fields.

Everything here is pure: no I/O, no access to repositories, and the
current instant is always passed in.
"""

import calendar
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Generic, TypeVar

from backoffice.domain.entities import DateRange, FilterSpec

T = TypeVar("T")

FieldGetter = Callable[[T, datetime], object]


@dataclass(frozen=True)
class FilterRules(Generic[T]):
    """Per-domain description of how a FilterSpec applies to its records.

    Attributes:
        search_fields: Returns the text values the search term is matched
            against. ``None`` entries are treated as empty strings.
        filter_fields: Filter key → getter. Getters receive the record and
            the current instant so derived statuses can be filtered on.
        date_field: Returns the value the date window applies to.
    """

    search_fields: Callable[[T], Iterable[object]]
    filter_fields: Mapping[str, FieldGetter] = field(default_factory=dict)
    date_field: Callable[[T], date | datetime | None] | None = None


@dataclass(frozen=True)
class DateWindow:
    start: datetime | None = None
    end: datetime | None = None
    end_inclusive: bool = False

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None:
            if self.end_inclusive:
                return moment <= self.end
            return moment < self.end
        return True


# ── Calendar helpers ──────────────────────────────────────────────────


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def shift_months(moment: datetime, months: int) -> datetime:
    """Move by whole calendar months, clamping the day to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def date_window(spec: FilterSpec, now: datetime) -> DateWindow | None:
    """Translate the date selector into a window, or None for no constraint."""
    selected = spec.date_range
    if selected is None or selected is DateRange.ALL:
        return None

    midnight = start_of_day(now)
    if selected is DateRange.TODAY:
        return DateWindow(start=midnight)
    if selected is DateRange.YESTERDAY:
        return DateWindow(start=midnight - timedelta(days=1), end=midnight)
    if selected is DateRange.WEEK:
        return DateWindow(start=now - timedelta(days=7))
    if selected is DateRange.MONTH:
        return DateWindow(start=shift_months(now, -1))
    if selected is DateRange.YEAR:
        return DateWindow(start=shift_months(now, -12))

    # Custom: date-only bounds cover whole days.
    start = as_datetime(spec.custom_start) if spec.custom_start is not None else None
    end = spec.custom_end
    if end is None:
        return DateWindow(start=start)
    if isinstance(end, datetime):
        return DateWindow(start=start, end=end, end_inclusive=True)
    return DateWindow(start=start, end=as_datetime(end) + timedelta(days=1))


# ── Matching ──────────────────────────────────────────────────────────


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


def _passes_filters(
    record: T, active: Mapping[str, str], rules: FilterRules[T], now: datetime
) -> bool:
    for key, selected in active.items():
        getter = rules.filter_fields.get(key)
        if getter is None:
            return False
        actual = _as_text(getter(record, now))
        if actual is None or actual != selected:
            return False
    return True


def _passes_date_window(
    record: T, window: DateWindow | None, rules: FilterRules[T]
) -> bool:
    if window is None:
        return True
    if rules.date_field is None:
        return False
    value = rules.date_field(record)
    if value is None:
        return False
    return window.contains(as_datetime(value))


def _passes_search(record: T, term: str, rules: FilterRules[T]) -> bool:
    if not term:
        return True
    for value in rules.search_fields(record):
        text = "" if value is None else str(value)
        if term in text.casefold():
            return True
    return False


def matches(record: T, spec: FilterSpec, rules: FilterRules[T], now: datetime) -> bool:
    """True when the record satisfies every active constraint of the filter spec."""
    if not _passes_filters(record, spec.active_filters, rules, now):
        return False
    if not _passes_date_window(record, date_window(spec, now), rules):
        return False
    return _passes_search(record, spec.search_term.strip().casefold(), rules)


def filter_records(
    records: Iterable[T], spec: FilterSpec, rules: FilterRules[T], now: datetime
) -> list[T]:
    """Keep the matching records, preserving collection order."""
    active = spec.active_filters
    window = date_window(spec, now)
    term = spec.search_term.strip().casefold()
    return [
        record
        for record in records
        if _passes_filters(record, active, rules, now)
        and _passes_date_window(record, window, rules)
        and _passes_search(record, term, rules)
    ]

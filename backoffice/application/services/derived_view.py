"""Derived view coordinator: filtering, pagination and stats for one domain.

A view never stores a copy of the collection: every read goes back to the
repository and recomputes, so results always reflect the latest mutation.
"""

import math
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Generic, TypeVar

from backoffice.domain.entities import DateRange, FilterSpec

from .predicates import FilterRules, filter_records
from .record_repository import RecordRepository

T = TypeVar("T")
S = TypeVar("S")

Aggregator = Callable[[Sequence[T], datetime], S]
Ordering = Callable[[list[T]], list[T]]
Clock = Callable[[], datetime]

DEFAULT_PAGE_SIZE = 10


def newest_first(get_date: Callable[[T], datetime | None]) -> Ordering:
    """Stable descending sort on a timestamp; records without one go last."""

    def order(records: list[T]) -> list[T]:
        dated = [r for r in records if get_date(r) is not None]
        undated = [r for r in records if get_date(r) is None]
        return sorted(dated, key=get_date, reverse=True) + undated

    return order


class DerivedView(Generic[T, S]):
    def __init__(
        self,
        repository: RecordRepository[T],
        rules: FilterRules[T],
        aggregate: Aggregator,
        *,
        default_spec: FilterSpec | None = None,
        ordering: Ordering | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Clock = datetime.now,
    ):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._repository = repository
        self._rules = rules
        self._aggregate = aggregate
        self._default_spec = default_spec or FilterSpec()
        self._ordering = ordering
        self._clock = clock
        self._spec = self._default_spec
        self._page = 1
        self._page_size = page_size

    # ── Filter state ──────────────────────────────────────────────────

    @property
    def filter_spec(self) -> FilterSpec:
        return self._spec

    @property
    def default_spec(self) -> FilterSpec:
        return self._default_spec

    def now(self) -> datetime:
        return self._clock()

    def set_filter_spec(self, spec: FilterSpec) -> None:
        """Install a new spec; the page always goes back to 1."""
        self._spec = spec
        self._page = 1

    def set_search_term(self, term: str) -> None:
        self.set_filter_spec(self._spec.with_search_term(term))

    def set_filters(self, **values: str) -> None:
        self.set_filter_spec(self._spec.with_filters(**values))

    def set_date_range(
        self,
        date_range: DateRange | str | None,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
    ) -> None:
        self.set_filter_spec(self._spec.with_date_range(date_range, start, end))

    def clear_filters(self) -> None:
        self.set_filter_spec(self._default_spec)

    # ── Reads ─────────────────────────────────────────────────────────

    def get_filtered_records(self) -> list[T]:
        records = filter_records(self._repository, self._spec, self._rules, self.now())
        if self._ordering is not None:
            records = self._ordering(records)
        return records

    def get_page(self, page_number: int, page_size: int | None = None) -> list[T]:
        size = self._page_size if page_size is None else page_size
        if page_number < 1 or size < 1:
            return []
        start = (page_number - 1) * size
        return self.get_filtered_records()[start : start + size]

    def get_stats(self) -> S:
        """Stats over the whole collection, whatever the active filters."""
        return self._aggregate(self._repository.records, self.now())

    # ── Pagination cursor ─────────────────────────────────────────────

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    def set_page(self, page_number: int) -> None:
        self._page = max(1, page_number)

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = page_size
        self._page = 1

    def current_page(self) -> list[T]:
        return self.get_page(self._page, self._page_size)

    def total_pages(self) -> int:
        return math.ceil(len(self.get_filtered_records()) / self._page_size)

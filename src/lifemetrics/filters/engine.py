"""
Filter Engine

Turns a record collection into a derived, ordered view: filter, then free
text search, then sort. The engine holds only configuration (how to read
records, which fields to search, how to compute sort keys, which clock to
use for relative dates) and never mutates its inputs.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Sequence

from lifemetrics.filters.base import Filter, FilterGroup, FilterResult, FilterState, SortConfig
from lifemetrics.filters.matching import (
    apply_filter_state,
    evaluate_filter,
    explain,
    matches_filter,
    matches_group,
)
from lifemetrics.filters.properties import FLAT_ADAPTER, RecordAdapter
from lifemetrics.filters.search import TextGetter, apply_search
from lifemetrics.filters.sorting import ValueGetter, apply_sort
from lifemetrics.utils import ensure_aware, utc_now


class FilterEngine:
    """
    Pure filter/search/sort pipeline over in-memory records.

    Example:
        engine = FilterEngine(search_fields=["title"])
        view = engine.run(todos, filter_state=state, search="coffee",
                          sort=SortConfig("due", "asc"))
    """

    def __init__(
        self,
        adapter: Optional[RecordAdapter] = None,
        search_fields: Optional[Sequence[str]] = None,
        text_getter: Optional[TextGetter] = None,
        sort_value_getter: Optional[ValueGetter] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the engine.

        Args:
            adapter: How to read record values (flat records by default)
            search_fields: Fields searched when no text_getter is given
            text_getter: Function producing a record's full searchable text
            sort_value_getter: Function (record, key) -> sort value
            clock: Source of the current time for relative-date operators
        """
        self.adapter = adapter or FLAT_ADAPTER
        self.search_fields = list(search_fields) if search_fields else None
        self.text_getter = text_getter
        self.sort_value_getter = sort_value_getter
        self.clock = clock or utc_now
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_aware(now if now is not None else self.clock())

    def evaluate_filter(self, record: Any, filter_obj: Filter, now: Optional[datetime] = None) -> FilterResult:
        """Evaluate one filter against one record, with outcome details."""
        return evaluate_filter(record, filter_obj, now=self._now(now), adapter=self.adapter)

    def matches_filter(self, record: Any, filter_obj: Filter, now: Optional[datetime] = None) -> bool:
        """Whether a record passes one filter."""
        return matches_filter(record, filter_obj, now=self._now(now), adapter=self.adapter)

    def matches_group(self, record: Any, group: FilterGroup, now: Optional[datetime] = None) -> bool:
        """Whether a record satisfies one filter group."""
        return matches_group(record, group, now=self._now(now), adapter=self.adapter)

    def explain(self, record: Any, state: FilterState, now: Optional[datetime] = None) -> List[List[FilterResult]]:
        """Per-group, per-filter results for one record."""
        return explain(record, state, now=self._now(now), adapter=self.adapter)

    def apply_filter_state(
        self,
        records: Iterable[Any],
        state: Optional[FilterState],
        now: Optional[datetime] = None
    ) -> List[Any]:
        """Keep the records matching any group of the state."""
        return apply_filter_state(records, state, now=self._now(now), adapter=self.adapter)

    def apply_search(self, records: Iterable[Any], query: Optional[str]) -> List[Any]:
        """Keep the records whose searchable text contains the query."""
        return apply_search(
            records,
            query,
            search_fields=self.search_fields,
            text_getter=self.text_getter,
            adapter=self.adapter
        )

    def apply_sort(self, records: Iterable[Any], config: Optional[SortConfig]) -> List[Any]:
        """Stable sort with nulls last in both directions."""
        return apply_sort(records, config, value_getter=self.sort_value_getter, adapter=self.adapter)

    def run(
        self,
        records: Iterable[Any],
        filter_state: Optional[FilterState] = None,
        search: Optional[str] = None,
        sort: Optional[SortConfig] = None,
        now: Optional[datetime] = None
    ) -> List[Any]:
        """
        Produce the filtered, searched and sorted view of ``records``.

        Filtering runs first, then search, then sort, so sort keys are only
        computed for the records that survive.

        Args:
            records: Input collection; never mutated
            filter_state: Declarative filter groups
            search: Free-text query
            sort: Sort key and direction
            now: Reference time for relative-date operators

        Returns:
            New list of records
        """
        records = list(records)
        total = len(records)

        view = self.apply_filter_state(records, filter_state, now=now)
        after_filter = len(view)

        view = self.apply_search(view, search)
        after_search = len(view)

        view = self.apply_sort(view, sort)

        self.logger.debug(
            f"{total} records -> {after_filter} after filters -> {after_search} after search"
            + (f", sorted by {sort.key} {sort.direction.value}" if sort is not None and sort.is_active else "")
        )
        return view

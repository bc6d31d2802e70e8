"""
Filtering System for LifeMetrics Records

This module provides a declarative filter, search and sort engine for
personal-data records such as todos, habits, calendar events and Notion
database pages. Filters are plain values that can be stored, edited by a
filter builder and evaluated against records of any shape.

Key Components:
- Filter, FilterGroup, FilterState, SortConfig: immutable query values
- FilterEngine: filter -> search -> sort pipeline
- FilterFactory: builds query values from dictionaries and config
- RecordAdapter: pluggable access to flat or Notion-typed records
- builder: immutable editing operations used by filter-builder UIs
"""

from .base import (
    Filter,
    FilterGroup,
    FilterOperator,
    FilterResult,
    FilterState,
    GroupOperator,
    MatchOutcome,
    SortConfig,
    SortDirection,
    get_active_filter_count,
    has_active_filters,
    make_state,
)
from .properties import (
    FLAT_ADAPTER,
    NOTION_ADAPTER,
    PropertyType,
    RecordAdapter,
    notion_value,
)
from .operators import (
    filter_needs_value,
    get_available_operators,
    get_operator_label,
    is_operator_legal,
)
from .matching import (
    apply_filter_state,
    evaluate_filter,
    matches_filter,
    matches_group,
)
from .search import apply_search
from .sorting import apply_sort, next_sort_config
from .engine import FilterEngine
from .factory import FilterFactory
from . import builder

__all__ = [
    "Filter",
    "FilterGroup",
    "FilterOperator",
    "FilterResult",
    "FilterState",
    "GroupOperator",
    "MatchOutcome",
    "SortConfig",
    "SortDirection",
    "get_active_filter_count",
    "has_active_filters",
    "make_state",
    "FLAT_ADAPTER",
    "NOTION_ADAPTER",
    "PropertyType",
    "RecordAdapter",
    "notion_value",
    "filter_needs_value",
    "get_available_operators",
    "get_operator_label",
    "is_operator_legal",
    "apply_filter_state",
    "evaluate_filter",
    "matches_filter",
    "matches_group",
    "apply_search",
    "apply_sort",
    "next_sort_config",
    "FilterEngine",
    "FilterFactory",
    "builder",
]

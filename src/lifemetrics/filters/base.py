"""
Filter Value Objects

Defines the declarative, immutable building blocks the filter engine
evaluates: single filters, filter groups, the overall filter state, sort
configuration, and the FilterResult produced when one filter is evaluated
against one record.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from lifemetrics.filters.properties import PropertyType, parse_property_type


class FilterOperator(str, Enum):
    """Comparison applied by a single filter."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL_TO = "greater_than_or_equal_to"
    LESS_THAN_OR_EQUAL_TO = "less_than_or_equal_to"
    BEFORE = "before"
    AFTER = "after"
    ON_OR_BEFORE = "on_or_before"
    ON_OR_AFTER = "on_or_after"
    PAST_WEEK = "past_week"
    PAST_MONTH = "past_month"
    PAST_YEAR = "past_year"
    NEXT_WEEK = "next_week"
    NEXT_MONTH = "next_month"
    NEXT_YEAR = "next_year"


class GroupOperator(str, Enum):
    """How to combine the filters of one group."""
    AND = "and"  # All filters must pass
    OR = "or"    # At least one filter must pass


class SortDirection(str, Enum):
    """Sort direction; a SortConfig with no direction leaves order untouched."""
    ASC = "asc"
    DESC = "desc"


class MatchOutcome(str, Enum):
    """Whether a filter could actually be evaluated against a record."""
    MATCHED = "matched"
    NOT_MATCHED = "not_matched"
    SKIPPED = "skipped"  # operands could not be compared


def parse_operator(value: Union[FilterOperator, str, None]) -> Optional[FilterOperator]:
    """Resolve an operator name, returning None when it is not recognized."""
    if isinstance(value, FilterOperator):
        return value
    if value is None:
        return None
    try:
        return FilterOperator(str(value))
    except ValueError:
        return None


def parse_group_operator(value: Union[GroupOperator, str, None]) -> GroupOperator:
    """Resolve a group operator; anything other than ``and`` combines with OR."""
    if isinstance(value, GroupOperator):
        return value
    if value is None:
        return GroupOperator.AND
    return GroupOperator.AND if str(value).lower() == "and" else GroupOperator.OR


def parse_sort_direction(value: Union[SortDirection, str, None]) -> Optional[SortDirection]:
    """Resolve a sort direction; unknown or empty values mean unsorted."""
    if value is None or isinstance(value, SortDirection):
        return value
    try:
        return SortDirection(str(value).lower())
    except ValueError:
        return None


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


@dataclass(frozen=True)
class Filter:
    """
    A single property/operator/value comparison.

    Attributes:
        property: Name of the record property to test
        operator: FilterOperator, or an unrecognized name (fails open)
        value: Comparison value; ignored by the emptiness and relative-date operators
        property_type: Declared type of the property, if known
        id: Identifier assigned by a filter builder
    """
    property: str
    operator: Union[FilterOperator, str] = FilterOperator.EQUALS
    value: Any = None
    property_type: Optional[PropertyType] = None
    id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "value", _freeze(self.value))
        operator = parse_operator(self.operator)
        if operator is not None:
            object.__setattr__(self, "operator", operator)
        if self.property_type is not None and not isinstance(self.property_type, PropertyType):
            object.__setattr__(self, "property_type", parse_property_type(self.property_type))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used by filter builders."""
        operator = self.operator.value if isinstance(self.operator, FilterOperator) else self.operator
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        data = {
            "property": self.property,
            "operator": operator,
            "value": value,
        }
        if self.property_type is not None:
            data["propertyType"] = self.property_type.value
        if self.id is not None:
            data["id"] = self.id
        return data


@dataclass(frozen=True)
class FilterGroup:
    """Filters combined with AND/OR. An empty group matches every record."""
    filters: Tuple[Filter, ...] = ()
    operator: GroupOperator = GroupOperator.AND
    id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "filters", tuple(self.filters))
        object.__setattr__(self, "operator", parse_group_operator(self.operator))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "filters": [f.to_dict() for f in self.filters],
            "operator": self.operator.value,
        }
        if self.id is not None:
            data["id"] = self.id
        return data


@dataclass(frozen=True)
class FilterState:
    """Groups combined with OR. No groups means no filtering at all."""
    groups: Tuple[FilterGroup, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "groups", tuple(self.groups))

    def to_dict(self) -> Dict[str, Any]:
        return {"groups": [g.to_dict() for g in self.groups]}

    @property
    def active_filter_count(self) -> int:
        return get_active_filter_count(self)


@dataclass(frozen=True)
class SortConfig:
    """Sort key and direction. A direction of None means unsorted."""
    key: str = ""
    direction: Optional[SortDirection] = None

    def __post_init__(self):
        object.__setattr__(self, "direction", parse_sort_direction(self.direction))

    @property
    def is_active(self) -> bool:
        return bool(self.key) and self.direction is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "direction": self.direction.value if self.direction else None,
        }


@dataclass
class FilterResult:
    """
    Result of evaluating one filter against one record.

    Attributes:
        passed: Whether the record is kept by this filter
        outcome: MATCHED, NOT_MATCHED, or SKIPPED when the comparison could
            not be evaluated (passed then reflects the fail-open/closed policy)
        reason: Human-readable reason for pass/fail
        metadata: Additional details (operator, compared values)
        error: Error message if value extraction failed
    """
    passed: bool
    outcome: MatchOutcome = MatchOutcome.NOT_MATCHED
    reason: str = ""
    metadata: Dict[str, Any] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}

    @property
    def skipped(self) -> bool:
        return self.outcome == MatchOutcome.SKIPPED


def get_active_filter_count(state: Optional[FilterState]) -> int:
    """Total number of filters across all groups."""
    if state is None:
        return 0
    return sum(len(group.filters) for group in state.groups)


def has_active_filters(state: Optional[FilterState]) -> bool:
    """Whether the state contains at least one filter."""
    return get_active_filter_count(state) > 0


def make_state(*groups: Sequence[Filter], operator: Union[GroupOperator, str] = GroupOperator.AND) -> FilterState:
    """
    Shorthand for building a FilterState from sequences of filters.

    Each positional argument becomes one group combined with ``operator``.
    """
    return FilterState(groups=tuple(FilterGroup(filters=tuple(g), operator=operator) for g in groups))

"""
Filter matching.

Evaluates single filters, filter groups and whole filter states against
records. Evaluation never raises: a comparison whose operands cannot be
compared (wrong type, unparsable date) is reported as SKIPPED and does not
match, while an unrecognized operator is SKIPPED and lets the record
through so that a typo never hides data.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from lifemetrics.filters.base import (
    Filter,
    FilterGroup,
    FilterOperator,
    FilterResult,
    FilterState,
    GroupOperator,
    MatchOutcome,
    parse_operator,
)
from lifemetrics.filters.properties import (
    DATE_PROPERTY_TYPES,
    FLAT_ADAPTER,
    PropertyType,
    RecordAdapter,
)
from lifemetrics.utils import coerce_text, ensure_aware, parse_date, to_number, utc_now

logger = logging.getLogger(__name__)

# A handler returns True/False, or None when the operands cannot be compared
Handler = Callable[[Any, Any, Optional[PropertyType], datetime], Optional[bool]]

RELATIVE_WINDOWS: Dict[FilterOperator, relativedelta] = {
    FilterOperator.PAST_WEEK: relativedelta(days=7),
    FilterOperator.PAST_MONTH: relativedelta(months=1),
    FilterOperator.PAST_YEAR: relativedelta(years=1),
    FilterOperator.NEXT_WEEK: relativedelta(days=7),
    FilterOperator.NEXT_MONTH: relativedelta(months=1),
    FilterOperator.NEXT_YEAR: relativedelta(years=1),
}


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if _is_sequence(value):
        return len(value) == 0
    return False


def _text_set(values: Iterable[Any]) -> set:
    return {coerce_text(item) for item in values}


def _describe(value: Any) -> str:
    try:
        return repr(value)
    except ValueError:
        return coerce_text(value)


# ---------------------------------------------------------------------------
# Operator handlers
# ---------------------------------------------------------------------------

def _equals(record_value, filter_value, property_type, now):
    if _is_sequence(record_value):
        if _is_sequence(filter_value):
            return _text_set(record_value) == _text_set(filter_value)
        return coerce_text(filter_value) in _text_set(record_value)

    if property_type in DATE_PROPERTY_TYPES:
        left, right = parse_date(record_value, default=now), parse_date(filter_value, default=now)
        if left is not None and right is not None:
            return left.date() == right.date()

    return coerce_text(record_value) == coerce_text(filter_value)


def _not_equals(record_value, filter_value, property_type, now):
    return not _equals(record_value, filter_value, property_type, now)


def _contains(record_value, filter_value, property_type, now):
    if filter_value is None:
        return None

    if _is_sequence(record_value):
        # any-overlap, not subset
        wanted = filter_value if _is_sequence(filter_value) else [filter_value]
        present = _text_set(record_value)
        return any(coerce_text(item) in present for item in wanted)

    haystack = coerce_text(record_value).lower()
    if _is_sequence(filter_value):
        return any(coerce_text(item).lower() in haystack for item in filter_value)
    return coerce_text(filter_value).lower() in haystack


def _does_not_contain(record_value, filter_value, property_type, now):
    result = _contains(record_value, filter_value, property_type, now)
    return None if result is None else not result


def _is_empty_handler(record_value, filter_value, property_type, now):
    return _is_empty(record_value)


def _is_not_empty_handler(record_value, filter_value, property_type, now):
    return not _is_empty(record_value)


def _starts_with(record_value, filter_value, property_type, now):
    if not isinstance(record_value, str) or not isinstance(filter_value, str):
        return None
    return record_value.lower().startswith(filter_value.lower())


def _ends_with(record_value, filter_value, property_type, now):
    if not isinstance(record_value, str) or not isinstance(filter_value, str):
        return None
    return record_value.lower().endswith(filter_value.lower())


def _numeric(compare: Callable[[float, float], bool]) -> Handler:
    def handler(record_value, filter_value, property_type, now):
        left, right = to_number(record_value), to_number(filter_value)
        if left is None or right is None:
            return None
        return compare(left, right)
    return handler


def _dated(compare: Callable[[datetime, datetime], bool]) -> Handler:
    def handler(record_value, filter_value, property_type, now):
        left, right = parse_date(record_value, default=now), parse_date(filter_value, default=now)
        if left is None or right is None:
            return None
        return compare(left, right)
    return handler


def _past(operator: FilterOperator) -> Handler:
    def handler(record_value, filter_value, property_type, now):
        moment = parse_date(record_value, default=now)
        if moment is None:
            return None
        return moment >= now - RELATIVE_WINDOWS[operator]
    return handler


def _upcoming(operator: FilterOperator) -> Handler:
    def handler(record_value, filter_value, property_type, now):
        moment = parse_date(record_value, default=now)
        if moment is None:
            return None
        return moment <= now + RELATIVE_WINDOWS[operator]
    return handler


OPERATOR_HANDLERS: Dict[FilterOperator, Handler] = {
    FilterOperator.EQUALS: _equals,
    FilterOperator.NOT_EQUALS: _not_equals,
    FilterOperator.CONTAINS: _contains,
    FilterOperator.DOES_NOT_CONTAIN: _does_not_contain,
    FilterOperator.IS_EMPTY: _is_empty_handler,
    FilterOperator.IS_NOT_EMPTY: _is_not_empty_handler,
    FilterOperator.STARTS_WITH: _starts_with,
    FilterOperator.ENDS_WITH: _ends_with,
    FilterOperator.GREATER_THAN: _numeric(lambda a, b: a > b),
    FilterOperator.LESS_THAN: _numeric(lambda a, b: a < b),
    FilterOperator.GREATER_THAN_OR_EQUAL_TO: _numeric(lambda a, b: a >= b),
    FilterOperator.LESS_THAN_OR_EQUAL_TO: _numeric(lambda a, b: a <= b),
    FilterOperator.BEFORE: _dated(lambda a, b: a < b),
    FilterOperator.AFTER: _dated(lambda a, b: a > b),
    FilterOperator.ON_OR_BEFORE: _dated(lambda a, b: a <= b),
    FilterOperator.ON_OR_AFTER: _dated(lambda a, b: a >= b),
    FilterOperator.PAST_WEEK: _past(FilterOperator.PAST_WEEK),
    FilterOperator.PAST_MONTH: _past(FilterOperator.PAST_MONTH),
    FilterOperator.PAST_YEAR: _past(FilterOperator.PAST_YEAR),
    FilterOperator.NEXT_WEEK: _upcoming(FilterOperator.NEXT_WEEK),
    FilterOperator.NEXT_MONTH: _upcoming(FilterOperator.NEXT_MONTH),
    FilterOperator.NEXT_YEAR: _upcoming(FilterOperator.NEXT_YEAR),
}

_EMPTINESS_OPERATORS = frozenset({FilterOperator.IS_EMPTY, FilterOperator.IS_NOT_EMPTY})


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def evaluate_filter(
    record: Any,
    filter_obj: Filter,
    now: Optional[datetime] = None,
    adapter: Optional[RecordAdapter] = None
) -> FilterResult:
    """
    Evaluate a single filter against a record.

    Args:
        record: Record to test
        filter_obj: Filter to apply
        now: Reference time for the relative-date operators (defaults to now, UTC)
        adapter: How to read property values (defaults to flat records)

    Returns:
        FilterResult describing whether the record passed and why
    """
    adapter = adapter or FLAT_ADAPTER
    operator = parse_operator(filter_obj.operator)

    if operator is None:
        logger.debug(f"Unknown operator '{filter_obj.operator}' on property '{filter_obj.property}', not filtering")
        return FilterResult(
            passed=True,
            outcome=MatchOutcome.SKIPPED,
            reason=f"Unknown operator '{filter_obj.operator}'",
            metadata={"property": filter_obj.property, "operator": str(filter_obj.operator)}
        )

    try:
        record_value = adapter.value(record, filter_obj.property, filter_obj.property_type)
    except Exception as e:
        logger.debug(f"Could not read property '{filter_obj.property}' with {adapter.name} adapter: {e}")
        return FilterResult(
            passed=False,
            outcome=MatchOutcome.SKIPPED,
            reason=f"Property '{filter_obj.property}' could not be read",
            metadata={"property": filter_obj.property, "operator": operator.value},
            error=str(e)
        )

    metadata = {
        "property": filter_obj.property,
        "operator": operator.value,
        "record_value": record_value,
        "filter_value": filter_obj.value,
    }

    if record_value is None and operator not in _EMPTINESS_OPERATORS:
        return FilterResult(
            passed=False,
            outcome=MatchOutcome.NOT_MATCHED,
            reason=f"Property '{filter_obj.property}' has no value",
            metadata=metadata
        )

    reference = ensure_aware(now) if now is not None else utc_now()
    try:
        matched = OPERATOR_HANDLERS[operator](record_value, filter_obj.value, filter_obj.property_type, reference)
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Error applying {operator.value} to '{filter_obj.property}': {e}")
        return FilterResult(
            passed=False,
            outcome=MatchOutcome.SKIPPED,
            reason=f"Values not comparable with '{operator.value}'",
            metadata=metadata,
            error=str(e)
        )

    if matched is None:
        logger.debug(
            f"Cannot evaluate {filter_obj.property} {operator.value} {_describe(filter_obj.value)} "
            f"against {_describe(record_value)}, treating as no match"
        )
        return FilterResult(
            passed=False,
            outcome=MatchOutcome.SKIPPED,
            reason=f"Values not comparable with '{operator.value}'",
            metadata=metadata
        )

    return FilterResult(
        passed=matched,
        outcome=MatchOutcome.MATCHED if matched else MatchOutcome.NOT_MATCHED,
        reason=f"{filter_obj.property} {operator.value} {_describe(filter_obj.value)}: {'match' if matched else 'no match'}",
        metadata=metadata
    )


def matches_filter(
    record: Any,
    filter_obj: Filter,
    now: Optional[datetime] = None,
    adapter: Optional[RecordAdapter] = None
) -> bool:
    """Whether a record passes a single filter."""
    return evaluate_filter(record, filter_obj, now=now, adapter=adapter).passed


def matches_group(
    record: Any,
    group: FilterGroup,
    now: Optional[datetime] = None,
    adapter: Optional[RecordAdapter] = None
) -> bool:
    """
    Whether a record satisfies a filter group.

    An empty group matches everything. AND requires every filter to pass,
    OR requires at least one; both stop at the first deciding filter.
    """
    if not group.filters:
        return True

    checks = (matches_filter(record, f, now=now, adapter=adapter) for f in group.filters)
    if group.operator == GroupOperator.AND:
        return all(checks)
    return any(checks)


def matches_state(
    record: Any,
    state: FilterState,
    now: Optional[datetime] = None,
    adapter: Optional[RecordAdapter] = None
) -> bool:
    """Whether a record satisfies any group of the state (or the state is empty)."""
    if not state.groups:
        return True
    return any(matches_group(record, group, now=now, adapter=adapter) for group in state.groups)


def apply_filter_state(
    records: Iterable[Any],
    state: Optional[FilterState],
    now: Optional[datetime] = None,
    adapter: Optional[RecordAdapter] = None
) -> List[Any]:
    """
    Keep the records matching at least one group of the filter state.

    Args:
        records: Records to filter; never mutated
        state: Filter state; None or no groups keeps every record
        now: Reference time for relative-date operators, fixed for the whole call
        adapter: How to read property values

    Returns:
        New list of matching records in their original order
    """
    if state is None or not state.groups:
        return list(records)

    reference = ensure_aware(now) if now is not None else utc_now()
    return [r for r in records if matches_state(r, state, now=reference, adapter=adapter)]


def explain(
    record: Any,
    state: FilterState,
    now: Optional[datetime] = None,
    adapter: Optional[RecordAdapter] = None
) -> List[List[FilterResult]]:
    """
    Evaluate every filter of every group without short-circuiting.

    Useful for showing which filters matched, failed or could not be
    evaluated for a particular record.
    """
    reference = ensure_aware(now) if now is not None else utc_now()
    return [
        [evaluate_filter(record, f, now=reference, adapter=adapter) for f in group.filters]
        for group in state.groups
    ]

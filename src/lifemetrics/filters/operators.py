"""
Operator legality and labels.

Which operators a filter builder may offer depends only on the declared
property type. This module holds that table along with the list of
operators that take no comparison value and the human-readable labels shown
next to each operator.
"""

from typing import Dict, List, Optional, Union

from lifemetrics.filters.base import FilterOperator, parse_operator
from lifemetrics.filters.properties import PropertyType, parse_property_type

_TEXT_OPERATORS = (
    FilterOperator.EQUALS,
    FilterOperator.NOT_EQUALS,
    FilterOperator.CONTAINS,
    FilterOperator.DOES_NOT_CONTAIN,
    FilterOperator.IS_EMPTY,
    FilterOperator.IS_NOT_EMPTY,
    FilterOperator.STARTS_WITH,
    FilterOperator.ENDS_WITH,
)

_NUMBER_OPERATORS = (
    FilterOperator.EQUALS,
    FilterOperator.NOT_EQUALS,
    FilterOperator.GREATER_THAN,
    FilterOperator.LESS_THAN,
    FilterOperator.GREATER_THAN_OR_EQUAL_TO,
    FilterOperator.LESS_THAN_OR_EQUAL_TO,
    FilterOperator.IS_EMPTY,
    FilterOperator.IS_NOT_EMPTY,
)

_SELECT_OPERATORS = (
    FilterOperator.EQUALS,
    FilterOperator.NOT_EQUALS,
    FilterOperator.IS_EMPTY,
    FilterOperator.IS_NOT_EMPTY,
)

_MULTI_SELECT_OPERATORS = (
    FilterOperator.CONTAINS,
    FilterOperator.DOES_NOT_CONTAIN,
    FilterOperator.IS_EMPTY,
    FilterOperator.IS_NOT_EMPTY,
)

_DATE_OPERATORS = (
    FilterOperator.EQUALS,
    FilterOperator.NOT_EQUALS,
    FilterOperator.BEFORE,
    FilterOperator.AFTER,
    FilterOperator.ON_OR_BEFORE,
    FilterOperator.ON_OR_AFTER,
    FilterOperator.IS_EMPTY,
    FilterOperator.IS_NOT_EMPTY,
    FilterOperator.PAST_WEEK,
    FilterOperator.PAST_MONTH,
    FilterOperator.PAST_YEAR,
    FilterOperator.NEXT_WEEK,
    FilterOperator.NEXT_MONTH,
    FilterOperator.NEXT_YEAR,
)

_CHECKBOX_OPERATORS = (
    FilterOperator.EQUALS,
    FilterOperator.NOT_EQUALS,
)

# Fallback for every type not listed below (and for undeclared types)
DEFAULT_OPERATORS = _SELECT_OPERATORS

LEGAL_OPERATORS: Dict[PropertyType, tuple] = {
    PropertyType.TITLE: _TEXT_OPERATORS,
    PropertyType.RICH_TEXT: _TEXT_OPERATORS,
    PropertyType.NUMBER: _NUMBER_OPERATORS,
    PropertyType.SELECT: _SELECT_OPERATORS,
    PropertyType.MULTI_SELECT: _MULTI_SELECT_OPERATORS,
    PropertyType.DATE: _DATE_OPERATORS,
    PropertyType.CREATED_TIME: _DATE_OPERATORS,
    PropertyType.LAST_EDITED_TIME: _DATE_OPERATORS,
    PropertyType.CHECKBOX: _CHECKBOX_OPERATORS,
}

NO_VALUE_OPERATORS = frozenset({
    FilterOperator.IS_EMPTY,
    FilterOperator.IS_NOT_EMPTY,
    FilterOperator.PAST_WEEK,
    FilterOperator.PAST_MONTH,
    FilterOperator.PAST_YEAR,
    FilterOperator.NEXT_WEEK,
    FilterOperator.NEXT_MONTH,
    FilterOperator.NEXT_YEAR,
})

OPERATOR_LABELS: Dict[FilterOperator, str] = {
    FilterOperator.EQUALS: "equals",
    FilterOperator.NOT_EQUALS: "does not equal",
    FilterOperator.CONTAINS: "contains",
    FilterOperator.DOES_NOT_CONTAIN: "does not contain",
    FilterOperator.IS_EMPTY: "is empty",
    FilterOperator.IS_NOT_EMPTY: "is not empty",
    FilterOperator.STARTS_WITH: "starts with",
    FilterOperator.ENDS_WITH: "ends with",
    FilterOperator.GREATER_THAN: "is greater than",
    FilterOperator.LESS_THAN: "is less than",
    FilterOperator.GREATER_THAN_OR_EQUAL_TO: "is greater than or equal to",
    FilterOperator.LESS_THAN_OR_EQUAL_TO: "is less than or equal to",
    FilterOperator.BEFORE: "is before",
    FilterOperator.AFTER: "is after",
    FilterOperator.ON_OR_BEFORE: "is on or before",
    FilterOperator.ON_OR_AFTER: "is on or after",
    FilterOperator.PAST_WEEK: "in the past week",
    FilterOperator.PAST_MONTH: "in the past month",
    FilterOperator.PAST_YEAR: "in the past year",
    FilterOperator.NEXT_WEEK: "in the next week",
    FilterOperator.NEXT_MONTH: "in the next month",
    FilterOperator.NEXT_YEAR: "in the next year",
}


def get_available_operators(property_type: Union[PropertyType, str, None]) -> List[FilterOperator]:
    """
    Get the operators legal for a declared property type.

    Args:
        property_type: PropertyType or its name

    Returns:
        List of legal operators, in builder display order
    """
    resolved = parse_property_type(property_type)
    return list(LEGAL_OPERATORS.get(resolved, DEFAULT_OPERATORS))


def is_operator_legal(
    operator: Union[FilterOperator, str],
    property_type: Union[PropertyType, str, None]
) -> bool:
    """Whether ``operator`` may be used on a property of ``property_type``."""
    resolved = parse_operator(operator)
    if resolved is None:
        return False
    return resolved in get_available_operators(property_type)


def filter_needs_value(operator: Union[FilterOperator, str]) -> bool:
    """Whether the operator compares against a filter value."""
    resolved = parse_operator(operator)
    return resolved not in NO_VALUE_OPERATORS


def get_operator_label(operator: Union[FilterOperator, str]) -> str:
    """Human-readable label; unknown operators are shown as given."""
    resolved: Optional[FilterOperator] = parse_operator(operator)
    if resolved is None:
        return str(operator)
    return OPERATOR_LABELS[resolved]

"""
Immutable editing of filter state.

These functions mirror what a filter-builder UI does while a user assembles
a query: add a filter to a group, edit or remove it, add or remove whole
groups, and flip a group between AND and OR. Every function returns a new
FilterState; the state passed in is never changed.
"""

import uuid
from dataclasses import replace
from typing import Any, Optional, Union

from lifemetrics.filters.base import (
    Filter,
    FilterGroup,
    FilterOperator,
    FilterState,
    GroupOperator,
    parse_group_operator,
)
from lifemetrics.filters.operators import filter_needs_value


def new_id() -> str:
    return str(uuid.uuid4())


def _with_id(filter_obj: Filter) -> Filter:
    if filter_obj.id:
        return filter_obj
    return replace(filter_obj, id=new_id())


def add_group(
    state: Optional[FilterState],
    filter_obj: Optional[Filter] = None,
    operator: Union[GroupOperator, str] = GroupOperator.AND
) -> FilterState:
    """
    Append a new group, optionally seeded with one filter.

    Args:
        state: Current state (None is treated as empty)
        filter_obj: First filter of the new group
        operator: How the new group combines its filters

    Returns:
        New FilterState with the group appended
    """
    state = state or FilterState()
    filters = (_with_id(filter_obj),) if filter_obj is not None else ()
    group = FilterGroup(filters=filters, operator=parse_group_operator(operator), id=new_id())
    return FilterState(groups=state.groups + (group,))


def add_filter(state: Optional[FilterState], filter_obj: Filter, group_id: Optional[str] = None) -> FilterState:
    """
    Add a filter to a group.

    When ``group_id`` is omitted (or no group has that id) the filter goes
    into a new AND group, as a builder does for the very first filter.
    """
    state = state or FilterState()
    filter_obj = _with_id(filter_obj)

    if group_id is None or not any(g.id == group_id for g in state.groups):
        return add_group(state, filter_obj)

    return FilterState(groups=tuple(
        replace(g, filters=g.filters + (filter_obj,)) if g.id == group_id else g
        for g in state.groups
    ))


def remove_filter(state: FilterState, filter_id: str) -> FilterState:
    """Remove a filter by id; groups left without filters are dropped."""
    groups = []
    for group in state.groups:
        remaining = tuple(f for f in group.filters if f.id != filter_id)
        if len(remaining) == len(group.filters):
            groups.append(group)
        elif remaining:
            groups.append(replace(group, filters=remaining))
    return FilterState(groups=tuple(groups))


def update_filter(state: FilterState, filter_id: str, **changes: Any) -> FilterState:
    """
    Change fields of a filter by id.

    Accepts ``property``, ``operator``, ``value`` and ``property_type``.
    Switching to an operator that takes no value clears the value.

    Raises:
        TypeError: If an unknown field is given
    """
    allowed = {'property', 'operator', 'value', 'property_type'}
    unknown = set(changes) - allowed
    if unknown:
        raise TypeError(f"Cannot update filter field(s): {', '.join(sorted(unknown))}")

    def apply(filter_obj: Filter) -> Filter:
        updated = replace(filter_obj, **changes)
        if 'operator' in changes and not filter_needs_value(updated.operator):
            updated = replace(updated, value=None)
        return updated

    return FilterState(groups=tuple(
        replace(g, filters=tuple(apply(f) if f.id == filter_id else f for f in g.filters))
        for g in state.groups
    ))


def remove_group(state: FilterState, group_id: str) -> FilterState:
    return FilterState(groups=tuple(g for g in state.groups if g.id != group_id))


def update_group_operator(state: FilterState, group_id: str, operator: Union[GroupOperator, str]) -> FilterState:
    """Switch a group between AND and OR."""
    resolved = parse_group_operator(operator)
    return FilterState(groups=tuple(
        replace(g, operator=resolved) if g.id == group_id else g
        for g in state.groups
    ))


def default_filter(property_name: str, property_type: Any = None) -> Filter:
    """Starting filter a builder shows for a freshly picked property."""
    return Filter(property=property_name, operator=FilterOperator.EQUALS, value="",
                  property_type=property_type, id=new_id())

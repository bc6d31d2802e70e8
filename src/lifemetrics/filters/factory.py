"""
Filter Factory for creating filter state from configuration.

Provides a centralized factory for turning plain dictionaries (as written by
a filter-builder UI, a YAML file or a JSON payload) into validated filter
state, sort configuration and ready-to-use FilterEngine instances.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from lifemetrics.core.config.models import FilterConfig
from lifemetrics.core.exceptions import ErrorCode, ErrorContext, FilterValidationError
from lifemetrics.filters.base import Filter, FilterGroup, FilterState, SortConfig, parse_operator
from lifemetrics.filters.engine import FilterEngine
from lifemetrics.filters.operators import (
    filter_needs_value,
    get_available_operators,
    get_operator_label,
    is_operator_legal,
)
from lifemetrics.filters.properties import FLAT_ADAPTER, NOTION_ADAPTER, RecordAdapter

logger = logging.getLogger(__name__)


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key among camelCase/snake_case spellings."""
    for key in keys:
        if key in data:
            return data[key]
    return default


class FilterFactory:
    """
    Factory class for creating filter state from configuration.

    Also keeps the registry of record adapters, so that callers can refer to
    the way records are read by name (``flat``, ``notion``, or their own).
    """

    # Registry of available record adapters
    ADAPTER_REGISTRY: Dict[str, RecordAdapter] = {
        'flat': FLAT_ADAPTER,
        'notion': NOTION_ADAPTER,
    }

    @classmethod
    def create_filter(cls, data: Mapping[str, Any], index: Optional[int] = None) -> Filter:
        """
        Create a single filter from a dictionary.

        Args:
            data: Filter definition with ``property``, ``operator``, ``value``
                and optionally ``propertyType``/``property_type`` and ``id``
            index: Position of the filter in its group, for error reporting

        Returns:
            Filter instance

        Raises:
            FilterValidationError: If the definition has no property
        """
        if isinstance(data, Filter):
            return data
        if not isinstance(data, Mapping):
            raise FilterValidationError(
                f"Filter definition must be a mapping, got {type(data).__name__}",
                error_code=ErrorCode.VALIDATION_TYPE_MISMATCH,
                context=ErrorContext(operation="create_filter", filter_index=index)
            )

        property_name = _pick(data, 'property', 'propertyName', 'property_name')
        if not property_name:
            raise FilterValidationError(
                "Filter definition missing 'property' field",
                error_code=ErrorCode.VALIDATION_MISSING_FIELD,
                context=ErrorContext(operation="create_filter", filter_index=index)
            )

        return Filter(
            property=str(property_name),
            operator=_pick(data, 'operator', default='equals'),
            value=data.get('value'),
            property_type=_pick(data, 'propertyType', 'property_type'),
            id=data.get('id')
        )

    @classmethod
    def create_group(cls, data: Union[Mapping[str, Any], Sequence[Any]], index: Optional[int] = None) -> FilterGroup:
        """
        Create a filter group.

        Args:
            data: Mapping with ``filters`` and ``operator`` (``and``/``or``),
                or a bare list of filter definitions combined with AND
            index: Position of the group in the state, for error reporting

        Returns:
            FilterGroup instance
        """
        if isinstance(data, FilterGroup):
            return data

        if isinstance(data, Mapping):
            filter_defs = data.get('filters') or []
            operator = data.get('operator')
            group_id = data.get('id')
        else:
            filter_defs, operator, group_id = data, None, None

        filters = []
        for i, filter_def in enumerate(filter_defs):
            try:
                filters.append(cls.create_filter(filter_def, index=i))
            except FilterValidationError as e:
                e.context.group_index = index
                raise

        return FilterGroup(filters=tuple(filters), operator=operator, id=group_id)

    @classmethod
    def create_filter_state(cls, data: Union[Mapping[str, Any], Sequence[Any], None]) -> FilterState:
        """
        Create a filter state.

        Args:
            data: Mapping with a ``groups`` list, a bare list of groups, or None

        Returns:
            FilterState instance (empty when data is None)
        """
        if data is None:
            return FilterState()
        if isinstance(data, FilterState):
            return data

        group_defs = (data.get('groups') or []) if isinstance(data, Mapping) else data
        return FilterState(groups=tuple(
            cls.create_group(group_def, index=i) for i, group_def in enumerate(group_defs)
        ))

    @classmethod
    def create_sort_config(cls, data: Optional[Mapping[str, Any]]) -> Optional[SortConfig]:
        """
        Create a sort configuration from ``{"key": ..., "direction": ...}``.

        Returns None when no key is given.
        """
        if not data:
            return None
        key = _pick(data, 'key', 'sortKey', 'sort_key')
        if not key:
            return None
        return SortConfig(key=str(key), direction=_pick(data, 'direction', 'sortDirection', 'sort_direction'))

    @classmethod
    def validate_filter(cls, filter_obj: Filter) -> List[str]:
        """
        Validate one filter without evaluating it.

        Args:
            filter_obj: Filter to check

        Returns:
            List of validation error messages (empty if valid)
        """
        problems = []
        operator = parse_operator(filter_obj.operator)

        if operator is None:
            problems.append(
                f"Unknown operator '{filter_obj.operator}' on property '{filter_obj.property}'"
            )
            return problems

        if filter_obj.property_type is not None and not is_operator_legal(operator, filter_obj.property_type):
            legal = ', '.join(op.value for op in get_available_operators(filter_obj.property_type))
            problems.append(
                f"Operator '{operator.value}' is not available for {filter_obj.property_type.value} "
                f"property '{filter_obj.property}' (available: {legal})"
            )

        if filter_needs_value(operator) and filter_obj.value in (None, "", ()):
            problems.append(
                f"Filter '{filter_obj.property} {get_operator_label(operator)}' needs a value"
            )

        return problems

    @classmethod
    def validate_filter_state(cls, state: FilterState) -> List[str]:
        """
        Validate every filter of a filter state.

        Returns:
            List of validation error messages prefixed with their position
        """
        problems = []
        for g, group in enumerate(state.groups):
            for f, filter_obj in enumerate(group.filters):
                for problem in cls.validate_filter(filter_obj):
                    problems.append(f"group {g + 1}, filter {f + 1}: {problem}")
        return problems

    @classmethod
    def create_validated_state(cls, data: Any, strict: bool = False) -> FilterState:
        """
        Create a filter state and validate it.

        In strict mode any validation problem raises; otherwise problems are
        logged and the permissive state is returned (unknown operators fail
        open and illegal combinations are evaluated as written).

        Raises:
            FilterValidationError: In strict mode, if the state is invalid
        """
        state = cls.create_filter_state(data)
        problems = cls.validate_filter_state(state)

        if problems:
            if strict:
                error_code = ErrorCode.VALIDATION_INVALID_INPUT
                if any("Unknown operator" in p for p in problems):
                    error_code = ErrorCode.VALIDATION_UNKNOWN_OPERATOR
                elif any("is not available" in p for p in problems):
                    error_code = ErrorCode.VALIDATION_ILLEGAL_OPERATOR
                raise FilterValidationError(
                    f"Invalid filter state: {problems[0]}",
                    error_code=error_code,
                    problems=problems,
                    context=ErrorContext(operation="validate_filter_state")
                )
            for problem in problems:
                logger.warning(f"Filter problem: {problem}")

        return state

    @classmethod
    def create_from_config(cls, config: FilterConfig) -> Dict[str, Any]:
        """
        Build the query described by a FilterConfig.

        Args:
            config: Filter configuration

        Returns:
            Dictionary with ``filter_state``, ``search`` and ``sort`` entries,
            ready to pass to ``FilterEngine.run``
        """
        state = cls.create_validated_state({'groups': config.groups}, strict=config.strict)
        sort = None
        if config.sort_key:
            sort = SortConfig(key=config.sort_key, direction=config.sort_direction)
        search = config.search if config.search and config.search.strip() else None
        return {'filter_state': state, 'search': search, 'sort': sort}

    @classmethod
    def create_engine(cls, config: Optional[FilterConfig] = None, **kwargs) -> FilterEngine:
        """
        Create a FilterEngine for a configuration.

        Args:
            config: Filter configuration (defaults to flat records, all fields searched)
            **kwargs: Extra FilterEngine arguments (text_getter, clock, ...)

        Returns:
            FilterEngine instance
        """
        config = config or FilterConfig()
        return FilterEngine(
            adapter=cls.get_adapter(config.source),
            search_fields=config.search_fields or None,
            **kwargs
        )

    @classmethod
    def get_adapter(cls, name: str) -> RecordAdapter:
        """
        Look up a registered record adapter.

        Raises:
            ValueError: If the adapter name is unknown
        """
        if name not in cls.ADAPTER_REGISTRY:
            available = ', '.join(sorted(cls.ADAPTER_REGISTRY.keys()))
            raise ValueError(f"Unknown record source '{name}'. Available sources: {available}")
        return cls.ADAPTER_REGISTRY[name]

    @classmethod
    def register_adapter(cls, adapter: RecordAdapter) -> None:
        """
        Register a record adapter under its name.

        Args:
            adapter: RecordAdapter to register
        """
        if not isinstance(adapter, RecordAdapter):
            raise ValueError("Adapter must be a RecordAdapter")

        cls.ADAPTER_REGISTRY[adapter.name] = adapter

    @classmethod
    def unregister_adapter(cls, name: str) -> None:
        """
        Unregister a record adapter.

        Args:
            name: Name of the adapter to remove
        """
        if name in cls.ADAPTER_REGISTRY:
            del cls.ADAPTER_REGISTRY[name]

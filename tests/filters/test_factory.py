"""
Tests for FilterFactory.
"""

import logging

import pytest

from lifemetrics.core.config.models import FilterConfig
from lifemetrics.core.exceptions import ErrorCode, FilterValidationError
from lifemetrics.filters.base import Filter, FilterOperator, FilterState, GroupOperator, SortConfig, SortDirection
from lifemetrics.filters.engine import FilterEngine
from lifemetrics.filters.factory import FilterFactory
from lifemetrics.filters.properties import FLAT_ADAPTER, NOTION_ADAPTER, PropertyType, RecordAdapter


class TestCreateFilter:
    """Test building single filters from dictionaries."""

    def test_camel_case_keys(self):
        f = FilterFactory.create_filter({
            "property": "Status", "operator": "equals", "value": "Done", "propertyType": "select", "id": "f1",
        })
        assert f.operator is FilterOperator.EQUALS
        assert f.property_type is PropertyType.SELECT
        assert f.id == "f1"

    def test_snake_case_keys(self):
        f = FilterFactory.create_filter({"property_name": "due", "operator": "before", "value": "2024-01-01",
                                         "property_type": "date"})
        assert f.property == "due"
        assert f.property_type is PropertyType.DATE

    def test_operator_defaults_to_equals(self):
        assert FilterFactory.create_filter({"property": "x", "value": 1}).operator is FilterOperator.EQUALS

    def test_unknown_operator_is_kept(self):
        assert FilterFactory.create_filter({"property": "x", "operator": "resembles"}).operator == "resembles"

    def test_list_value_is_frozen(self):
        f = FilterFactory.create_filter({"property": "tags", "operator": "contains", "value": ["a", "b"]})
        assert f.value == ("a", "b")

    def test_missing_property(self):
        with pytest.raises(FilterValidationError) as exc_info:
            FilterFactory.create_filter({"operator": "equals"}, index=2)
        assert exc_info.value.error_code == ErrorCode.VALIDATION_MISSING_FIELD
        assert exc_info.value.context.filter_index == 2

    def test_not_a_mapping(self):
        with pytest.raises(FilterValidationError) as exc_info:
            FilterFactory.create_filter("status = Done")
        assert exc_info.value.error_code == ErrorCode.VALIDATION_TYPE_MISMATCH

    def test_filter_passes_through(self):
        f = Filter("status")
        assert FilterFactory.create_filter(f) is f


class TestCreateState:
    """Test building groups and states."""

    def test_group_operator(self):
        group = FilterFactory.create_group({"filters": [{"property": "a"}], "operator": "or", "id": "g"})
        assert group.operator is GroupOperator.OR
        assert group.id == "g"
        assert len(group.filters) == 1

    def test_unrecognized_group_operator_means_or(self):
        assert FilterFactory.create_group({"filters": [], "operator": "xor"}).operator is GroupOperator.OR

    def test_missing_group_operator_means_and(self):
        assert FilterFactory.create_group({"filters": []}).operator is GroupOperator.AND

    def test_bare_list_group(self):
        group = FilterFactory.create_group([{"property": "a"}, {"property": "b"}])
        assert group.operator is GroupOperator.AND
        assert [f.property for f in group.filters] == ["a", "b"]

    def test_error_carries_group_index(self):
        data = {"groups": [{"filters": [{"property": "a"}]}, {"filters": [{"property": "b"}, {"value": 1}]}]}
        with pytest.raises(FilterValidationError) as exc_info:
            FilterFactory.create_filter_state(data)
        assert exc_info.value.context.group_index == 1
        assert exc_info.value.context.filter_index == 1

    @pytest.mark.parametrize("data", [None, {}, {"groups": None}, []])
    def test_empty_states(self, data):
        assert FilterFactory.create_filter_state(data) == FilterState()

    def test_bare_list_of_groups(self):
        state = FilterFactory.create_filter_state([[{"property": "a"}], {"filters": [{"property": "b"}]}])
        assert len(state.groups) == 2

    def test_round_trip_through_dict(self):
        data = {"groups": [{"filters": [{"property": "tags", "operator": "contains", "value": ["x"],
                                         "propertyType": "multi_select", "id": "f"}],
                            "operator": "or", "id": "g"}]}
        assert FilterFactory.create_filter_state(data).to_dict() == data


class TestSortConfig:
    """Test sort configuration parsing."""

    def test_keys(self):
        assert FilterFactory.create_sort_config({"key": "due", "direction": "desc"}) == SortConfig("due", "desc")
        config = FilterFactory.create_sort_config({"sortKey": "due", "sortDirection": "ASC"})
        assert config.direction is SortDirection.ASC

    def test_no_key(self):
        assert FilterFactory.create_sort_config(None) is None
        assert FilterFactory.create_sort_config({"direction": "asc"}) is None

    def test_unknown_direction_is_unsorted(self):
        assert FilterFactory.create_sort_config({"key": "due", "direction": "sideways"}).direction is None


class TestValidation:
    """Test filter validation."""

    def test_valid_filter(self):
        assert FilterFactory.validate_filter(Filter("rating", "greater_than", 3, "number")) == []

    def test_unknown_operator(self):
        problems = FilterFactory.validate_filter(Filter("rating", "resembles", 3))
        assert problems == ["Unknown operator 'resembles' on property 'rating'"]

    def test_illegal_operator(self):
        problems = FilterFactory.validate_filter(Filter("Tags", "equals", "x", "multi_select"))
        assert len(problems) == 1
        assert "not available for multi_select property 'Tags'" in problems[0]
        assert "contains" in problems[0]

    def test_untyped_filter_skips_legality(self):
        assert FilterFactory.validate_filter(Filter("Tags", "greater_than", 1)) == []

    @pytest.mark.parametrize("value", [None, "", []])
    def test_missing_value(self, value):
        problems = FilterFactory.validate_filter(Filter("title", "contains", value))
        assert problems == ["Filter 'title contains' needs a value"]

    def test_valueless_operator(self):
        assert FilterFactory.validate_filter(Filter("title", "is_empty")) == []

    def test_state_problems_are_positioned(self):
        state = FilterFactory.create_filter_state({"groups": [
            {"filters": [{"property": "a", "value": 1}]},
            {"filters": [{"property": "b", "value": 1}, {"property": "c", "operator": "nope"}]},
        ]})
        assert FilterFactory.validate_filter_state(state) == [
            "group 2, filter 2: Unknown operator 'nope' on property 'c'"
        ]

    def test_strict_raises(self):
        data = {"groups": [{"filters": [{"property": "c", "operator": "nope"}]}]}
        with pytest.raises(FilterValidationError) as exc_info:
            FilterFactory.create_validated_state(data, strict=True)
        assert exc_info.value.error_code == ErrorCode.VALIDATION_UNKNOWN_OPERATOR
        assert len(exc_info.value.problems) == 1

    def test_strict_illegal_operator(self):
        data = [[{"property": "n", "operator": "contains", "value": 1, "propertyType": "number"}]]
        with pytest.raises(FilterValidationError) as exc_info:
            FilterFactory.create_validated_state(data, strict=True)
        assert exc_info.value.error_code == ErrorCode.VALIDATION_ILLEGAL_OPERATOR
        assert exc_info.value.suggestions

    def test_permissive_logs(self, caplog):
        data = {"groups": [{"filters": [{"property": "c", "operator": "nope"}]}]}
        with caplog.at_level(logging.WARNING, logger="lifemetrics.filters.factory"):
            state = FilterFactory.create_validated_state(data)
        assert len(state.groups) == 1
        assert "Unknown operator 'nope'" in caplog.text


class TestFromConfig:
    """Test building queries and engines from FilterConfig."""

    def test_create_from_config(self):
        config = FilterConfig(
            groups=[{"filters": [{"property": "status", "value": "Done"}]}],
            search="  ",
            sort_key="due",
            sort_direction="desc",
        )
        query = FilterFactory.create_from_config(config)
        assert len(query["filter_state"].groups) == 1
        assert query["search"] is None
        assert query["sort"] == SortConfig("due", "desc")

    def test_create_from_config_without_sort(self):
        query = FilterFactory.create_from_config(FilterConfig(search="coffee"))
        assert query == {"filter_state": FilterState(), "search": "coffee", "sort": None}

    def test_strict_config(self):
        config = FilterConfig(strict=True, groups=[{"filters": [{"property": "a", "operator": "nope"}]}])
        with pytest.raises(FilterValidationError):
            FilterFactory.create_from_config(config)

    def test_create_engine(self):
        engine = FilterFactory.create_engine(FilterConfig(source="notion", search_fields=["Name"]))
        assert isinstance(engine, FilterEngine)
        assert engine.adapter is NOTION_ADAPTER
        assert engine.search_fields == ["Name"]

    def test_create_engine_defaults(self):
        engine = FilterFactory.create_engine()
        assert engine.adapter is FLAT_ADAPTER
        assert engine.search_fields is None

    def test_create_engine_kwargs(self):
        getter = lambda record: "text"
        assert FilterFactory.create_engine(text_getter=getter).text_getter is getter

    def test_query_runs(self, todos):
        config = FilterConfig(groups=[{"filters": [{"property": "priority", "value": "High"}]}],
                              sort_key="title", sort_direction="desc")
        query = FilterFactory.create_from_config(config)
        view = FilterFactory.create_engine(config).run(todos, **query)
        assert [r["title"] for r in view] == ["Write quarterly report", "Buy coffee beans"]


class TestAdapterRegistry:
    """Test adapter registration."""

    def test_builtin_adapters(self):
        assert FilterFactory.get_adapter("flat") is FLAT_ADAPTER
        assert FilterFactory.get_adapter("notion") is NOTION_ADAPTER

    def test_unknown_adapter(self):
        with pytest.raises(ValueError, match="Available sources: flat, notion"):
            FilterFactory.get_adapter("airtable")

    def test_register_and_unregister(self):
        upper = RecordAdapter(
            name="upper",
            value=lambda record, key, property_type=None: record.get(key.upper()),
            values=lambda record: list(record.values()),
        )
        FilterFactory.register_adapter(upper)
        assert FilterFactory.get_adapter("upper") is upper

        engine = FilterFactory.create_engine(FilterConfig(source="upper"))
        state = FilterFactory.create_filter_state([[{"property": "name", "value": "a"}]])
        assert engine.run([{"NAME": "a"}, {"NAME": "b"}], filter_state=state) == [{"NAME": "a"}]

        FilterFactory.unregister_adapter("upper")
        with pytest.raises(ValueError):
            FilterFactory.get_adapter("upper")

    def test_register_rejects_non_adapters(self):
        with pytest.raises(ValueError):
            FilterFactory.register_adapter(lambda record, key: None)

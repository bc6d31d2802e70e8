"""
Tests for the filter/search/sort pipeline.

Covers the documented end-to-end scenarios plus the pipeline properties:
identity with no configuration, order preservation, monotonicity of AND
groups and nulls-last sorting.
"""

import copy
from datetime import datetime, timezone

import pytest

from lifemetrics.filters import FilterEngine, FilterFactory
from lifemetrics.filters.base import Filter, FilterGroup, FilterState, MatchOutcome, SortConfig
from lifemetrics.filters.properties import NOTION_ADAPTER


FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def state_of(*groups):
    return FilterFactory.create_filter_state({"groups": list(groups)})


class TestScenarios:
    """End-to-end behaviour on small record sets."""

    def setup_method(self):
        self.engine = FilterEngine()

    def test_sort_with_null_score(self):
        records = [{"name": "Alice", "score": 5}, {"name": "Bob", "score": None}, {"name": "Carol", "score": 3}]
        view = self.engine.run(records, sort=SortConfig("score", "asc"))
        assert [r["name"] for r in view] == ["Carol", "Alice", "Bob"]

    def test_equals_keeps_original_order(self):
        records = [{"status": "Done"}, {"status": "To-Do"}, {"status": "Done"}]
        state = state_of({"filters": [{"property": "status", "operator": "equals", "value": "Done"}]})
        view = self.engine.run(records, filter_state=state)
        assert view == [records[0], records[2]]
        assert view[0] is records[0]
        assert view[1] is records[2]

    def test_search_full_record(self):
        records = [{"title": "Coffee with John"}, {"title": "Lunch"}]
        assert self.engine.run(records, search="cof") == [records[0]]

    def test_multi_select_contains(self):
        records = [{"tags": ["urgent", "work"]}, {"tags": ["personal"]}]
        state = state_of({"filters": [{"property": "tags", "operator": "contains", "value": ["urgent"]}]})
        assert self.engine.run(records, filter_state=state) == [records[0]]

    def test_groups_combine_with_or(self):
        records = [
            {"priority": "High", "status": "Open"},
            {"priority": "Low", "status": "Done"},
            {"priority": "Low", "status": "Open"},
        ]
        state = state_of(
            {"filters": [{"property": "priority", "operator": "equals", "value": "High"}], "operator": "and"},
            {"filters": [{"property": "status", "operator": "equals", "value": "Done"}], "operator": "and"},
        )
        assert self.engine.run(records, filter_state=state) == records[:2]


class TestPipeline:
    """Test stage ordering and engine configuration."""

    def test_no_configuration_is_identity(self, todos):
        view = FilterEngine().run(todos)
        assert view == todos
        assert view is not todos

    def test_filter_search_sort(self, todos):
        engine = FilterEngine(search_fields=["title"])
        state = state_of({"filters": [{"property": "status", "operator": "not_equals", "value": "Done"}]})
        view = engine.run(todos, filter_state=state, search="e", sort=SortConfig("estimate", "desc"))
        assert [r["title"] for r in view] == ["Write quarterly report", "book dentist", "Call plumber"]

    def test_inputs_not_mutated(self, todos):
        snapshot = copy.deepcopy(todos)
        state = state_of({"filters": [{"property": "tags", "operator": "contains", "value": "work"}]})
        FilterEngine().run(todos, filter_state=state, search="report", sort=SortConfig("due", "desc"))
        assert todos == snapshot

    def test_clock_drives_relative_dates(self, todos):
        engine = FilterEngine(clock=lambda: FIXED_NOW)
        state = state_of({"filters": [{"property": "due", "operator": "next_week", "propertyType": "date"}]})
        view = engine.run(todos, filter_state=state)
        assert [r["title"] for r in view] == ["Buy coffee beans", "Write quarterly report"]

    def test_explicit_now_overrides_clock(self, todos):
        engine = FilterEngine(clock=lambda: datetime(2030, 1, 1, tzinfo=timezone.utc))
        state = state_of({"filters": [{"property": "due", "operator": "next_week", "propertyType": "date"}]})
        assert len(engine.run(todos, filter_state=state, now=FIXED_NOW)) == 2

    def test_notion_records(self, notion_pages):
        engine = FilterEngine(adapter=NOTION_ADAPTER, search_fields=["Name"])
        state = state_of({"filters": [{"property": "Done", "operator": "equals", "value": False,
                                       "propertyType": "checkbox"}]})
        view = engine.run(notion_pages, filter_state=state, sort=SortConfig("Name", "desc"))
        assert [p["id"] for p in view] == ["page-team-offsite", "page-read-novel"]

    def test_text_getter_and_sort_value_getter(self, todos):
        engine = FilterEngine(
            text_getter=lambda r: " ".join(r["tags"]),
            sort_value_getter=lambda r, key: len(r[key]),
        )
        view = engine.run(todos, search="h", sort=SortConfig("title", "asc"))
        # tags containing "h": errand/home, health
        assert [r["title"] for r in view] == ["book dentist", "Buy coffee beans"]

    def test_sort_values_only_read_from_filtered_records(self):
        """Records removed by the filters never reach the sort value getter."""
        records = [{"title": "a", "rank": 2}, {"title": "b"}, {"title": "c", "rank": 1}]
        engine = FilterEngine(sort_value_getter=lambda r, key: r[key])
        state = state_of({"filters": [{"property": "rank", "operator": "is_not_empty"}]})

        view = engine.run(records, filter_state=state, sort=SortConfig("rank", "asc"))
        assert [r["title"] for r in view] == ["c", "a"]


class TestProperties:
    """Structural guarantees of the pipeline."""

    def test_adding_and_filter_never_grows_result(self, todos):
        base_filter = {"property": "priority", "operator": "equals", "value": "High"}
        extra_filter = {"property": "status", "operator": "equals", "value": "Done"}
        engine = FilterEngine()

        wide = engine.run(todos, filter_state=state_of({"filters": [base_filter]}))
        narrow = engine.run(todos, filter_state=state_of({"filters": [base_filter, extra_filter]}))
        assert len(narrow) <= len(wide)
        assert all(r in wide for r in narrow)

    def test_adding_group_never_shrinks_result(self, todos):
        first = {"filters": [{"property": "priority", "operator": "equals", "value": "High"}]}
        second = {"filters": [{"property": "status", "operator": "equals", "value": "To-Do"}]}
        engine = FilterEngine()

        one = engine.run(todos, filter_state=state_of(first))
        both = engine.run(todos, filter_state=state_of(first, second))
        assert all(r in both for r in one)

    def test_empty_group_matches_everything(self, todos):
        state = FilterState(groups=[FilterGroup()])
        assert FilterEngine().run(todos, filter_state=state) == todos

    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_sorted_view_is_idempotent(self, todos, direction):
        engine = FilterEngine()
        config = SortConfig("priority", direction)
        once = engine.run(todos, sort=config)
        assert engine.run(once, sort=config) == once


class TestExplain:
    """Test per-filter outcomes."""

    def test_explain_reports_every_filter(self, todos):
        state = FilterState(groups=[FilterGroup(filters=[
            Filter("status", "equals", "Done"),
            Filter("status", "resembles", "Done"),
            Filter("estimate", "greater_than", "many"),
        ])])
        results = FilterEngine().explain(todos[0], state, now=FIXED_NOW)

        assert len(results) == 1
        matched, unknown, incomparable = results[0]
        assert matched.outcome is MatchOutcome.MATCHED
        assert unknown.outcome is MatchOutcome.SKIPPED
        assert unknown.passed is True
        assert incomparable.outcome is MatchOutcome.SKIPPED
        assert incomparable.passed is False

    def test_evaluate_filter_null_value(self, todos):
        result = FilterEngine().evaluate_filter(todos[2], Filter("due", "equals", "2024-06-10"))
        assert result.outcome is MatchOutcome.NOT_MATCHED
        assert "no value" in result.reason

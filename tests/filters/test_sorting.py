"""
Tests for stable, nulls-last sorting and the sort toggle cycle.
"""

import pytest

from lifemetrics.filters.base import SortConfig, SortDirection
from lifemetrics.filters.properties import NOTION_ADAPTER
from lifemetrics.filters.sorting import apply_sort, collation_key, compare_values, next_sort_config


def names(records):
    return [r["name"] for r in records]


class TestApplySort:
    """Test apply_sort."""

    records = [
        {"name": "Alice", "score": 5},
        {"name": "Bob", "score": None},
        {"name": "Carol", "score": 3},
    ]

    def test_ascending_nulls_last(self):
        assert names(apply_sort(self.records, SortConfig("score", "asc"))) == ["Carol", "Alice", "Bob"]

    def test_descending_nulls_last(self):
        assert names(apply_sort(self.records, SortConfig("score", "desc"))) == ["Alice", "Carol", "Bob"]

    def test_missing_key_sorts_like_null(self):
        records = [{"name": "x"}, {"name": "y", "score": 1}]
        assert names(apply_sort(records, SortConfig("score", "desc"))) == ["y", "x"]

    @pytest.mark.parametrize("config", [None, SortConfig("score"), SortConfig("", "asc")])
    def test_inactive_config_keeps_order(self, config):
        result = apply_sort(self.records, config)
        assert result == self.records
        assert result is not self.records

    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_stable_for_equal_keys(self, direction):
        records = [
            {"name": "first", "group": "a"},
            {"name": "second", "group": "b"},
            {"name": "third", "group": "a"},
            {"name": "fourth", "group": "b"},
        ]
        result = names(apply_sort(records, SortConfig("group", direction)))
        if direction == "asc":
            assert result == ["first", "third", "second", "fourth"]
        else:
            assert result == ["second", "fourth", "first", "third"]

    def test_idempotent(self, todos):
        config = SortConfig("title", "asc")
        once = apply_sort(todos, config)
        assert apply_sort(once, config) == once

    def test_numbers_compare_numerically(self):
        records = [{"name": n, "v": v} for n, v in (("ten", 10), ("nine", 9), ("hundred", 100))]
        assert names(apply_sort(records, SortConfig("v", "asc"))) == ["nine", "ten", "hundred"]

    def test_strings_collate_ignoring_case_and_accents(self):
        records = [{"name": n} for n in ("banana", "Éclair", "apple", "Cherry")]
        assert names(apply_sort(records, SortConfig("name", "asc"))) == ["apple", "banana", "Cherry", "Éclair"]

    def test_mixed_types_fall_back_to_strings(self):
        records = [{"name": "a", "v": "b"}, {"name": "b", "v": 10}, {"name": "c", "v": "A"}]
        assert names(apply_sort(records, SortConfig("v", "asc"))) == ["b", "c", "a"]

    def test_nulls_last_in_both_directions(self, todos):
        for direction in ("asc", "desc"):
            result = apply_sort(todos, SortConfig("due", direction))
            assert result[-1]["due"] is None
            assert all(r["due"] is not None for r in result[:-1])

    def test_value_getter(self):
        records = [{"name": "x", "meta": {"rank": 2}}, {"name": "y", "meta": {"rank": 1}}]
        result = apply_sort(records, SortConfig("rank", "asc"), value_getter=lambda r, k: r["meta"][k])
        assert names(result) == ["y", "x"]

    def test_value_getter_only_called_once_per_record(self):
        calls = []

        def getter(record, key):
            calls.append(record["name"])
            return record["score"]

        apply_sort(self.records, SortConfig("score", "asc"), value_getter=getter)
        assert sorted(calls) == ["Alice", "Bob", "Carol"]

    def test_notion_adapter(self, notion_pages):
        result = apply_sort(notion_pages, SortConfig("Rating", "desc"), adapter=NOTION_ADAPTER)
        assert [p["id"] for p in result] == ["page-team-offsite", "page-morning-run", "page-read-novel"]

    def test_input_not_mutated(self):
        before = list(self.records)
        apply_sort(self.records, SortConfig("score", "asc"))
        assert self.records == before


class TestComparison:
    """Test comparison helpers."""

    def test_collation_key_tie_break(self):
        assert collation_key("a") != collation_key("A")
        assert collation_key("a")[0] == collation_key("A")[0]

    def test_compare_values(self):
        assert compare_values(1, 2) == -1
        assert compare_values("b", "a") == 1
        assert compare_values(True, "true") == 0


class TestNextSortConfig:
    """Test the column-header toggle cycle."""

    def test_cycle_on_same_key(self):
        config = next_sort_config(None, "due")
        assert config.direction is SortDirection.ASC
        config = next_sort_config(config, "due")
        assert config.direction is SortDirection.DESC
        config = next_sort_config(config, "due")
        assert config.direction is None
        assert config.key == "due"
        config = next_sort_config(config, "due")
        assert config.direction is SortDirection.ASC

    def test_new_key_restarts_ascending(self):
        config = next_sort_config(SortConfig("due", "desc"), "title")
        assert config == SortConfig("title", "asc")

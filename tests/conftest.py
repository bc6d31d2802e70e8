"""
Shared Test Configuration and Fixtures

Provides sample records (flat todos and Notion-style typed pages), a fixed
clock for relative-date operators, people collections and helpers for
writing record files used by the CLI tests.
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from lifemetrics.filters.factory import FilterFactory
from lifemetrics.filters.properties import FLAT_ADAPTER, NOTION_ADAPTER
from lifemetrics.people import Person


FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time used for all relative-date assertions."""
    return FIXED_NOW


@pytest.fixture
def todos() -> List[Dict[str, Any]]:
    """Flat todo records as stored by the todo tracker."""
    return [
        {"title": "Buy coffee beans", "status": "Done", "priority": "High",
         "tags": ["errand", "home"], "estimate": 1, "due": "2024-06-10", "notes": ""},
        {"title": "Write quarterly report", "status": "To-Do", "priority": "High",
         "tags": ["work", "urgent"], "estimate": 5, "due": "2024-06-20", "notes": "Ask Élodie for numbers"},
        {"title": "Call plumber", "status": "In Progress", "priority": "Low",
         "tags": [], "estimate": None, "due": None, "notes": None},
        {"title": "book dentist", "status": "To-Do", "priority": "Medium",
         "tags": ["health"], "estimate": "2", "due": "2025-01-05", "notes": "before summer"},
    ]


def _title(text: str) -> Dict[str, Any]:
    return {"type": "title", "title": [{"plain_text": text}] if text else []}


def make_page(
    title: str = "",
    status: Optional[str] = None,
    tags: Optional[List[str]] = None,
    rating: Optional[float] = None,
    date: Optional[str] = None,
    done: Optional[bool] = None,
    notes: Optional[str] = None,
    created_time: str = "2024-06-01T09:00:00.000Z",
) -> Dict[str, Any]:
    """Build a Notion-style page with typed property envelopes."""
    properties: Dict[str, Any] = {"Name": _title(title)}
    if status is not None:
        properties["Status"] = {"type": "select", "select": {"name": status} if status else None}
    if tags is not None:
        properties["Tags"] = {"type": "multi_select", "multi_select": [{"name": t} for t in tags]}
    if rating is not None:
        properties["Rating"] = {"type": "number", "number": rating}
    if date is not None:
        properties["Date"] = {"type": "date", "date": {"start": date} if date else None}
    if done is not None:
        properties["Done"] = {"type": "checkbox", "checkbox": done}
    if notes is not None:
        properties["Notes"] = {"type": "rich_text", "rich_text": [{"plain_text": notes}]}
    return {
        "id": f"page-{title.lower().replace(' ', '-')}",
        "created_time": created_time,
        "last_edited_time": "2024-06-14T18:30:00.000Z",
        "properties": properties,
    }


@pytest.fixture
def notion_pages() -> List[Dict[str, Any]]:
    """Typed records as returned by a Notion database query."""
    return [
        make_page("Morning run", status="Done", tags=["health", "outdoor"], rating=4,
                  date="2024-06-12", done=True, notes="5k in the park"),
        make_page("Read novel", status="To-Do", tags=["leisure"], rating=None,
                  date="2024-03-01", done=False),
        make_page("Team offsite", status="", tags=[], rating=5, date="2024-06-18",
                  created_time="2023-12-24T10:00:00.000Z"),
    ]


@pytest.fixture
def people() -> List[Person]:
    """People collection with nicknames."""
    return [
        Person(id="1", name="John Smith", nicknames=["Johnny"]),
        Person(id="2", name="Sarah", nicknames=["Sare", "S"]),
        Person(id="3", name="Mike", nicknames=[]),
        Person(id="4", name="Alexandra", nicknames=["Alex"]),
    ]


@pytest.fixture
def flat_adapter():
    return FLAT_ADAPTER


@pytest.fixture
def notion_adapter():
    return NOTION_ADAPTER


@pytest.fixture
def write_json(tmp_path):
    """Write data to a JSON file in tmp_path and return its path as str."""
    def _write(name: str, data: Any) -> str:
        path = Path(tmp_path) / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no LifeMetrics environment variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    for key in list(os.environ):
        if key.startswith("LIFEMETRICS_"):
            monkeypatch.delenv(key, raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_adapter_registry():
    """Keep adapter registrations from leaking between tests."""
    saved = dict(FilterFactory.ADAPTER_REGISTRY)
    yield
    FilterFactory.ADAPTER_REGISTRY.clear()
    FilterFactory.ADAPTER_REGISTRY.update(saved)


@pytest.fixture
def page_factory():
    """Factory for single Notion-style pages."""
    return make_page

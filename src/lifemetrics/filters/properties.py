"""
Property types and record adapters.

Records reach the engine in two shapes. Flat records are plain mappings (or
objects with attributes) such as todos and habit rows. Typed records wrap
every property in an envelope keyed by its Notion property type, e.g.
``{"type": "select", "select": {"name": "Done"}}``. A RecordAdapter turns
either shape into plain comparable values so the matcher never has to know
which one it is looking at.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union


class PropertyType(str, Enum):
    """Declared type of a record property (Notion property type names)."""
    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    PEOPLE = "people"
    FILES = "files"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE = "phone_number"
    FORMULA = "formula"
    RELATION = "relation"
    ROLLUP = "rollup"
    CREATED_TIME = "created_time"
    CREATED_BY = "created_by"
    LAST_EDITED_TIME = "last_edited_time"
    LAST_EDITED_BY = "last_edited_by"
    STATUS = "status"


PROPERTY_TYPE_DISPLAY_NAMES: Dict[PropertyType, str] = {
    PropertyType.TITLE: "Title",
    PropertyType.RICH_TEXT: "Text",
    PropertyType.NUMBER: "Number",
    PropertyType.SELECT: "Select",
    PropertyType.MULTI_SELECT: "Multi-select",
    PropertyType.DATE: "Date",
    PropertyType.PEOPLE: "People",
    PropertyType.FILES: "Files",
    PropertyType.CHECKBOX: "Checkbox",
    PropertyType.URL: "URL",
    PropertyType.EMAIL: "Email",
    PropertyType.PHONE: "Phone",
    PropertyType.FORMULA: "Formula",
    PropertyType.RELATION: "Relation",
    PropertyType.ROLLUP: "Rollup",
    PropertyType.CREATED_TIME: "Created time",
    PropertyType.CREATED_BY: "Created by",
    PropertyType.LAST_EDITED_TIME: "Last edited time",
    PropertyType.LAST_EDITED_BY: "Last edited by",
    PropertyType.STATUS: "Status",
}

DATE_PROPERTY_TYPES = frozenset({
    PropertyType.DATE,
    PropertyType.CREATED_TIME,
    PropertyType.LAST_EDITED_TIME,
})


def parse_property_type(value: Union[PropertyType, str, None]) -> Optional[PropertyType]:
    """
    Resolve a property type name to a PropertyType.

    Args:
        value: PropertyType, its string name, or None

    Returns:
        Optional[PropertyType]: Matching type, or None if absent or unknown
    """
    if value is None or isinstance(value, PropertyType):
        return value
    try:
        return PropertyType(str(value))
    except ValueError:
        return None


def get_field(record: Any, key: str) -> Any:
    """Look up ``key`` on a mapping, falling back to attribute access."""
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


# ---------------------------------------------------------------------------
# Flat records
# ---------------------------------------------------------------------------

def flat_value(record: Any, key: str, property_type: Optional[PropertyType] = None) -> Any:
    """Value of ``key`` on a flat record; the declared type is not needed."""
    return get_field(record, key)


def flat_values(record: Any) -> List[Any]:
    """All property values of a flat record, in key order."""
    if isinstance(record, Mapping):
        return list(record.values())
    if hasattr(record, "__dict__"):
        return list(vars(record).values())
    return []


# ---------------------------------------------------------------------------
# Typed (Notion-style) records
# ---------------------------------------------------------------------------

def _first_plain_text(runs: Any) -> str:
    if isinstance(runs, list) and runs:
        return get_field(runs[0], "plain_text") or ""
    return ""


def _title(record: Any, envelope: Any) -> Any:
    return _first_plain_text(get_field(envelope, "title"))


def _rich_text(record: Any, envelope: Any) -> Any:
    return _first_plain_text(get_field(envelope, "rich_text"))


def _number(record: Any, envelope: Any) -> Any:
    return get_field(envelope, "number")


def _select(record: Any, envelope: Any) -> Any:
    option = get_field(envelope, "select")
    return (get_field(option, "name") if option else None) or ""


def _multi_select(record: Any, envelope: Any) -> Any:
    options = get_field(envelope, "multi_select") or []
    return [get_field(option, "name") for option in options]


def _date(record: Any, envelope: Any) -> Any:
    value = get_field(envelope, "date")
    return (get_field(value, "start") if value else None) or ""


def _checkbox(record: Any, envelope: Any) -> Any:
    return bool(get_field(envelope, "checkbox"))


def _created_time(record: Any, envelope: Any) -> Any:
    return get_field(record, "created_time") or ""


def _last_edited_time(record: Any, envelope: Any) -> Any:
    return get_field(record, "last_edited_time") or ""


# Extraction rules per declared type: (record, envelope) -> plain value
TYPED_EXTRACTORS: Dict[PropertyType, Callable[[Any, Any], Any]] = {
    PropertyType.TITLE: _title,
    PropertyType.RICH_TEXT: _rich_text,
    PropertyType.NUMBER: _number,
    PropertyType.SELECT: _select,
    PropertyType.MULTI_SELECT: _multi_select,
    PropertyType.DATE: _date,
    PropertyType.CHECKBOX: _checkbox,
    PropertyType.CREATED_TIME: _created_time,
    PropertyType.LAST_EDITED_TIME: _last_edited_time,
}

# Value reported when the property is missing from the record
EMPTY_VALUES: Dict[PropertyType, Any] = {
    PropertyType.TITLE: "",
    PropertyType.RICH_TEXT: "",
    PropertyType.NUMBER: None,
    PropertyType.SELECT: "",
    PropertyType.MULTI_SELECT: [],
    PropertyType.DATE: "",
    PropertyType.CHECKBOX: False,
}

# Record-level fields, present even when the properties map is not
RECORD_LEVEL_TYPES = frozenset({PropertyType.CREATED_TIME, PropertyType.LAST_EDITED_TIME})


def notion_value(record: Any, key: str, property_type: Union[PropertyType, str, None] = None) -> Any:
    """
    Extract the plain value of a typed property envelope.

    When ``property_type`` is not given the envelope's own ``type`` field is
    used. Unrecognized types yield None; a missing property yields the empty
    value of its type.

    Args:
        record: Typed record with a ``properties`` mapping
        key: Property name
        property_type: Declared property type

    Returns:
        Plain value suitable for the generic matcher
    """
    properties = get_field(record, "properties") or {}
    envelope = get_field(properties, key)

    declared = parse_property_type(property_type)
    if declared is None and envelope is not None:
        declared = parse_property_type(get_field(envelope, "type"))
    if declared is None:
        return None

    extractor = TYPED_EXTRACTORS.get(declared)
    if extractor is None:
        return None

    if envelope is None and declared not in RECORD_LEVEL_TYPES:
        empty = EMPTY_VALUES.get(declared)
        return list(empty) if isinstance(empty, list) else empty

    return extractor(record, envelope or {})


def notion_values(record: Any) -> List[Any]:
    """Plain values of every property on a typed record."""
    properties = get_field(record, "properties") or {}
    if not isinstance(properties, Mapping):
        return []
    return [notion_value(record, key) for key in properties]


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------

Extractor = Callable[[Any, str, Optional[PropertyType]], Any]


@dataclass(frozen=True)
class RecordAdapter:
    """
    Pluggable access to record values.

    Attributes:
        name: Registry name of the adapter
        value: Extractor mapping (record, key, property_type) to a plain value
        values: Function listing every plain value on a record (search fallback)
    """
    name: str
    value: Extractor
    values: Callable[[Any], List[Any]]


FLAT_ADAPTER = RecordAdapter(name="flat", value=flat_value, values=flat_values)
NOTION_ADAPTER = RecordAdapter(name="notion", value=notion_value, values=notion_values)

"""
People matching for calendar event titles.
"""

from .matching import (
    NamePosition,
    Person,
    extract_names_from_title,
    find_person_name_positions,
    get_matched_people_from_event,
    match_people_to_names,
)

__all__ = [
    "NamePosition",
    "Person",
    "extract_names_from_title",
    "find_person_name_positions",
    "get_matched_people_from_event",
    "match_people_to_names",
]

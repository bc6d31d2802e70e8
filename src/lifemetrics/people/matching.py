"""
People matching for calendar event titles.

Calendar events such as "Coffee w/ John" or "Dinner with Sarah & Mike" name
the people involved in free text. These helpers pull the names out of a
title, match them against a people collection (names and nicknames), and
locate each matched person inside the title for highlighting.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

_WITH_SLASH = re.compile(r"w/", re.IGNORECASE)
_WITH_WORD = re.compile(r"\bwith\b", re.IGNORECASE)
_NAME_SEPARATORS = re.compile(r"[,&]|\band\b", re.IGNORECASE)
_TRAILING_PUNCTUATION = re.compile(r"[.,;:!?]+$")


@dataclass
class Person:
    """
    Someone who can appear in event titles.

    Attributes:
        id: Identifier of the person record
        name: Display name
        nicknames: Alternative names used in titles
        image_url: Avatar URL, if any
    """
    id: str
    name: str
    nicknames: List[str] = field(default_factory=list)
    image_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Person':
        """Build a Person from a mapping; missing nicknames become an empty list."""
        return cls(
            id=str(data.get('id', '')),
            name=str(data.get('name') or ''),
            nicknames=[str(n) for n in (data.get('nicknames') or [])],
            image_url=data.get('image_url') or data.get('imageUrl'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'nicknames': list(self.nicknames),
            'image_url': self.image_url,
        }


@dataclass
class NamePosition:
    """Where a person's name (or nickname) occurs in a title."""
    person: Person
    start_index: int
    end_index: int
    matched_name: str


def extract_names_from_title(title: str) -> List[str]:
    """
    Extract the names listed after "w/" or "with" in an event title.

    "w/" takes precedence over "with" when both occur. The remainder is split
    on commas, ampersands and the word "and"; trailing punctuation is removed.

    Examples:
        "Coffee w/ John" -> ["John"]
        "Meeting with Sarah and Mike" -> ["Sarah", "Mike"]
        "Lunch w/ Alex, Bob" -> ["Alex", "Bob"]

    Args:
        title: Calendar event title

    Returns:
        List of names in title order (empty if the title names nobody)
    """
    if not title:
        return []

    marker = _WITH_SLASH.search(title) or _WITH_WORD.search(title)
    if marker is None:
        return []

    remainder = title[marker.end():].strip()

    names = []
    for part in _NAME_SEPARATORS.split(remainder):
        name = _TRAILING_PUNCTUATION.sub("", part.strip()).strip()
        if name:
            names.append(name)
    return names


def _person_matches(name: str, person_name: str, nicknames: Sequence[str]) -> bool:
    if name == person_name or name in nicknames:
        return True
    # Partial match either way round
    if person_name and (name in person_name or person_name in name):
        return True
    return any(nickname in name or name in nickname for nickname in nicknames)


def match_people_to_names(names: Sequence[str], people: Sequence[Person]) -> List[Person]:
    """
    Match extracted names against a people collection.

    A person matches when any name equals their name or a nickname, ignoring
    case, or when either contains the other. People are returned in
    collection order, each at most once.
    """
    lowered = [n.lower() for n in names if n and n.strip()]
    if not lowered:
        return []

    matched = []
    for person in people:
        person_name = person.name.lower()
        nicknames = [n.lower() for n in person.nicknames if n]
        if any(_person_matches(name, person_name, nicknames) for name in lowered):
            matched.append(person)

    logger.debug(f"Matched {len(matched)} of {len(people)} people to names {list(names)}")
    return matched


def get_matched_people_from_event(title: str, people: Sequence[Person]) -> List[Person]:
    """People named in a calendar event title."""
    names = extract_names_from_title(title)
    if not names:
        return []
    return match_people_to_names(names, people)


def find_person_name_positions(title: str, people: Sequence[Person]) -> List[NamePosition]:
    """
    Locate each person in a title.

    For every person the first occurrence of their name is used, falling back
    to the first nickname found. Matching ignores case; ``matched_name`` keeps
    the title's own spelling.

    Returns:
        Positions sorted by start index
    """
    positions = []

    for person in people:
        candidates = [person.name] + list(person.nicknames)
        for candidate in candidates:
            if not candidate:
                continue
            found = re.search(re.escape(candidate), title, re.IGNORECASE)
            if found:
                positions.append(NamePosition(
                    person=person,
                    start_index=found.start(),
                    end_index=found.end(),
                    matched_name=found.group(0)
                ))
                break

    positions.sort(key=lambda p: p.start_index)
    return positions

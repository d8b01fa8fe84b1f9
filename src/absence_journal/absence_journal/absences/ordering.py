from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.sorting import class_sort_key
from ..roster.model import SchoolClass


def roster_index(roster: Sequence[SchoolClass]) -> dict[str, SchoolClass]:
    # first occurrence wins if the roster repeats an id
    index: dict[str, SchoolClass] = {}
    for c in roster:
        index.setdefault(c.class_id, c)
    return index


def display_name(index: Mapping[str, SchoolClass], class_id: str) -> str:
    found: Optional[SchoolClass] = index.get(class_id)
    return found.name if found else class_id


def class_key(index: Mapping[str, SchoolClass], class_id: str) -> tuple:
    """Sort key for a class id; ids missing from the roster go last, by id."""
    found = index.get(class_id)
    if found is None:
        return class_sort_key(None, class_id)
    return found.sort_key

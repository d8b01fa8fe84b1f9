from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.sorting import class_sort_key


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class (form) on the school roster."""

    class_id: str
    name: str
    order: Optional[int] = None

    @property
    def sort_key(self) -> tuple:
        return class_sort_key(self.order, self.name)


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    name: str

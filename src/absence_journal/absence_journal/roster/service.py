from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import ADMIN_AUTHOR_LABEL, UNKNOWN_AUTHOR_LABEL
from .model import SchoolClass, Teacher
from .repository import RosterRepository


class RosterService:
    """Use case: resolve roster names for display and ordering.

    The roster is loaded once and cached; call `reload()` after it changes.
    """

    def __init__(self, roster: RosterRepository):
        self._roster = roster
        self._classes: Optional[tuple[SchoolClass, ...]] = None
        self._teachers: Optional[tuple[Teacher, ...]] = None

    def reload(self) -> None:
        self._classes = tuple(self._roster.list_classes())
        self._teachers = tuple(self._roster.list_teachers())

    def classes(self) -> Sequence[SchoolClass]:
        if self._classes is None:
            self.reload()
        return self._classes

    def teachers(self) -> Sequence[Teacher]:
        if self._teachers is None:
            self.reload()
        return self._teachers

    def find_class(self, class_id: str) -> Optional[SchoolClass]:
        for c in self.classes():
            if c.class_id == class_id:
                return c
        return None

    def class_name(self, class_id: str) -> str:
        found = self.find_class(class_id)
        return found.name if found else class_id

    def author_name(self, user_id: Optional[str]) -> str:
        if not user_id:
            return UNKNOWN_AUTHOR_LABEL
        for t in self.teachers():
            if t.teacher_id == user_id:
                return t.name
        return ADMIN_AUTHOR_LABEL

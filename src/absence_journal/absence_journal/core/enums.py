from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role supplied by the identity provider."""

    ADMIN = "admin"
    TEACHER = "teacher"
    VIEWER = "viewer"

    @property
    def can_edit(self) -> bool:
        return self in (Role.ADMIN, Role.TEACHER)


class AbsenceReason(str, Enum):
    """Closed set of reasons a student may be absent for."""

    ILLNESS = "illness"
    STATEMENT = "statement"
    ABROAD = "abroad"
    DISRESPECTFUL = "disrespectful"
    OTHER = "other"


class PeriodKind(str, Enum):
    DAY = "day"
    MONTH = "month"


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class EditorState(str, Enum):
    """Lifecycle of one editing session."""

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    SAVED = "SAVED"
    DELETED = "DELETED"
    CANCELLED = "CANCELLED"

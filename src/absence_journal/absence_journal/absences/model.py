from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceReason
from ..roster.model import SchoolClass
from .reasons import reason_label


@dataclass(frozen=True)
class AbsenceEntry:
    """Value object: one absent student inside a record."""

    student_name: str
    reason: AbsenceReason
    other_reason: Optional[str] = None

    @property
    def label(self) -> str:
        return reason_label(self.reason, self.other_reason)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one class's absences on one day.

    At most one record exists per (class_id, record_date).
    """

    record_id: str
    record_date: date
    class_id: str
    absences: tuple[AbsenceEntry, ...]
    entered_at: datetime
    updated_at: datetime
    entered_by: Optional[str] = None
    updated_by: Optional[str] = None

    @property
    def key(self) -> tuple[str, date]:
        return (self.class_id, self.record_date)

    @property
    def absent_count(self) -> int:
        return len(self.absences)


@dataclass(frozen=True)
class SubmittedRecord:
    """Read-model: a record plus the class name to display for it."""

    record: AttendanceRecord
    class_name: str


@dataclass(frozen=True)
class Classification:
    target_date: date
    pending: tuple[SchoolClass, ...]
    submitted: tuple[SubmittedRecord, ...]

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    @property
    def submitted_count(self) -> int:
        return len(self.submitted)

    @property
    def is_complete(self) -> bool:
        return not self.pending


@dataclass(frozen=True)
class ClassBucket:
    """Read-model: one class's absence totals over a period."""

    class_id: str
    class_name: str
    total: int
    reasons: tuple[tuple[str, int], ...] = ()

    @property
    def reason_counts(self) -> dict[str, int]:
        return dict(self.reasons)

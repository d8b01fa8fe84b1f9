from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

import pytest

from src.absence_journal.absence_journal.absences.model import AbsenceEntry, AttendanceRecord
from src.absence_journal.absence_journal.core.enums import AbsenceReason, Role
from src.absence_journal.absence_journal.identity.model import CurrentUser
from src.absence_journal.absence_journal.roster.model import SchoolClass, Teacher


class InMemoryRoster:
    def __init__(self, classes: Sequence[SchoolClass] = (), teachers: Sequence[Teacher] = ()):
        self.classes = list(classes)
        self.teachers = list(teachers)

    def list_classes(self):
        return list(self.classes)

    def list_teachers(self):
        return list(self.teachers)


class InMemoryAbsences:
    def __init__(self, records: Sequence[AttendanceRecord] = (), *, fail_with: Optional[Exception] = None):
        self.stored = list(records)
        self.persist_calls: list[list[AttendanceRecord]] = []
        self.fail_with = fail_with

    def load_all(self):
        return list(self.stored)

    async def persist(self, records):
        self.persist_calls.append(list(records))
        if self.fail_with is not None:
            raise self.fail_with
        self.stored = list(records)


class TickingClock:
    """Returns a strictly later instant on every call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + timedelta(minutes=1)
        return value


class SequentialIds:
    def __init__(self, prefix: str = "rec"):
        self.prefix = prefix
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"{self.prefix}-{self.n}"


def make_record(
    record_id: str,
    class_id: str,
    record_date: date,
    *entries: tuple,
    entered_by: Optional[str] = None,
) -> AttendanceRecord:
    stamp = datetime(record_date.year, record_date.month, record_date.day, 8, 0, tzinfo=timezone.utc)
    return AttendanceRecord(
        record_id=record_id,
        record_date=record_date,
        class_id=class_id,
        absences=tuple(
            AbsenceEntry(student_name=e[0], reason=AbsenceReason(e[1]), other_reason=e[2] if len(e) > 2 else None)
            for e in entries
        ),
        entered_by=entered_by,
        entered_at=stamp,
        updated_at=stamp,
    )


@pytest.fixture
def roster_classes():
    # order values [2, 1, None] with names 1В, 1А, 2А
    return [
        SchoolClass(class_id="c-1v", name="1В", order=2),
        SchoolClass(class_id="c-1a", name="1А", order=1),
        SchoolClass(class_id="c-2a", name="2А"),
    ]


@pytest.fixture
def teachers():
    return [Teacher(teacher_id="t-1", name="Иванова И.И.")]


@pytest.fixture
def fixed_now():
    return datetime(2024, 9, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now):
    return TickingClock(fixed_now)


@pytest.fixture
def admin():
    return CurrentUser(user_id="u-admin", email="admin@school.example", role=Role.ADMIN)


@pytest.fixture
def teacher_user():
    return CurrentUser(user_id="t-1", email="ivanova@school.example", role=Role.TEACHER)


@pytest.fixture
def viewer():
    return CurrentUser(user_id="u-view", email="viewer@school.example", role=Role.VIEWER)


@pytest.fixture
def new_record():
    return make_record


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def roster_repo(roster_classes, teachers):
    return InMemoryRoster(roster_classes, teachers)


@pytest.fixture
def absences_repo_cls():
    return InMemoryAbsences

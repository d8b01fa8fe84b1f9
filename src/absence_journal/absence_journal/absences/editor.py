from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import blank_to_none, require_non_empty
from ..core.constants import MAX_ABSENCES_PER_RECORD
from ..core.enums import AbsenceReason, EditorMode, EditorState
from ..core.exceptions import ValidationError
from ..identity.model import CurrentUser
from .model import AbsenceEntry, AttendanceRecord
from .reasons import normalize_other_reason, parse_reason

_CLOSABLE = frozenset({EditorState.CLOSED, EditorState.SAVED, EditorState.DELETED, EditorState.CANCELLED})


@dataclass(frozen=True)
class EditorSession:
    """State of one editing session.

    Every editor operation takes a session and returns a new one; nothing is
    kept between sessions.
    """

    state: EditorState = EditorState.CLOSED
    mode: EditorMode = EditorMode.CREATE
    class_id: str = ""
    record: Optional[AttendanceRecord] = None
    absences: tuple[AbsenceEntry, ...] = ()
    draft_name: str = ""
    draft_reason: AbsenceReason = AbsenceReason.ILLNESS
    draft_other_reason: str = ""

    @property
    def is_open(self) -> bool:
        return self.state == EditorState.OPEN

    @property
    def is_full(self) -> bool:
        return len(self.absences) >= MAX_ABSENCES_PER_RECORD


@dataclass(frozen=True)
class EditorResult:
    """A finished session: the record it saved or deleted and how it ended."""

    record: AttendanceRecord
    outcome: EditorState
    session: EditorSession


class RecordEditor:
    """Validates absentee edits and turns a session into a record."""

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._clock = clock or now_utc
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def start_new(self, class_id: Optional[str] = None) -> EditorSession:
        return EditorSession(state=EditorState.OPEN, mode=EditorMode.CREATE, class_id=blank_to_none(class_id) or "")

    def start_edit(self, record: Optional[AttendanceRecord] = None) -> EditorSession:
        if record is None:
            return self.start_new()
        return EditorSession(
            state=EditorState.OPEN,
            mode=EditorMode.EDIT,
            class_id=record.class_id,
            record=record,
            absences=tuple(record.absences),
        )

    def with_draft(
        self,
        session: EditorSession,
        *,
        name: str = "",
        reason: AbsenceReason = AbsenceReason.ILLNESS,
        other_reason: str = "",
    ) -> EditorSession:
        return replace(session, draft_name=name, draft_reason=reason, draft_other_reason=other_reason)

    def add_absentee(
        self,
        session: EditorSession,
        name: Optional[str],
        reason,
        other_reason: Optional[str] = None,
    ) -> EditorSession:
        """Append one absentee, or raise ValidationError leaving `session` as is."""
        self._require_open(session)

        student_name = require_non_empty(name, "Введите ФИО учащегося")
        if session.is_full:
            raise ValidationError(f"Максимально {MAX_ABSENCES_PER_RECORD} отсутствующих")
        parsed = parse_reason(reason)
        text = normalize_other_reason(parsed, other_reason)

        entry = AbsenceEntry(student_name=student_name, reason=parsed, other_reason=text)
        return replace(
            session,
            absences=session.absences + (entry,),
            draft_name="",
            draft_reason=AbsenceReason.ILLNESS,
            draft_other_reason="",
        )

    def add_draft(self, session: EditorSession) -> EditorSession:
        return self.add_absentee(session, session.draft_name, session.draft_reason, session.draft_other_reason)

    def remove_absentee(self, session: EditorSession, index: int) -> EditorSession:
        if not session.is_open or not 0 <= index < len(session.absences):
            return session
        absences = session.absences[:index] + session.absences[index + 1:]
        return replace(session, absences=absences)

    def clear_absentees(self, session: EditorSession) -> EditorSession:
        self._require_open(session)
        return replace(session, absences=())

    def build_record(
        self,
        session: EditorSession,
        *,
        record_date: date,
        user: Optional[CurrentUser] = None,
    ) -> AttendanceRecord:
        """Create a new record or the updated version of the edited one."""
        self._require_open(session)
        class_id = require_non_empty(session.class_id, "Выберите класс")
        now = self._clock()

        existing = session.record
        if existing is None:
            return AttendanceRecord(
                record_id=self._id_factory(),
                record_date=record_date,
                class_id=class_id,
                absences=session.absences,
                entered_by=user.user_id if user else None,
                entered_at=now,
                updated_at=now,
                updated_by=user.audit_name if user else None,
            )

        return replace(
            existing,
            absences=session.absences,
            updated_at=max(now, existing.entered_at),
            updated_by=user.audit_name if user else existing.updated_by,
        )

    def cancel(self, session: EditorSession) -> EditorSession:
        return replace(session, state=EditorState.CANCELLED)

    def mark_saved(self, session: EditorSession) -> EditorSession:
        self._require_open(session)
        return replace(session, state=EditorState.SAVED)

    def mark_deleted(self, session: EditorSession) -> EditorSession:
        self._require_open(session)
        return replace(session, state=EditorState.DELETED)

    def close(self, session: EditorSession) -> EditorSession:
        if session.state not in _CLOSABLE:
            raise ValidationError("Сохраните или отмените изменения")
        return EditorSession()

    @staticmethod
    def _require_open(session: EditorSession) -> None:
        if not session.is_open:
            raise ValidationError("Редактор не открыт")


def merge_into(records: Iterable[AttendanceRecord], record: AttendanceRecord) -> tuple[AttendanceRecord, ...]:
    """Next full set: `record` replaces its namesake by id, or is appended."""
    out = []
    replaced = False
    for r in records:
        if r.record_id == record.record_id:
            out.append(record)
            replaced = True
        else:
            out.append(r)
    if not replaced:
        out.append(record)
    return tuple(out)


def remove_from(records: Iterable[AttendanceRecord], record_id: str) -> tuple[AttendanceRecord, ...]:
    return tuple(r for r in records if r.record_id != record_id)

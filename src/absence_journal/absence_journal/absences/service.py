from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.constants import SUMMARY_PREVIEW_NAMES
from ..core.enums import EditorMode
from ..core.exceptions import AuthorizationError, NotFoundError, PersistenceError, ValidationError
from ..identity.model import CurrentUser
from ..roster.service import RosterService
from .aggregator import AbsenceAggregator
from .classifier import CompletionClassifier
from .editor import EditorResult, EditorSession, RecordEditor, merge_into, remove_from
from .factory import PeriodFactory
from .model import AttendanceRecord, ClassBucket, Classification
from .periods.base import Period
from .repository import AbsenceRepository
from .store import RecordStore

logger = logging.getLogger(__name__)


class AbsenceService:
    """Use cases around the absence journal.

    Reads are recomputed from the record store on every call. Writes replace
    the store's full set first and then persist it; a failed persist is
    reported but the local change is kept.
    """

    def __init__(
        self,
        absences: AbsenceRepository,
        roster: RosterService,
        *,
        store: Optional[RecordStore] = None,
        editor: Optional[RecordEditor] = None,
        classifier: Optional[CompletionClassifier] = None,
        aggregator: Optional[AbsenceAggregator] = None,
        period_factory: Optional[PeriodFactory] = None,
    ):
        self._absences = absences
        self._roster = roster
        self._store = store or RecordStore()
        self._editor = editor or RecordEditor()
        self._classifier = classifier or CompletionClassifier()
        self._aggregator = aggregator or AbsenceAggregator()
        self._periods = period_factory or PeriodFactory()
        self._loaded = store is not None

    @property
    def editor(self) -> RecordEditor:
        return self._editor

    @property
    def periods(self) -> PeriodFactory:
        return self._periods

    def refresh(self) -> None:
        self._store.replace_all(self._absences.load_all())
        self._loaded = True
        logger.info("Loaded %d attendance records", len(self._store))

    def records(self) -> Sequence[AttendanceRecord]:
        self._ensure_loaded()
        return self._store.all()

    def get_record(self, record_id: str) -> AttendanceRecord:
        self._ensure_loaded()
        record = self._store.get(record_id)
        if record is None:
            raise NotFoundError("Запись не найдена")
        return record

    # ----- derived views -----

    def classify_day(self, day: date) -> Classification:
        self._ensure_loaded()
        return self._classifier.classify(self._roster.classes(), self._store.for_date(day), day)

    def stats_for(self, period: Period) -> tuple[ClassBucket, ...]:
        self._ensure_loaded()
        return self._aggregator.aggregate(self._store.for_period(period), self._roster.classes(), period)

    def day_stats(self, day: date) -> tuple[ClassBucket, ...]:
        return self.stats_for(self._periods.for_day(day))

    def month_stats(self, year: int, month: int) -> tuple[ClassBucket, ...]:
        return self.stats_for(self._periods.for_month(year, month))

    # ----- editing sessions -----

    def open_new(self, class_id: Optional[str], record_date: date) -> EditorSession:
        """Open a session for a class; an already reported class opens its record."""
        self._ensure_loaded()
        existing = self._store.find(class_id, record_date) if class_id else None
        if existing is not None:
            return self._editor.start_edit(existing)
        return self._editor.start_new(class_id)

    def open_edit(self, record_id: str) -> EditorSession:
        return self._editor.start_edit(self.get_record(record_id))

    async def save(self, session: EditorSession, *, record_date: date, user: CurrentUser) -> EditorResult:
        self._require_editor(user)
        self._ensure_loaded()

        record = self._editor.build_record(session, record_date=record_date, user=user)

        clash = self._store.find(record.class_id, record.record_date)
        if clash is not None and clash.record_id != record.record_id:
            raise ValidationError(
                f"Пропуски класса {self._roster.class_name(record.class_id)} за эту дату уже внесены"
            )

        records = merge_into(self._store.all(), record)
        self._store.replace_all(records)
        action = "updated" if session.mode == EditorMode.EDIT else "created"
        logger.info(
            "Attendance record %s %s (class=%s date=%s absent=%d by=%s)",
            record.record_id, action, record.class_id, record.record_date, record.absent_count, user.audit_name,
        )

        await self._persist(records)
        saved = self._editor.mark_saved(session)
        return EditorResult(record=record, outcome=saved.state, session=self._editor.close(saved))

    async def delete(self, record_id: str, *, user: CurrentUser, confirmed: bool) -> EditorResult:
        self._require_editor(user)
        if not confirmed:
            raise ValidationError("Удаление требует подтверждения")

        session = self.open_edit(record_id)
        record = session.record
        records = remove_from(self._store.all(), record.record_id)
        self._store.replace_all(records)
        logger.info(
            "Attendance record %s deleted (class=%s date=%s by=%s)",
            record.record_id, record.class_id, record.record_date, user.audit_name,
        )

        await self._persist(records)
        deleted = self._editor.mark_deleted(session)
        return EditorResult(record=record, outcome=deleted.state, session=self._editor.close(deleted))

    # ----- display helpers -----

    def class_name(self, class_id: str) -> str:
        return self._roster.class_name(class_id)

    def entered_by_name(self, record: AttendanceRecord) -> str:
        return self._roster.author_name(record.entered_by)

    def record_summary(self, record: AttendanceRecord) -> str:
        if not record.absences:
            return "Все присутствуют"
        names = [a.student_name for a in record.absences[:SUMMARY_PREVIEW_NAMES]]
        summary = f"Отсутствует: {record.absent_count} чел. ({', '.join(names)}"
        hidden = record.absent_count - len(names)
        if hidden > 0:
            summary += f", +{hidden} еще"
        return summary + ")"

    # ----- internals -----

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.refresh()

    @staticmethod
    def _require_editor(user: Optional[CurrentUser]) -> None:
        if user is None or not user.can_edit:
            raise AuthorizationError("Недостаточно прав для изменения данных")

    async def _persist(self, records: Sequence[AttendanceRecord]) -> None:
        try:
            await self._absences.persist(records)
        except PersistenceError:
            logger.exception("Persisting %d attendance records failed", len(records))
            raise
        except Exception as exc:
            logger.exception("Persisting %d attendance records failed", len(records))
            raise PersistenceError("Не удалось сохранить данные") from exc

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable, Optional

from .model import AttendanceRecord
from .periods.base import Period

logger = logging.getLogger(__name__)


class RecordStore:
    """Authoritative in-memory record set for the current session.

    There is no partial update: callers compute the next full set and hand it
    to `replace_all`.
    """

    def __init__(self, records: Iterable[AttendanceRecord] = ()):
        self._records: tuple[AttendanceRecord, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def replace_all(self, records: Iterable[AttendanceRecord]) -> None:
        self._records = tuple(records)
        logger.debug("Record store replaced (records=%d)", len(self._records))

    def all(self) -> tuple[AttendanceRecord, ...]:
        return self._records

    def query(self, predicate: Callable[[AttendanceRecord], bool]) -> tuple[AttendanceRecord, ...]:
        return tuple(r for r in self._records if predicate(r))

    def for_date(self, day: date) -> tuple[AttendanceRecord, ...]:
        return self.query(lambda r: r.record_date == day)

    def for_month(self, year: int, month: int) -> tuple[AttendanceRecord, ...]:
        return self.query(lambda r: r.record_date.year == year and r.record_date.month == month)

    def for_period(self, period: Period) -> tuple[AttendanceRecord, ...]:
        return self.query(lambda r: period.contains(r.record_date))

    def find(self, class_id: str, day: date) -> Optional[AttendanceRecord]:
        for r in self._records:
            if r.class_id == class_id and r.record_date == day:
                return r
        return None

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        for r in self._records:
            if r.record_id == record_id:
                return r
        return None

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..core.enums import AbsenceReason
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_db_datetime, to_db_datetime
from .model import AbsenceEntry, AttendanceRecord
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return list(self._read_all(cur).values())

    async def persist(self, records: Sequence[AttendanceRecord]) -> None:
        await asyncio.to_thread(self._write_full_set, tuple(records))

    def _read_all(self, cur) -> dict[str, AttendanceRecord]:
        cur.execute(
            """
            SELECT record_id, position, student_name, reason, other_reason
            FROM absence_entries
            ORDER BY record_id, position
            """
        )
        entries: dict[str, list[AbsenceEntry]] = {}
        for r in fetchall(cur):
            entries.setdefault(r["record_id"], []).append(
                AbsenceEntry(
                    student_name=r["student_name"],
                    reason=AbsenceReason(r["reason"]),
                    other_reason=r.get("other_reason"),
                )
            )

        cur.execute(
            """
            SELECT record_id, record_date, class_id, entered_by, entered_at, updated_at, updated_by
            FROM absence_records
            ORDER BY record_date, class_id
            """
        )
        return {
            r["record_id"]: AttendanceRecord(
                record_id=r["record_id"],
                record_date=r["record_date"],
                class_id=str(r["class_id"]),
                absences=tuple(entries.get(r["record_id"], ())),
                entered_by=r.get("entered_by"),
                entered_at=from_db_datetime(r["entered_at"]),
                updated_at=from_db_datetime(r["updated_at"]),
                updated_by=r.get("updated_by"),
            )
            for r in fetchall(cur)
        }

    def _write_full_set(self, records: tuple[AttendanceRecord, ...]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            stored = self._read_all(cur)
            wanted = {r.record_id: r for r in records}

            to_delete = [rid for rid in stored if rid not in wanted]
            to_upsert = [r for rid, r in wanted.items() if stored.get(rid) != r]

            if not to_delete and not to_upsert:
                return
            logger.debug("Syncing absence_records: delete=%d upsert=%d", len(to_delete), len(to_upsert))

            stale = to_delete + [r.record_id for r in to_upsert]
            cur.executemany("DELETE FROM absence_entries WHERE record_id=%s", [(rid,) for rid in stale])
            cur.executemany("DELETE FROM absence_records WHERE record_id=%s", [(rid,) for rid in to_delete])

            for r in to_upsert:
                cur.execute(
                    """
                    INSERT INTO absence_records(record_id, record_date, class_id, entered_by, entered_at, updated_at, updated_by)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        record_date=VALUES(record_date),
                        class_id=VALUES(class_id),
                        entered_by=VALUES(entered_by),
                        entered_at=VALUES(entered_at),
                        updated_at=VALUES(updated_at),
                        updated_by=VALUES(updated_by)
                    """,
                    (
                        r.record_id,
                        r.record_date,
                        r.class_id,
                        r.entered_by,
                        to_db_datetime(r.entered_at),
                        to_db_datetime(r.updated_at),
                        r.updated_by,
                    ),
                )
                if r.absences:
                    cur.executemany(
                        """
                        INSERT INTO absence_entries(record_id, position, student_name, reason, other_reason)
                        VALUES(%s,%s,%s,%s,%s)
                        """,
                        [
                            (r.record_id, i, e.student_name, e.reason.value, e.other_reason)
                            for i, e in enumerate(r.absences)
                        ],
                    )

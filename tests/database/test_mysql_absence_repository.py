from __future__ import annotations

import asyncio
from datetime import date, datetime

from src.absence_journal.absence_journal.absences.mysql_absence_repository import MySQLAbsenceRepository

DAY = date(2024, 9, 2)


class FakeCursor:
    def __init__(self, db):
        self._db = db
        self._result = []

    def execute(self, sql, params=None):
        self._db.log.append(("execute", " ".join(sql.split()), params))
        if sql.lstrip().startswith("SELECT") and "FROM absence_entries" in sql:
            self._result = list(self._db.entries)
        elif sql.lstrip().startswith("SELECT") and "FROM absence_records" in sql:
            self._result = list(self._db.records)
        else:
            self._result = []

    def executemany(self, sql, seq):
        self._db.log.append(("executemany", " ".join(sql.split()), list(seq)))

    def fetchall(self):
        return self._result

    def close(self):
        pass


class FakeConnection:
    def __init__(self, db):
        self._db = db

    def cursor(self, dictionary=False):
        return FakeCursor(self._db)

    def commit(self):
        self._db.commits += 1

    def rollback(self):
        pass

    def close(self):
        pass


class FakeDB:
    def __init__(self, records=(), entries=()):
        self.records = list(records)
        self.entries = list(entries)
        self.log = []
        self.commits = 0

    def connect(self):
        return FakeConnection(self)


def _row(record_id, class_id):
    stamp = datetime(2024, 9, 2, 8, 0)
    return {
        "record_id": record_id,
        "record_date": DAY,
        "class_id": class_id,
        "entered_by": None,
        "entered_at": stamp,
        "updated_at": stamp,
        "updated_by": None,
    }


def test_load_all_groups_entries_by_record():
    db = FakeDB(
        records=[_row("r1", "c-1a"), _row("r2", "c-1v")],
        entries=[
            {"record_id": "r1", "position": 0, "student_name": "Петров", "reason": "illness", "other_reason": None},
            {"record_id": "r1", "position": 1, "student_name": "Орлов", "reason": "other", "other_reason": "Сборы"},
        ],
    )

    records = {r.record_id: r for r in MySQLAbsenceRepository(db).load_all()}

    assert [a.student_name for a in records["r1"].absences] == ["Петров", "Орлов"]
    assert records["r1"].absences[1].label == "Сборы"
    assert records["r2"].absences == ()
    assert records["r1"].entered_at.tzinfo is not None


def test_persist_deletes_missing_and_upserts_changed(new_record):
    db = FakeDB(records=[_row("r1", "c-1a"), _row("r2", "c-1v")])
    repo = MySQLAbsenceRepository(db)
    unchanged = repo.load_all()[0]
    db.log.clear()

    changed = new_record("r3", "c-2a", DAY, ("Петров", "illness"))
    asyncio.run(repo.persist([unchanged, changed]))

    deletes = [entry for entry in db.log if entry[0] == "executemany" and entry[1].startswith("DELETE FROM absence_records")]
    inserts = [entry for entry in db.log if entry[0] == "execute" and entry[1].startswith("INSERT INTO absence_records")]
    entry_rows = [entry for entry in db.log if entry[0] == "executemany" and entry[1].startswith("INSERT INTO absence_entries")]

    assert deletes[0][2] == [("r2",)]
    assert [i[2][0] for i in inserts] == ["r3"]
    assert entry_rows[0][2] == [("r3", 0, "Петров", "illness", None)]
    assert db.commits == 2


def test_persist_same_set_writes_nothing():
    db = FakeDB(records=[_row("r1", "c-1a")])
    repo = MySQLAbsenceRepository(db)
    records = repo.load_all()
    db.log.clear()

    asyncio.run(repo.persist(records))

    assert all(entry[1].startswith("SELECT") for entry in db.log)

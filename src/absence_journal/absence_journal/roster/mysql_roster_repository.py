from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SchoolClass, Teacher
from .repository import RosterRepository


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_classes(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_id, name, sort_order
                FROM classes
                """
            )
            rows = fetchall(cur)
            return [
                SchoolClass(
                    class_id=str(r["class_id"]),
                    name=r["name"],
                    order=int(r["sort_order"]) if r.get("sort_order") is not None else None,
                )
                for r in rows
            ]

    def list_teachers(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id, name FROM teachers")
            rows = fetchall(cur)
            return [Teacher(teacher_id=str(r["teacher_id"]), name=r["name"]) for r in rows]

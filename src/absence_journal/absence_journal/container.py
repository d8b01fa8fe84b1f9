from __future__ import annotations

from dataclasses import dataclass

from .absences.editor import RecordEditor
from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.repository import AbsenceRepository
from .absences.service import AbsenceService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import AbsenceReportService
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .roster.service import RosterService


@dataclass(frozen=True)
class Container:
    roster_repo: RosterRepository
    absences_repo: AbsenceRepository

    roster_service: RosterService
    absence_service: AbsenceService
    report_service: AbsenceReportService


def assemble(
    *,
    roster_repo: RosterRepository,
    absences_repo: AbsenceRepository,
    editor: RecordEditor | None = None,
) -> Container:
    roster_service = RosterService(roster_repo)
    absence_service = AbsenceService(absences_repo, roster_service, editor=editor)
    report_service = AbsenceReportService(absence_service)

    return Container(
        roster_repo=roster_repo,
        absences_repo=absences_repo,
        roster_service=roster_service,
        absence_service=absence_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        roster_repo=MySQLRosterRepository(conn),
        absences_repo=MySQLAbsenceRepository(conn),
    )

from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord


class AbsenceRepository(Protocol):
    """Persistence collaborator for attendance records.

    `persist` always receives the complete record set, never a delta; the
    stored collection must end up equal to it.
    """

    def load_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def persist(self, records: Sequence[AttendanceRecord]) -> None:
        raise NotImplementedError

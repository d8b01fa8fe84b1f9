from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from ..roster.model import SchoolClass
from .model import AttendanceRecord, Classification, SubmittedRecord
from .ordering import class_key, display_name, roster_index


class CompletionClassifier:
    """Split the roster into classes that have / have not reported for a day."""

    def classify(
        self,
        roster: Sequence[SchoolClass],
        records: Iterable[AttendanceRecord],
        target_date: date,
    ) -> Classification:
        index = roster_index(roster)
        for_day = [r for r in records if r.record_date == target_date]
        reported = {r.class_id for r in for_day}

        pending = sorted(
            (c for c in index.values() if c.class_id not in reported),
            key=lambda c: c.sort_key,
        )
        submitted = sorted(
            for_day,
            key=lambda r: (class_key(index, r.class_id), r.record_id),
        )

        return Classification(
            target_date=target_date,
            pending=tuple(pending),
            submitted=tuple(
                SubmittedRecord(record=r, class_name=display_name(index, r.class_id)) for r in submitted
            ),
        )

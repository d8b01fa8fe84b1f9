from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from ..roster.model import SchoolClass
from .model import AttendanceRecord, ClassBucket
from .ordering import class_key, display_name, roster_index
from .periods.base import Period
from .reasons import reason_rank


class AbsenceAggregator:
    """Per-class absence totals and reason breakdown for one period.

    Pure: the output depends only on the arguments, so the day view and the
    month view computed from one record set always agree.
    """

    def aggregate(
        self,
        records: Iterable[AttendanceRecord],
        roster: Sequence[SchoolClass],
        period: Period,
    ) -> tuple[ClassBucket, ...]:
        index = roster_index(roster)

        totals: dict[str, int] = {class_id: 0 for class_id in index}
        reasons: dict[str, Counter] = {class_id: Counter() for class_id in index}

        for record in records:
            if not period.contains(record.record_date):
                continue
            totals.setdefault(record.class_id, 0)
            counter = reasons.setdefault(record.class_id, Counter())
            for entry in record.absences:
                totals[record.class_id] += 1
                counter[entry.label] += 1

        buckets = [
            ClassBucket(
                class_id=class_id,
                class_name=display_name(index, class_id),
                total=total,
                reasons=tuple(sorted(reasons[class_id].items(), key=lambda kv: reason_rank(kv[0]))),
            )
            for class_id, total in totals.items()
        ]
        buckets.sort(key=lambda b: (class_key(index, b.class_id), b.class_id))
        return tuple(buckets)


def grand_total(buckets: Iterable[ClassBucket]) -> int:
    return sum(b.total for b in buckets)


def find_bucket(buckets: Iterable[ClassBucket], class_id: str) -> Optional[ClassBucket]:
    for b in buckets:
        if b.class_id == class_id:
            return b
    return None

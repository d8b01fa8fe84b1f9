from __future__ import annotations

from dataclasses import dataclass

from ..absences.aggregator import grand_total
from ..absences.periods.base import Period
from ..absences.service import AbsenceService

REPORT_FIELDS = ["class_name", "total", "reasons"]


@dataclass(frozen=True)
class ReportData:
    title: str
    period: str
    rows: list[dict]
    grand_total: int


class AbsenceReportService:
    """Tabular absence report: one row per class, in canonical class order.

    Rows are already zero-filled and sorted; renderers use them as is.
    """

    def __init__(self, absences: AbsenceService):
        self._absences = absences

    def build(self, period: Period) -> ReportData:
        buckets = self._absences.stats_for(period)

        rows = [
            {
                "class_id": b.class_id,
                "class_name": b.class_name,
                "total": b.total,
                "reasons": "; ".join(f"{label}: {count}" for label, count in b.reasons),
            }
            for b in buckets
        ]
        return ReportData(
            title=f"Отчёт по пропускам за {period.label()}",
            period=period.value(),
            rows=rows,
            grand_total=grand_total(buckets),
        )

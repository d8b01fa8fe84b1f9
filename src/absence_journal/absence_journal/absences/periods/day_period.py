from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ...common.datetime_utils import format_iso_date
from ...core.enums import PeriodKind
from .base import Period


@dataclass(frozen=True)
class DayPeriod(Period):
    """A single calendar day."""

    day: date
    kind = PeriodKind.DAY

    def contains(self, day: date) -> bool:
        return day == self.day

    def days(self) -> list[date]:
        return [self.day]

    def value(self) -> str:
        return format_iso_date(self.day)

    def label(self) -> str:
        return self.day.strftime("%d.%m.%Y")

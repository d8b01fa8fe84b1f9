from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from ...core.enums import PeriodKind
from ...core.exceptions import ValidationError
from .base import Period

MONTH_NAMES = (
    "Январь", "Февраль", "Март", "Апрель", "Май", "Июнь",
    "Июль", "Август", "Сентябрь", "Октябрь", "Ноябрь", "Декабрь",
)


@dataclass(frozen=True)
class MonthPeriod(Period):
    """A calendar month: every date whose year and month match."""

    year: int
    month: int
    kind = PeriodKind.MONTH

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Некорректный месяц: {self.month}")

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def days(self) -> list[date]:
        _, last = calendar.monthrange(self.year, self.month)
        return [date(self.year, self.month, d) for d in range(1, last + 1)]

    def value(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

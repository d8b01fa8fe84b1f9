from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import parse_iso_date, parse_year_month
from ..core.enums import PeriodKind
from ..core.exceptions import ValidationError
from .periods.base import Period
from .periods.day_period import DayPeriod
from .periods.month_period import MonthPeriod


@dataclass
class PeriodFactory:
    """Factory Pattern: build the report period a request asks for."""

    def for_day(self, day: date) -> Period:
        return DayPeriod(day)

    def for_month(self, year: int, month: int) -> Period:
        return MonthPeriod(int(year), int(month))

    def parse(self, kind: str, value: str) -> Period:
        try:
            period_kind = PeriodKind(str(kind).strip().lower())
        except ValueError:
            raise ValidationError(f"Неизвестный период: {kind!r}") from None

        if period_kind == PeriodKind.DAY:
            return self.for_day(parse_iso_date(value))
        year, month = parse_year_month(value)
        return self.for_month(year, month)

from __future__ import annotations

from datetime import date, datetime, timezone

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Некорректная дата: {value!r}") from None


def parse_year_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except (TypeError, ValueError):
        raise ValidationError(f"Некорректный месяц: {value!r}") from None
    return parsed.year, parsed.month


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def now_utc() -> datetime:
    """Current time (timezone-aware, UTC).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)

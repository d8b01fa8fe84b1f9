from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ...core.enums import PeriodKind


class Period(ABC):
    """Strategy Pattern: which dates a report covers and how it is titled."""

    kind: PeriodKind

    @abstractmethod
    def contains(self, day: date) -> bool:
        raise NotImplementedError

    @abstractmethod
    def days(self) -> list[date]:
        raise NotImplementedError

    @abstractmethod
    def value(self) -> str:
        """Canonical string form, accepted back by `PeriodFactory.parse`."""
        raise NotImplementedError

    @abstractmethod
    def label(self) -> str:
        raise NotImplementedError

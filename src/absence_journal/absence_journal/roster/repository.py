from __future__ import annotations

from typing import Protocol, Sequence

from .model import SchoolClass, Teacher


class RosterRepository(Protocol):
    """Read-only roster provider.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def list_classes(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def list_teachers(self) -> Sequence[Teacher]:
        raise NotImplementedError

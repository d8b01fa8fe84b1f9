"""Single source of truth for absence reasons.

Both entry validation and report labelling read `REASONS`; adding a reason
means adding one row here and one member to `AbsenceReason`.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from ..common.validators import blank_to_none
from ..core.constants import OTHER_REASON_FALLBACK_LABEL
from ..core.enums import AbsenceReason
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ReasonSpec:
    reason: AbsenceReason
    label: str
    requires_text: bool = False


REASONS: Mapping[AbsenceReason, ReasonSpec] = MappingProxyType(
    {
        AbsenceReason.ILLNESS: ReasonSpec(AbsenceReason.ILLNESS, "Болезнь"),
        AbsenceReason.STATEMENT: ReasonSpec(AbsenceReason.STATEMENT, "Заявление"),
        AbsenceReason.ABROAD: ReasonSpec(AbsenceReason.ABROAD, "За пределами РБ"),
        AbsenceReason.DISRESPECTFUL: ReasonSpec(AbsenceReason.DISRESPECTFUL, "Неуважительная"),
        AbsenceReason.OTHER: ReasonSpec(AbsenceReason.OTHER, OTHER_REASON_FALLBACK_LABEL, requires_text=True),
    }
)


def parse_reason(value) -> AbsenceReason:
    if isinstance(value, AbsenceReason):
        return value
    try:
        return AbsenceReason(str(value).strip())
    except ValueError:
        raise ValidationError(f"Неизвестная причина: {value!r}") from None


def normalize_other_reason(reason: AbsenceReason, other_reason: Optional[str]) -> Optional[str]:
    """Return the free text to store for `reason`.

    Free text is required (and trimmed) for reasons that need it and dropped
    for every other reason.
    """
    entry = REASONS[reason]
    if not entry.requires_text:
        return None
    text = blank_to_none(other_reason)
    if text is None:
        raise ValidationError("Укажите причину")
    return text


def reason_label(reason: AbsenceReason, other_reason: Optional[str] = None) -> str:
    entry = REASONS[reason]
    if entry.requires_text:
        return blank_to_none(other_reason) or entry.label
    return entry.label


def reason_rank(label: str) -> tuple:
    """Fixed labels first, in enum order; free-text labels after, by name.

    Labels differing only by case are ordered by their raw text.
    """
    for i, entry in enumerate(REASONS.values()):
        if not entry.requires_text and entry.label == label:
            return (0, i, "", "")
    return (1, 0, label.casefold(), label)

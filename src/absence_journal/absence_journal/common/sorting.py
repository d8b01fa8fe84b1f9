"""Canonical ordering of classes in every list and report."""

from __future__ import annotations

import re
from typing import Any, Optional

from ..core.constants import ORDER_SENTINEL

_DIGITS = re.compile(r"(\d+)")


def effective_order(order: Any) -> int:
    # bool is an int subclass but never a meaningful position
    if isinstance(order, bool) or not isinstance(order, (int, float)):
        return ORDER_SENTINEL
    return order


def _char_key(ch: str) -> tuple:
    # Russian collation: non-letters, then Cyrillic, then every other script
    if not ch.isalpha():
        return (0, ch)
    if "\u0400" <= ch <= "\u04ff":
        return (1, ch)
    return (2, ch)


def natural_name_key(name: Optional[str]) -> tuple:
    """Numeric-aware, case-insensitive key: "2А" < "10А", "1а" == "1А".

    Cyrillic "ё" is compared as "е" so it stays next to its base letter, and
    Cyrillic letters sort before Latin ones ("5Б" < "5A").
    """
    text = (name or "").casefold().replace("ё", "е")
    parts = _DIGITS.split(text)
    key = []
    for i, part in enumerate(parts):
        if i % 2:
            key.append((0, int(part), ()))
        elif part:
            key.append((1, 0, tuple(_char_key(ch) for ch in part)))
    return tuple(key)


def class_sort_key(order: Any, name: Optional[str]) -> tuple:
    return (effective_order(order), natural_name_key(name), name or "")

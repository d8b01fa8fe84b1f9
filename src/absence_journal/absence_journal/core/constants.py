"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_ABSENCES_PER_RECORD = 25

# Classes without a numeric `order` sort after every ordered class.
ORDER_SENTINEL = 999999

OTHER_REASON_FALLBACK_LABEL = "Другое"

UNKNOWN_AUTHOR_LABEL = "Неизвестно"
ADMIN_AUTHOR_LABEL = "Администратор"

SUMMARY_PREVIEW_NAMES = 3

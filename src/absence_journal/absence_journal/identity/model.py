from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller, as supplied by the external identity provider."""

    user_id: Optional[str]
    email: Optional[str]
    role: Role

    @property
    def can_edit(self) -> bool:
        return self.role.can_edit

    @property
    def audit_name(self) -> str:
        """Identifier stamped into `updated_by`."""
        return self.email or self.user_id or "unknown"

"""Explicit per-request context passed into every ledger operation."""

from dataclasses import dataclass
from uuid import UUID

from clinic_ledger.core.config import settings


@dataclass(frozen=True)
class RequestContext:
    """Selected site and acting user for one operation."""

    site_id: UUID | None
    username: str | None = None
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        """Whether the user may correct the cash drawer or delete records."""
        return self.role is not None and self.role in settings.ADMIN_ROLES

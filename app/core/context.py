from __future__ import annotations

from dataclasses import dataclass

from app.models.enums import UserRole


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, resolved once per request.

    Services receive this object instead of reading the session themselves,
    so every query is scoped to ``user_id`` explicitly.
    """

    user_id: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

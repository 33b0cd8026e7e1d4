"""Domain entity representing a hotel staff member."""

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    """Roles a user can hold inside a hotel."""

    SUPER_ADMIN = "SUPER_ADMIN"
    HOTEL_ADMIN = "HOTEL_ADMIN"
    DEPARTMENT_MANAGER = "DEPARTMENT_MANAGER"
    STAFF = "STAFF"


ADMIN_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.SUPER_ADMIN, UserRole.HOTEL_ADMIN}
)


@dataclass
class User:
    """Core attributes describing a notification recipient."""

    id: int | None
    hotel_id: int | None
    department_id: int | None
    name: str
    email: str | None
    role: UserRole
    telegram_chat_id: str | None = None
    is_active: bool = True

    def has_role(self, role: UserRole | str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role == UserRole(role)

    def is_admin(self) -> bool:
        """Return ``True`` when the user administers the whole hotel."""

        return self.role in ADMIN_ROLES


__all__ = ["ADMIN_ROLES", "User", "UserRole"]

"""Read-only access to notification recipients."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import or_, true
from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import ADMIN_ROLES, User, UserRole
from inventory_alerts.infrastructure.models import UserModel


class UserRepository:
    """Query users eligible to receive notifications."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def list_active(
        self,
        *,
        roles: Iterable[UserRole],
        hotel_id: int | None = None,
        department_id: int | None = None,
    ) -> Sequence[User]:
        """Return active users holding one of ``roles`` inside the given scope.

        When ``department_id`` is provided, administrators listed in ``roles``
        are returned regardless of their department.
        """

        role_values = {UserRole(role).value for role in roles}
        if not role_values:
            return []
        admin_values = {role.value for role in ADMIN_ROLES}

        query = (
            self.session.query(UserModel)
            .filter(UserModel.is_active == true())
            .filter(UserModel.role.in_(role_values))
        )
        if hotel_id is not None:
            query = query.filter(UserModel.hotel_id == hotel_id)
        if department_id is not None:
            query = query.filter(
                or_(
                    UserModel.department_id == department_id,
                    UserModel.role.in_(admin_values),
                )
            )

        query = query.order_by(UserModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            hotel_id=model.hotel_id,
            department_id=model.department_id,
            name=model.name,
            email=model.email,
            role=UserRole(model.role),
            telegram_chat_id=model.telegram_chat_id,
            is_active=bool(model.is_active),
        )


__all__ = ["UserRepository"]

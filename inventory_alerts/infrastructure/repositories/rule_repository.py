"""Persistence layer for notification rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import TypeVar

from sqlalchemy import or_, true
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from inventory_alerts.domain.entities import (
    NotificationChannel,
    NotificationRule,
    RuleType,
    UserRole,
)
from inventory_alerts.infrastructure.models import NotificationRuleModel
from inventory_alerts.utils import ensure_app_naive_datetime, now_in_app_timezone

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=Enum)


class RuleScopeConflictError(ValueError):
    """Raised when another rule already covers the same hotel, department and type."""

    def __init__(
        self, hotel_id: int | None, department_id: int | None, rule_type: RuleType
    ) -> None:
        super().__init__(
            f"A {rule_type.value} rule already exists for hotel {hotel_id} "
            f"and department {department_id}"
        )
        self.hotel_id = hotel_id
        self.department_id = department_id
        self.rule_type = rule_type


class RuleRepository:
    """Provide read and upsert operations for :class:`NotificationRule` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_enabled(self, rule_type: RuleType) -> Sequence[NotificationRule]:
        """Return enabled rules of ``rule_type``, hotel-wide rules first."""

        query = (
            self.session.query(NotificationRuleModel)
            .filter(NotificationRuleModel.enabled == true())
            .filter(NotificationRuleModel.type == rule_type.value)
        )
        return [self._to_entity(model) for model in self._by_specificity(query).all()]

    def list_for_hotel(self, hotel_id: int | None = None) -> Sequence[NotificationRule]:
        """Return enabled rules visible to ``hotel_id`` (including global ones)."""

        query = self.session.query(NotificationRuleModel).filter(
            NotificationRuleModel.enabled == true()
        )
        if hotel_id is not None:
            query = query.filter(
                or_(
                    NotificationRuleModel.hotel_id == hotel_id,
                    NotificationRuleModel.hotel_id.is_(None),
                )
            )
        return [self._to_entity(model) for model in self._by_specificity(query).all()]

    def get(self, rule_id: int) -> NotificationRule | None:
        model = self.session.get(NotificationRuleModel, rule_id)
        return self._to_entity(model) if model else None

    def find_by_scope(
        self,
        *,
        hotel_id: int | None,
        department_id: int | None,
        rule_type: RuleType,
    ) -> NotificationRule | None:
        query = self.session.query(NotificationRuleModel).filter(
            NotificationRuleModel.type == rule_type.value
        )
        query = query.filter(
            NotificationRuleModel.hotel_id.is_(None)
            if hotel_id is None
            else NotificationRuleModel.hotel_id == hotel_id
        )
        query = query.filter(
            NotificationRuleModel.department_id.is_(None)
            if department_id is None
            else NotificationRuleModel.department_id == department_id
        )
        model = query.order_by(NotificationRuleModel.id).first()
        return self._to_entity(model) if model else None

    def create(self, rule: NotificationRule) -> NotificationRule:
        model = NotificationRuleModel()
        self._apply_entity_to_model(model, rule)
        model.created_at = ensure_app_naive_datetime(
            rule.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self._commit_scope(rule)
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, rule: NotificationRule) -> NotificationRule:
        if rule.id is None:
            raise ValueError("Rule id is required for updates")
        model = self.session.get(NotificationRuleModel, rule.id)
        if model is None:
            msg = f"Rule with id {rule.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, rule)
        model.updated_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        self._commit_scope(rule)
        self.session.refresh(model)
        return self._to_entity(model)

    def _commit_scope(self, rule: NotificationRule) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise RuleScopeConflictError(rule.hotel_id, rule.department_id, rule.type) from exc

    @staticmethod
    def _by_specificity(query: Query) -> Query:
        return query.order_by(
            NotificationRuleModel.hotel_id.isnot(None),
            NotificationRuleModel.department_id.isnot(None),
            NotificationRuleModel.id,
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationRuleModel, rule: NotificationRule) -> None:
        model.hotel_id = rule.hotel_id
        model.department_id = rule.department_id
        model.type = rule.type.value
        model.name = rule.name
        model.description = rule.description
        model.warning_days = rule.warning_days
        model.critical_days = rule.critical_days
        model.channels = [channel.value for channel in rule.channels]
        model.recipient_roles = [role.value for role in rule.recipient_roles]
        model.enabled = rule.enabled

    @staticmethod
    def _to_entity(model: NotificationRuleModel) -> NotificationRule:
        return NotificationRule(
            id=model.id,
            hotel_id=model.hotel_id,
            department_id=model.department_id,
            type=RuleType(model.type),
            name=model.name,
            description=model.description,
            warning_days=model.warning_days,
            critical_days=model.critical_days,
            channels=_parse_members(NotificationChannel, model.channels, rule_id=model.id),
            recipient_roles=_parse_members(UserRole, model.recipient_roles, rule_id=model.id),
            enabled=bool(model.enabled),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


def _parse_members(enum_type: type[_E], raw: Iterable[str] | None, *, rule_id: int) -> list[_E]:
    members: list[_E] = []
    for value in raw or ():
        try:
            member = enum_type(value)
        except ValueError:
            logger.warning(
                "Ignoring unknown %s '%s' on rule %s", enum_type.__name__, value, rule_id
            )
            continue
        if member not in members:
            members.append(member)
    return members


__all__ = ["RuleRepository", "RuleScopeConflictError"]

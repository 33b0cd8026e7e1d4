"""Tests for the notification rule management use cases."""

import pytest

from inventory_alerts.application.use_cases.notification_rules import get_rules, upsert_rule
from inventory_alerts.domain.entities import (
    NotificationChannel,
    NotificationRule,
    RuleType,
    UserRole,
)
from inventory_alerts.infrastructure.repositories import RuleRepository, RuleScopeConflictError


def test_upsert_creates_rule_with_defaults(session):
    rule = upsert_rule(session, hotel_id=1, department_id=None, name="Kitchen expiry")

    assert rule.id is not None
    assert rule.type is RuleType.EXPIRY
    assert (rule.warning_days, rule.critical_days) == (7, 3)
    assert rule.channels == [NotificationChannel.APP]
    assert rule.recipient_roles == [UserRole.HOTEL_ADMIN, UserRole.DEPARTMENT_MANAGER]
    assert rule.enabled is True


def test_upsert_updates_rule_with_same_scope(session, make_department):
    kitchen = make_department()
    created = upsert_rule(session, hotel_id=1, department_id=kitchen.id, name="Kitchen")

    updated = upsert_rule(
        session,
        hotel_id=1,
        department_id=kitchen.id,
        name="Kitchen (strict)",
        warning_days=5,
        critical_days=1,
        channels=["app", "telegram", "telegram"],
        recipient_roles=["DEPARTMENT_MANAGER"],
    )

    assert updated.id == created.id
    assert updated.name == "Kitchen (strict)"
    assert (updated.warning_days, updated.critical_days) == (5, 1)
    assert updated.channels == [NotificationChannel.APP, NotificationChannel.TELEGRAM]
    assert updated.recipient_roles == [UserRole.DEPARTMENT_MANAGER]
    assert updated.updated_at is not None


def test_upsert_by_id(session):
    created = upsert_rule(session, hotel_id=1, department_id=None, name="Hotel")

    updated = upsert_rule(
        session, rule_id=created.id, hotel_id=1, department_id=None, name="Hotel", enabled=False
    )

    assert updated.id == created.id
    assert updated.enabled is False


def test_upsert_by_id_cannot_move_rule_into_a_taken_scope(session, make_department):
    kitchen = make_department()
    hotel_rule = upsert_rule(session, hotel_id=1, department_id=None, name="Hotel")
    kitchen_rule = upsert_rule(session, hotel_id=1, department_id=kitchen.id, name="Kitchen")

    with pytest.raises(RuleScopeConflictError):
        upsert_rule(
            session, rule_id=kitchen_rule.id, hotel_id=1, department_id=None, name="Moved"
        )

    rules = get_rules(session, hotel_id=1)
    assert [rule.id for rule in rules] == [hotel_rule.id, kitchen_rule.id]


def _global_rule(name: str) -> NotificationRule:
    return NotificationRule(
        id=None, hotel_id=None, department_id=None, type=RuleType.EXPIRY, name=name
    )


def test_database_rejects_second_rule_for_the_same_scope(session):
    repository = RuleRepository(session)
    repository.create(_global_rule("Global"))

    with pytest.raises(RuleScopeConflictError):
        repository.create(_global_rule("Global again"))

    assert len(get_rules(session)) == 1


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"warning_days": 2, "critical_days": 3}, "warning_days"),
        ({"critical_days": -1}, "negative"),
        ({"channels": []}, "channel"),
        ({"channels": ["sms"]}, "Unknown channel 'sms'"),
        ({"recipient_roles": []}, "recipient role"),
        ({"recipient_roles": ["CHEF"]}, "Unknown recipient role 'CHEF'"),
        ({"name": "   "}, "name"),
        ({"rule_id": 999}, "not found"),
    ],
)
def test_upsert_validation(session, overrides, message):
    values = {"hotel_id": 1, "department_id": None, "name": "Rule"}
    values.update(overrides)

    with pytest.raises(ValueError, match=message):
        upsert_rule(session, **values)


def test_get_rules_orders_by_specificity(session, make_rule, make_department):
    kitchen = make_department()
    bar = make_department(name="Bar")
    department_rule = make_rule(hotel_id=1, department_id=kitchen.id, name="Kitchen")
    hotel_rule = make_rule(hotel_id=1, name="Hotel")
    global_rule = make_rule(hotel_id=None, name="Global")
    make_rule(hotel_id=2, name="Other hotel")
    make_rule(hotel_id=1, department_id=bar.id, name="Disabled", enabled=False)

    rules = get_rules(session, hotel_id=1)

    assert [rule.id for rule in rules] == [global_rule.id, hotel_rule.id, department_rule.id]


def test_get_rules_without_hotel_returns_every_enabled_rule(session, make_rule):
    make_rule(hotel_id=1)
    make_rule(hotel_id=2)
    make_rule(hotel_id=None)

    assert len(get_rules(session)) == 3

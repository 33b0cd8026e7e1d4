"""Tests for the rule evaluation pass."""

from __future__ import annotations

from sqlalchemy.exc import OperationalError

from inventory_alerts.application.use_cases.notifications import build_fingerprint, evaluate_rules
from inventory_alerts.domain.entities import (
    NotificationChannel,
    NotificationStatus,
    NotificationType,
    Priority,
    UserRole,
)
from inventory_alerts.infrastructure.models import NotificationModel
from inventory_alerts.infrastructure.repositories import BatchRepository


def _notifications(session):
    return session.query(NotificationModel).order_by(NotificationModel.id).all()


def test_critical_batch_creates_pending_notification(session, today, now, make_rule, make_batch, make_user):
    make_rule(warning_days=7, critical_days=3)
    batch = make_batch(days_left=2, product_name="Yogurt", unit="pcs", quantity="6")
    manager = make_user(role=UserRole.DEPARTMENT_MANAGER)

    result = evaluate_rules(session, today=today, now=now)

    assert (result.events, result.created, result.duplicates, result.failed_rules) == (1, 1, 0, 0)
    [notification] = _notifications(session)
    assert notification.user_id == manager.id
    assert notification.batch_id == batch.id
    assert notification.type == NotificationType.EXPIRY_CRITICAL.value
    assert notification.priority == int(Priority.HIGH)
    assert notification.status == NotificationStatus.PENDING.value
    assert notification.title == "Critical expiry: Yogurt"
    assert "expires in 2 days" in notification.message
    assert notification.channels == ["app"]
    assert notification.payload["days_left"] == 2
    assert notification.fingerprint == build_fingerprint(
        batch.id, manager.id, NotificationChannel.APP, today
    )


def test_second_run_on_same_day_only_counts_duplicates(session, today, now, make_rule, make_batch, make_user):
    make_rule()
    make_batch(days_left=5)
    make_user()

    first = evaluate_rules(session, today=today, now=now)
    second = evaluate_rules(session, today=today, now=now.replace(hour=15))

    assert first.created == 1
    assert second.created == 0
    assert second.duplicates == 1
    assert len(_notifications(session)) == 1


def test_batches_outside_warning_window_and_inactive_batches_are_ignored(
    session, today, now, make_rule, make_batch, make_user
):
    make_rule(warning_days=7, critical_days=3)
    make_batch(days_left=8)
    make_batch(days_left=1, status="written_off")
    make_user()

    result = evaluate_rules(session, today=today, now=now)

    assert result.events == 0
    assert _notifications(session) == []


def test_expired_batch_is_urgent(session, today, now, make_rule, make_batch, make_user):
    make_rule()
    make_batch(days_left=-2)
    make_user()

    evaluate_rules(session, today=today, now=now)

    [notification] = _notifications(session)
    assert notification.type == NotificationType.EXPIRED.value
    assert notification.priority == int(Priority.URGENT)
    assert "expired 2 days ago" in notification.message


def test_one_record_per_recipient_and_channel(session, today, now, make_rule, make_batch, make_user):
    make_rule(channels=("app", "telegram"))
    make_batch(days_left=4)
    make_user(name="Admin", role=UserRole.HOTEL_ADMIN)
    make_user(name="Manager", role=UserRole.DEPARTMENT_MANAGER)
    make_user(name="Staff", role=UserRole.STAFF)

    result = evaluate_rules(session, today=today, now=now)

    assert result.events == 1
    assert result.created == 4
    pairs = {(n.user_id, tuple(n.channels)) for n in _notifications(session)}
    assert len(pairs) == 4


def test_rule_without_recipients_creates_nothing(session, today, now, make_rule, make_batch):
    make_rule()
    make_batch(days_left=1)

    result = evaluate_rules(session, today=today, now=now)

    assert result.events == 1
    assert result.created == 0
    assert _notifications(session) == []


def test_failed_notification_does_not_block_a_new_one(
    session, today, now, make_rule, make_batch, make_user, make_notification
):
    make_rule()
    batch = make_batch(days_left=5)
    user = make_user()
    make_notification(
        user_id=user.id,
        batch_id=batch.id,
        status=NotificationStatus.FAILED,
        fingerprint=build_fingerprint(batch.id, user.id, NotificationChannel.APP, today),
    )

    result = evaluate_rules(session, today=today, now=now)

    assert result.created == 1
    assert result.duplicates == 0


def test_failing_rule_does_not_abort_the_pass(
    session, today, now, monkeypatch, make_rule, make_batch, make_user
):
    make_rule(hotel_id=2, name="Broken")
    make_rule(hotel_id=1, name="Healthy")
    make_batch(hotel_id=1, days_left=3)
    make_user(hotel_id=1)

    original = BatchRepository.list_near_expiry

    def flaky_list_near_expiry(self, **kwargs):
        if kwargs.get("hotel_id") == 2:
            raise OperationalError("SELECT batch", {}, Exception("connection lost"))
        return original(self, **kwargs)

    monkeypatch.setattr(BatchRepository, "list_near_expiry", flaky_list_near_expiry)

    result = evaluate_rules(session, today=today, now=now)

    assert result.failed_rules == 1
    assert result.created == 1


def test_hotel_wide_rule_alerts_users_of_the_batch_hotel(
    session, today, now, make_rule, make_batch, make_user
):
    make_rule(hotel_id=None)
    first_batch = make_batch(hotel_id=1, days_left=2)
    second_batch = make_batch(hotel_id=2, days_left=2)
    first_user = make_user(hotel_id=1)
    second_user = make_user(hotel_id=2)

    result = evaluate_rules(session, today=today, now=now)

    assert result.created == 2
    delivered_to = {(n.batch_id, n.user_id) for n in _notifications(session)}
    assert delivered_to == {(first_batch.id, first_user.id), (second_batch.id, second_user.id)}


def test_disabled_and_non_expiry_rules_are_skipped(session, today, now, make_rule, make_batch, make_user):
    make_rule(enabled=False)
    make_rule(rule_type="low_stock")
    make_batch(days_left=1)
    make_user()

    result = evaluate_rules(session, today=today, now=now)

    assert result.events == 0
    assert result.created == 0

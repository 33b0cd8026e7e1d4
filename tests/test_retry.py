"""Tests for the retry backoff policy."""

from datetime import datetime, timedelta

import pytest

from inventory_alerts.application.use_cases.notifications import RetryScheduler
from inventory_alerts.config import get_settings

NOW = datetime(2026, 3, 10, 9, 0)


def test_backoff_follows_schedule_until_giving_up():
    scheduler = RetryScheduler(max_retries=3, backoff_hours=(2, 4, 8))

    first = scheduler.next_attempt(0, NOW)
    second = scheduler.next_attempt(1, NOW)
    third = scheduler.next_attempt(2, NOW)

    assert (first.retry_count, first.give_up, first.next_retry_at) == (
        1,
        False,
        NOW + timedelta(hours=2),
    )
    assert (second.retry_count, second.give_up, second.next_retry_at) == (
        2,
        False,
        NOW + timedelta(hours=4),
    )
    assert (third.retry_count, third.give_up, third.next_retry_at) == (3, True, None)


def test_last_backoff_value_is_reused():
    scheduler = RetryScheduler(max_retries=10, backoff_hours=(1, 3))

    assert scheduler.next_attempt(5, NOW).next_retry_at == NOW + timedelta(hours=3)


@pytest.mark.parametrize(
    ("max_retries", "backoff_hours"),
    [(0, (2,)), (3, ()), (3, (2, -1))],
)
def test_invalid_configuration_is_rejected(max_retries, backoff_hours):
    with pytest.raises(ValueError):
        RetryScheduler(max_retries=max_retries, backoff_hours=backoff_hours)


def test_from_settings_uses_configured_values():
    settings = get_settings().model_copy(
        update={"notification_max_retries": 5, "notification_retry_hours": [1, 2]}
    )

    scheduler = RetryScheduler.from_settings(settings)

    assert scheduler.max_retries == 5
    assert scheduler.backoff_hours == (1, 2)

"""Tests for the cron entry point running the notification passes."""

from __future__ import annotations

import pytest

from inventory_alerts.domain.entities import NotificationStatus
from inventory_alerts.infrastructure.models import NotificationModel
from scripts import run_notification_jobs


@pytest.fixture(autouse=True)
def _use_test_database(monkeypatch, engine, session_factory):
    monkeypatch.setattr(run_notification_jobs, "SessionLocal", session_factory)
    monkeypatch.setattr(run_notification_jobs, "initialize_database", lambda: None)


def test_all_runs_evaluation_then_queue(capsys, session, make_rule, make_batch, make_user):
    make_rule()
    make_batch(days_left=1)
    make_user()

    run_notification_jobs.main(["all", "--today", "2026-03-10"])

    output = capsys.readouterr().out
    assert "created=1" in output
    assert "delivered=1 failed=0" in output
    [notification] = session.query(NotificationModel).all()
    assert notification.status == NotificationStatus.DELIVERED.value


def test_evaluate_only_leaves_records_pending(capsys, session, make_rule, make_batch, make_user):
    make_rule()
    make_batch(days_left=1)
    make_user()

    run_notification_jobs.main(["evaluate", "--today", "2026-03-10"])

    assert "Queue:" not in capsys.readouterr().out
    [notification] = session.query(NotificationModel).all()
    assert notification.status == NotificationStatus.PENDING.value


def test_unknown_job_is_rejected():
    with pytest.raises(SystemExit):
        run_notification_jobs.main(["cleanup"])

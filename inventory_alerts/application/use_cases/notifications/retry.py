"""Backoff policy applied to failed dispatches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from inventory_alerts.config import Settings, get_settings

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_HOURS: tuple[int, ...] = (2, 4, 8)


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of a failed dispatch."""

    retry_count: int
    give_up: bool
    next_retry_at: datetime | None


class RetryScheduler:
    """Compute the next attempt of a notification after a failed dispatch.

    The ``n``-th failure schedules a new attempt ``backoff_hours[n - 1]`` hours
    later; the last value is reused once the schedule runs out. A record is
    given up on once ``max_retries`` failures have been counted.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_hours: Sequence[int] = DEFAULT_BACKOFF_HOURS,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if not backoff_hours:
            raise ValueError("backoff_hours must contain at least one value")
        if any(hours < 0 for hours in backoff_hours):
            raise ValueError("backoff_hours cannot contain negative values")
        self.max_retries = max_retries
        self.backoff_hours = tuple(backoff_hours)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RetryScheduler":
        settings = settings or get_settings()
        return cls(
            max_retries=settings.notification_max_retries,
            backoff_hours=settings.notification_retry_hours,
        )

    def delay_for(self, retry_count: int) -> timedelta:
        index = min(max(retry_count, 1), len(self.backoff_hours)) - 1
        return timedelta(hours=self.backoff_hours[index])

    def next_attempt(self, retry_count: int, now: datetime) -> RetryDecision:
        """Return the decision after one more failure of a record.

        ``retry_count`` is the number of failures recorded before this one.
        """

        attempts = retry_count + 1
        if attempts >= self.max_retries:
            return RetryDecision(retry_count=attempts, give_up=True, next_retry_at=None)
        return RetryDecision(
            retry_count=attempts,
            give_up=False,
            next_retry_at=now + self.delay_for(attempts),
        )


__all__ = ["RetryDecision", "RetryScheduler"]

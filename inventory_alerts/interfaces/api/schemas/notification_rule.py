"""Schemas for notification rule endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from inventory_alerts.domain.entities import (
    DEFAULT_CRITICAL_DAYS,
    DEFAULT_RECIPIENT_ROLES,
    DEFAULT_RULE_CHANNELS,
    DEFAULT_WARNING_DAYS,
    NotificationChannel,
    RuleType,
    UserRole,
)


class NotificationRuleUpsert(BaseModel):
    """Payload used to create or update a notification rule."""

    model_config = ConfigDict(extra="forbid")

    id: int | None = None
    hotel_id: int | None = None
    department_id: int | None = None
    type: RuleType = RuleType.EXPIRY
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    warning_days: int = Field(default=DEFAULT_WARNING_DAYS, ge=0)
    critical_days: int = Field(default=DEFAULT_CRITICAL_DAYS, ge=0)
    channels: list[NotificationChannel] = Field(
        default_factory=lambda: list(DEFAULT_RULE_CHANNELS), min_length=1
    )
    recipient_roles: list[UserRole] = Field(
        default_factory=lambda: list(DEFAULT_RECIPIENT_ROLES), min_length=1
    )
    enabled: bool = True

    @model_validator(mode="after")
    def _check_thresholds(self) -> "NotificationRuleUpsert":
        if self.critical_days > self.warning_days:
            raise ValueError("critical_days cannot exceed warning_days")
        return self


class NotificationRuleRead(BaseModel):
    """Representation of a stored notification rule."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    hotel_id: int | None
    department_id: int | None
    type: RuleType
    name: str
    description: str | None
    warning_days: int
    critical_days: int
    channels: list[NotificationChannel]
    recipient_roles: list[UserRole]
    enabled: bool
    created_at: datetime | None
    updated_at: datetime | None


__all__ = ["NotificationRuleRead", "NotificationRuleUpsert"]

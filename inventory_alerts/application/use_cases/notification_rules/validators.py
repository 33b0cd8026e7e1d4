"""Validation helpers for notification rule use cases."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TypeVar

from inventory_alerts.domain.entities import NotificationChannel, RuleType, UserRole

_E = TypeVar("_E", bound=Enum)


def ensure_valid_thresholds(*, warning_days: int, critical_days: int) -> None:
    """Raise ``ValueError`` unless ``0 <= critical_days <= warning_days``."""

    if critical_days < 0:
        raise ValueError("critical_days cannot be negative")
    if warning_days < critical_days:
        raise ValueError("warning_days must be greater than or equal to critical_days")


def parse_rule_type(value: RuleType | str) -> RuleType:
    return _parse_member(RuleType, value, label="rule type")


def parse_channels(values: Iterable[NotificationChannel | str]) -> list[NotificationChannel]:
    channels = _parse_members(NotificationChannel, values, label="channel")
    if not channels:
        raise ValueError("At least one notification channel is required")
    return channels


def parse_recipient_roles(values: Iterable[UserRole | str]) -> list[UserRole]:
    roles = _parse_members(UserRole, values, label="recipient role")
    if not roles:
        raise ValueError("At least one recipient role is required")
    return roles


def ensure_rule_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Rule name cannot be empty")
    return cleaned


def _parse_members(
    enum_type: type[_E], values: Iterable[_E | str], *, label: str
) -> list[_E]:
    members: list[_E] = []
    for value in values or ():
        member = _parse_member(enum_type, value, label=label)
        if member not in members:
            members.append(member)
    return members


def _parse_member(enum_type: type[_E], value: _E | str, *, label: str) -> _E:
    try:
        return enum_type(value)
    except ValueError as exc:
        raise ValueError(f"Unknown {label} '{value}'") from exc


__all__ = [
    "ensure_rule_name",
    "ensure_valid_thresholds",
    "parse_channels",
    "parse_recipient_roles",
    "parse_rule_type",
]

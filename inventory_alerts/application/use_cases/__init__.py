"""Aggregate application use cases."""

from .notification_rules import get_rules, upsert_rule
from .notifications import evaluate_rules, get_stats, process_queue

__all__ = [
    "evaluate_rules",
    "get_rules",
    "get_stats",
    "process_queue",
    "upsert_rule",
]

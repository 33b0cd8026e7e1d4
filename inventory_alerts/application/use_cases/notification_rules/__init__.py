"""Use cases for managing notification rules."""

from .get_rules import get_rules
from .upsert_rule import upsert_rule

__all__ = ["get_rules", "upsert_rule"]

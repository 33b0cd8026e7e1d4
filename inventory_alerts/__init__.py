"""Expiry notification engine for hotel food inventory."""

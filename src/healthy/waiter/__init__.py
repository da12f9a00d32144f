"""Waiter package for healthy-sdk.

Provides the coordinator that waits for a group of checks.
"""
from __future__ import annotations

from healthy.waiter.waiter import Waiter, wait_for

__all__ = [
    "Waiter",
    "wait_for",
]

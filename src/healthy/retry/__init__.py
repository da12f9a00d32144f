"""Retry package for healthy-sdk.

Provides the backoff policy and the per-check retry loop.
"""
from __future__ import annotations

from healthy.retry.backoff import next_delay
from healthy.retry.loop import CheckOutcome, ObserverCallback, Result, run_check

__all__ = [
    "next_delay",
    "CheckOutcome",
    "ObserverCallback",
    "Result",
    "run_check",
]

"""Default configuration constants for healthy-sdk.

``DEFAULT_CONFIG`` provides a baseline ``WaitConfig``: a 30 second overall
deadline, one second between attempts and up to 100 ms of jitter so that
several checks waiting on the same dependency do not retry in lock-step.
It is the bottom layer of ``ConfigLoader.resolve()``; file, environment
and flag settings are merged on top of it.

Shipped in this module
----------------------
- DEFAULT_CONFIG   — ``WaitConfig`` instance with sensible defaults
"""
from __future__ import annotations

from healthy.schema.config import (
    DEFAULT_DELAY,
    DEFAULT_JITTER,
    DEFAULT_TIMEOUT,
    WaitConfig,
)

DEFAULT_CONFIG: WaitConfig = WaitConfig(
    timeout=DEFAULT_TIMEOUT,
    delay=DEFAULT_DELAY,
    jitter=DEFAULT_JITTER,
)
"""Baseline ``WaitConfig`` used when no file or env config is present."""

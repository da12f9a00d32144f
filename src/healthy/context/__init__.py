"""Context package for healthy-sdk.

Provides the shared cancellation scope and the per-loop metadata carrier.
"""
from __future__ import annotations

from healthy.context.metadata import ATTEMPT_KEY, CheckContext, Metadata
from healthy.context.scope import CancelScope

__all__ = [
    "ATTEMPT_KEY",
    "CancelScope",
    "CheckContext",
    "Metadata",
]

"""Schema package for healthy-sdk.

Exports the complete public schema surface: errors, durations and the
validated wait configuration model.
"""
from __future__ import annotations

from healthy.schema.errors import (
    CheckError,
    ConfigurationError,
    DeadlineExceededError,
    ErrorSeverity,
    FatalError,
    HealthyError,
    ScopeCancelledError,
    UnexpectedStatusError,
    WaitCancelledError,
    WaitTimeoutError,
    fatal,
    is_cancelled,
    is_fatal,
    is_timeout,
)
from healthy.schema.duration import format_duration, parse_duration
from healthy.schema.config import WaitConfig, join_configs

__all__ = [
    # Errors
    "ErrorSeverity",
    "HealthyError",
    "ConfigurationError",
    "CheckError",
    "UnexpectedStatusError",
    "FatalError",
    "ScopeCancelledError",
    "DeadlineExceededError",
    "WaitCancelledError",
    "WaitTimeoutError",
    "fatal",
    "is_fatal",
    "is_timeout",
    "is_cancelled",
    # Durations
    "parse_duration",
    "format_duration",
    # Config
    "WaitConfig",
    "join_configs",
]

"""healthy-sdk — wait for dependencies to become healthy.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick-start
-----------
>>> import healthy
>>> healthy.__version__
'0.1.0'

>>> from healthy import Waiter, check_func
>>> attempts = []
>>> waiter = Waiter(check_func(lambda ctx: None, type="noop"))
>>> waiter.wait_sync(callback=lambda ctx, result: attempts.append(result.attempt))
>>> attempts
[1]
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------
from healthy.schema.config import WaitConfig, join_configs
from healthy.schema.duration import format_duration, parse_duration
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

# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------
from healthy.context.metadata import ATTEMPT_KEY, CheckContext, Metadata
from healthy.context.scope import CancelScope

# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------
from healthy.checks.base import Check, CheckFunc, MetadataCheck, check_func
from healthy.checks.file import FileCheck
from healthy.checks.http import HTTPCheck
from healthy.checks.tcp import TCPCheck

# ---------------------------------------------------------------------------
# Retry engine
# ---------------------------------------------------------------------------
from healthy.retry.backoff import next_delay
from healthy.retry.loop import CheckOutcome, ObserverCallback, Result, run_check
from healthy.waiter.waiter import Waiter, wait_for

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
from healthy.config.defaults import DEFAULT_CONFIG
from healthy.config.loader import ConfigLoader
from healthy.config.schema import validate_config

__all__ = [
    "__version__",
    # schema — config
    "WaitConfig",
    "join_configs",
    "parse_duration",
    "format_duration",
    # schema — errors
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
    # context
    "ATTEMPT_KEY",
    "CancelScope",
    "CheckContext",
    "Metadata",
    # checks
    "Check",
    "MetadataCheck",
    "CheckFunc",
    "check_func",
    "FileCheck",
    "TCPCheck",
    "HTTPCheck",
    # retry engine
    "next_delay",
    "CheckOutcome",
    "ObserverCallback",
    "Result",
    "run_check",
    "Waiter",
    "wait_for",
    # config
    "DEFAULT_CONFIG",
    "ConfigLoader",
    "validate_config",
]

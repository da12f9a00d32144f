"""Per-check retry loop.

Drives exactly one check to a terminal outcome under a shared
:class:`~healthy.context.scope.CancelScope`.

States
------
ATTEMPTING : the check is being evaluated or the loop is backing off.
SUCCESS    : the check returned without raising.
FATAL      : the check raised a fatal error; no further attempts, no delay.
CANCELLED  : the scope fired while evaluating or backing off.

Valid transitions
-----------------
ATTEMPTING → ATTEMPTING (retryable failure), SUCCESS, FATAL, CANCELLED

Both suspension points (check evaluation and backoff) race the scope, so a
cancelled scope stops the loop within one event-loop iteration.  The
observer callback runs after every completed attempt and is awaited before
the loop moves on, so one check's observations never overlap.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from healthy.checks.base import Check, MetadataCheck, invoke
from healthy.context.metadata import ATTEMPT_KEY, CheckContext, Metadata
from healthy.context.scope import CancelScope
from healthy.retry.backoff import next_delay
from healthy.schema.config import WaitConfig
from healthy.schema.errors import ScopeCancelledError, WaitCancelledError, is_fatal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class CheckOutcome(str, Enum):
    """States of the per-check retry state machine."""

    ATTEMPTING = "attempting"
    SUCCESS = "success"
    FATAL = "fatal"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Result:
    """Observation of a single completed attempt.

    Attributes
    ----------
    attempt:
        1-based attempt number for this check.
    metadata:
        Read-only copy of the check's descriptive metadata, captured once
        when the loop started.
    error:
        The exception raised by the check, ``None`` on success.
    """

    attempt: int
    metadata: Mapping[str, object]
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


ObserverCallback = Callable[[CheckContext, Result], object]
"""Callback signature: ``(ctx, result) -> None``; may return an awaitable."""


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------


async def run_check(check: Check, scope: CancelScope, config: WaitConfig) -> CheckOutcome:
    """Retry *check* until it succeeds, fails fatally, or *scope* fires.

    Parameters
    ----------
    check:
        The check to drive.
    scope:
        Shared cancellation scope.  Only observed, never cancelled here.
    config:
        Resolved configuration supplying delay, jitter and callback.

    Returns
    -------
    CheckOutcome
        Always ``SUCCESS``; every other terminal state raises.

    Raises
    ------
    FatalError
        (or any exception wrapping one) as raised by the check.
    WaitCancelledError
        When *scope* is cancelled; :class:`~healthy.schema.errors.WaitTimeoutError`
        if the cause was a deadline.  Carries the last check error.
    """
    info: Mapping[str, object] = MappingProxyType({})
    if isinstance(check, MetadataCheck):
        info = MappingProxyType(dict(check.metadata()))
    bag = Metadata(info)
    label = info.get("target", check)

    attempt = 1
    last_error: BaseException | None = None

    while True:
        bag.set(ATTEMPT_KEY, attempt)
        ctx = CheckContext(scope=scope, metadata=bag)

        completed, error = await _evaluate(check, ctx)
        if not completed:
            logger.warning("Check %s cancelled during attempt %d", label, attempt)
            raise _cancelled(scope, last_error)

        await _notify(config.callback, ctx, Result(attempt=attempt, metadata=info, error=error))

        if error is None:
            logger.info("Check %s healthy after %d attempt(s)", label, attempt)
            return CheckOutcome.SUCCESS

        if is_fatal(error):
            logger.warning("Check %s failed fatally on attempt %d: %s", label, attempt, error)
            raise error

        last_error = error
        delay = next_delay(config.delay, config.jitter)
        logger.debug(
            "Check %s attempt %d failed (%s); retrying in %.3fs", label, attempt, error, delay
        )
        if await scope.wait(delay):
            logger.warning("Check %s cancelled after %d attempt(s): %s", label, attempt, scope.cause)
            raise _cancelled(scope, last_error)
        attempt += 1


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _cancelled(scope: CancelScope, last_error: BaseException | None) -> WaitCancelledError:
    cause = scope.cause if scope.cause is not None else ScopeCancelledError()
    return WaitCancelledError.for_cause(cause, last_error)


async def _call(check: Check, ctx: CheckContext) -> None:
    await invoke(check.healthy, ctx)


def _consume(task: asyncio.Future[None]) -> None:
    # abandoned evaluations must not log "exception was never retrieved"
    if not task.cancelled():
        task.exception()


def _abandon(task: asyncio.Future[None]) -> None:
    if not task.done():
        task.cancel()
    task.add_done_callback(_consume)


async def _evaluate(
    check: Check, ctx: CheckContext
) -> tuple[bool, BaseException | None]:
    """Run one attempt racing the scope.

    Returns ``(completed, error)``.  ``completed`` is ``False`` when the
    scope fired first; the attempt is then cancelled and abandoned.
    Exceptions that are not ``Exception`` subclasses propagate.
    """
    if ctx.scope.cancelled:
        return False, None

    task = asyncio.ensure_future(_call(check, ctx))
    waiter = asyncio.ensure_future(ctx.scope.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except BaseException:
        _abandon(task)
        raise
    finally:
        waiter.cancel()

    if not task.done():
        _abandon(task)
        return False, None
    try:
        task.result()
    except Exception as exc:
        return True, exc
    return True, None


async def _notify(callback: ObserverCallback | None, ctx: CheckContext, result: Result) -> None:
    """Invoke *callback*, absorbing its exceptions.

    Async callbacks are awaited; a failing observer is logged at ERROR level
    and never changes the outcome of the attempt.
    """
    if callback is None:
        return
    try:
        outcome = callback(ctx, result)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception:
        logger.exception(
            "Unhandled exception in wait callback %r (attempt %d)", callback, result.attempt
        )

"""Waiter: run every check's retry loop concurrently and join the outcomes.

The waiter is a fan-out/fan-in supervisor.  It derives one shared
:class:`~healthy.context.scope.CancelScope` per wait (a child of the
caller's scope when one is configured, carrying the configured deadline),
starts one task per check, and waits for *all* of them.  The first task to
end fatally or cancelled cancels the shared scope so that its siblings stop
promptly; once every task has finished, that first error is raised and the
rest are discarded.

Shipped in this module
----------------------
- Waiter     — owns a fixed set of checks and waits for all of them
- wait_for   — single-check convenience coroutine
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from healthy.checks.base import Check
from healthy.context.scope import CancelScope
from healthy.retry.loop import run_check
from healthy.schema.config import WaitConfig

logger = logging.getLogger(__name__)


class Waiter:
    """Wait until every check reports healthy.

    Parameters
    ----------
    *checks:
        Checks to wait for.  Order is preserved in :attr:`checks`, but the
        checks run concurrently.

    Raises
    ------
    TypeError
        If an argument does not satisfy the :class:`~healthy.checks.base.Check`
        protocol.

    Examples
    --------
    ::

        waiter = Waiter(TCPCheck("db:5432"), HTTPCheck("http://api/healthz"))
        await waiter.wait(timeout="60s", delay="500ms")
    """

    def __init__(self, *checks: Check) -> None:
        for check in checks:
            if not isinstance(check, Check):
                raise TypeError(f"{check!r} does not implement healthy(ctx)")
        self._checks: tuple[Check, ...] = checks

    @property
    def checks(self) -> tuple[Check, ...]:
        """Return the checks in insertion order."""
        return self._checks

    def __len__(self) -> int:
        return len(self._checks)

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    async def wait(self, config: WaitConfig | None = None, **overrides: Any) -> None:  # noqa: ANN401
        """Retry all checks until they are healthy.

        Parameters
        ----------
        config:
            Base configuration; defaults to ``WaitConfig()``.
        **overrides:
            Individual ``WaitConfig`` fields (``timeout``, ``delay``,
            ``jitter``, ``scope``, ``callback``) applied on top of *config*.

        Raises
        ------
        FatalError
            A check raised a fatal error (possibly wrapped).
        WaitCancelledError
            The scope was cancelled by the caller; ``WaitTimeoutError`` when
            the deadline expired.

        A check that itself raises ``asyncio.CancelledError`` (or any other
        ``BaseException``) is not treated as a failed attempt: the remaining
        checks are cancelled and the exception propagates unchanged.
        """
        if not self._checks:
            logger.debug("No checks to wait for")
            return

        resolved = _resolve(config, overrides)
        scope = _open_scope(resolved)
        logger.debug(
            "Waiting for %d check(s): timeout=%ss delay=%ss jitter=%ss",
            len(self._checks),
            resolved.timeout,
            resolved.delay,
            resolved.jitter,
        )

        tasks = [
            asyncio.create_task(run_check(check, scope, resolved), name=f"healthy-check-{index}")
            for index, check in enumerate(self._checks)
        ]
        first_error: Exception | None = None
        try:
            for next_done in asyncio.as_completed(tasks):
                try:
                    await next_done
                except Exception as exc:
                    if first_error is None:
                        first_error = exc
                        scope.cancel(exc)
        except BaseException:
            scope.cancel()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        finally:
            scope.close()

        if first_error is not None:
            logger.warning("Wait failed: %s", first_error)
            raise first_error
        logger.info("All %d check(s) healthy", len(self._checks))

    def wait_sync(self, config: WaitConfig | None = None, **overrides: Any) -> None:  # noqa: ANN401
        """Synchronous wrapper around :meth:`wait` for scripts without a loop.

        Must not be called from inside a running event loop.  ``asyncio.run``
        joins the default executor on exit, so a synchronous check that is
        still blocked when the wait ends delays the return until it finishes.
        """
        asyncio.run(self.wait(config, **overrides))

    def __repr__(self) -> str:
        return f"Waiter(checks={list(self._checks)!r})"


async def wait_for(
    check: Check | None,
    config: WaitConfig | None = None,
    **overrides: Any,  # noqa: ANN401
) -> None:
    """Wait for a single check; ``None`` returns immediately.

    Equivalent to ``await Waiter(check).wait(config, **overrides)``.
    """
    if check is None:
        return
    await Waiter(check).wait(config, **overrides)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _resolve(config: WaitConfig | None, overrides: dict[str, Any]) -> WaitConfig:
    resolved = config if config is not None else WaitConfig()
    return resolved.with_overrides(**overrides)


def _open_scope(config: WaitConfig) -> CancelScope:
    timeout = config.timeout if config.timeout > 0 else None
    if config.scope is not None:
        return config.scope.child(timeout=timeout)
    return CancelScope(timeout=timeout)

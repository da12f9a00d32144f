"""Cancellable scope shared by every retry loop of a wait.

A :class:`CancelScope` is a one-shot cancellation signal with an optional
deadline.  Scopes form a tree: cancelling a parent cancels every child with
the parent's cause, while cancelling a child leaves the parent untouched.
The waiter derives one child scope per ``wait`` call from the caller's scope
(if any) and arms the configured timeout on it.

Shipped in this module
----------------------
- CancelScope   — cancellation token with cause, deadline and child scopes
"""
from __future__ import annotations

import asyncio
import logging

from healthy.schema.errors import DeadlineExceededError, ScopeCancelledError

logger = logging.getLogger(__name__)


class CancelScope:
    """One-shot cancellation signal with an optional deadline.

    Parameters
    ----------
    parent:
        Scope whose cancellation also cancels this one.
    timeout:
        Seconds until the scope cancels itself with
        :class:`~healthy.schema.errors.DeadlineExceededError`.  ``None`` or a
        non-positive value arms no deadline.  Arming a deadline requires a
        running event loop.

    A scope without a timeout may be created anywhere, including outside an
    event loop; :meth:`cancel` must be called from the loop thread.

    Examples
    --------
    >>> scope = CancelScope()
    >>> scope.cancelled
    False
    >>> scope.cancel()
    >>> scope.cancelled, type(scope.cause).__name__
    (True, 'ScopeCancelledError')
    """

    def __init__(
        self,
        parent: CancelScope | None = None,
        timeout: float | None = None,
    ) -> None:
        self._event = asyncio.Event()
        self._cause: BaseException | None = None
        self._parent = parent
        self._children: set[CancelScope] = set()
        self._timer: asyncio.TimerHandle | None = None
        self._deadline: float | None = None

        if parent is not None:
            if parent.cancelled:
                self.cancel(parent.cause)
                return
            parent._children.add(self)

        if timeout is not None and timeout > 0:
            loop = asyncio.get_running_loop()
            self._deadline = loop.time() + timeout
            if parent is not None and parent.deadline is not None:
                self._deadline = min(self._deadline, parent.deadline)
            self._timer = loop.call_at(self._deadline, self._expire, timeout)
        elif parent is not None:
            self._deadline = parent.deadline

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once the scope has been cancelled."""
        return self._event.is_set()

    @property
    def cause(self) -> BaseException | None:
        """Return the exception recorded by the first :meth:`cancel` call."""
        return self._cause

    @property
    def deadline(self) -> float | None:
        """Return the deadline in event-loop time, or ``None``."""
        return self._deadline

    def remaining(self) -> float | None:
        """Return seconds left before the deadline, ``None`` if there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - asyncio.get_running_loop().time())

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel(self, cause: BaseException | None = None) -> None:
        """Cancel this scope and all of its children.

        Only the first call records a cause; later calls are no-ops.
        """
        if self._event.is_set():
            return
        self._cause = cause if cause is not None else ScopeCancelledError()
        self._event.set()
        self._disarm()
        logger.debug("Scope cancelled: %s", self._cause)

        children = list(self._children)
        self._children.clear()
        for child in children:
            child.cancel(self._cause)

    def _expire(self, timeout: float) -> None:
        self._timer = None
        self.cancel(DeadlineExceededError(timeout))

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def wait(self, timeout: float | None = None) -> bool:
        """Suspend until the scope is cancelled or *timeout* seconds pass.

        Returns
        -------
        bool
            ``True`` if the scope was cancelled, ``False`` on timeout.
        """
        if self._event.is_set():
            return True
        if timeout is None:
            await self._event.wait()
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout)
        except asyncio.TimeoutError:
            return self._event.is_set()
        return True

    # ------------------------------------------------------------------
    # Tree management
    # ------------------------------------------------------------------

    def child(self, timeout: float | None = None) -> CancelScope:
        """Derive a child scope, optionally with its own deadline."""
        return CancelScope(parent=self, timeout=timeout)

    def close(self) -> None:
        """Disarm the deadline timer and detach from the parent.

        Closing does not cancel the scope.
        """
        self._disarm()
        if self._parent is not None:
            self._parent._children.discard(self)

    def __enter__(self) -> CancelScope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"CancelScope(cancelled={self.cancelled}, "
            f"cause={self._cause!r}, deadline={self._deadline!r})"
        )

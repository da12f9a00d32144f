"""Check capabilities for healthy-sdk.

A *check* is anything with an ``async healthy(ctx)`` method: it returns
``None`` when the target is healthy and raises when it is not.  A check may
additionally expose descriptive metadata through a ``metadata()`` method.
The two capabilities are independent structural protocols; the retry loop
tests for the second one with ``isinstance``.

Shipped in this module
----------------------
- Check          — structural Protocol for health probes
- MetadataCheck  — structural Protocol for checks that describe themselves
- CheckFunc      — adapts a plain (sync or async) callable into a check
- check_func     — factory / decorator for ``CheckFunc``
- invoke         — call a sync or async check function without blocking the loop
"""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Protocol, Union, overload, runtime_checkable

if TYPE_CHECKING:
    from healthy.context.metadata import CheckContext

CheckCallable = Callable[["CheckContext"], Union[Awaitable[object], object]]
"""Signature accepted by :class:`CheckFunc`: ``fn(ctx)``, sync or async."""


@runtime_checkable
class Check(Protocol):
    """Structural protocol satisfied by every health probe.

    Examples
    --------
    Any class with a matching ``healthy`` coroutine satisfies the protocol::

        class AlwaysUp:
            async def healthy(self, ctx: CheckContext) -> None:
                return None

        assert isinstance(AlwaysUp(), Check)
    """

    async def healthy(self, ctx: CheckContext) -> None:
        """Return ``None`` if healthy, raise otherwise.

        Raise an error wrapped with :func:`~healthy.schema.errors.fatal` to
        stop retrying immediately.  A plain (non-async) ``healthy`` method is
        accepted too; the retry loop runs it in the default executor.
        """
        ...


@runtime_checkable
class MetadataCheck(Protocol):
    """Optional capability: describe the check with key/value pairs.

    By convention the mapping contains at least ``type`` (check kind) and
    ``target`` (address, path or URL).
    """

    def metadata(self) -> Mapping[str, object]:
        ...


class CheckFunc:
    """Wrap a callable so it can be used as a check.

    Parameters
    ----------
    fn:
        Callable taking a :class:`~healthy.context.metadata.CheckContext`.
        It may be a coroutine function or a plain callable.  Plain
        callables run in the event loop's default executor, so a blocking
        check does not stall other checks.  Raising marks the attempt as
        failed.
    **metadata:
        Descriptive key/value pairs returned by :meth:`metadata`.

    Raises
    ------
    TypeError
        If *fn* is not callable.
    """

    def __init__(self, fn: CheckCallable, **metadata: object) -> None:
        if not callable(fn):
            raise TypeError(f"fn must be callable, got {fn!r}")
        self._fn = fn
        self._metadata: dict[str, object] = dict(metadata)

    async def healthy(self, ctx: CheckContext) -> None:
        await invoke(self._fn, ctx)

    def metadata(self) -> Mapping[str, object]:
        return self._metadata

    def __repr__(self) -> str:
        name = getattr(self._fn, "__qualname__", repr(self._fn))
        return f"CheckFunc({name}, metadata={self._metadata!r})"


@overload
def check_func(fn: CheckCallable, **metadata: object) -> CheckFunc: ...


@overload
def check_func(fn: None = None, **metadata: object) -> Callable[[CheckCallable], CheckFunc]: ...


def check_func(
    fn: CheckCallable | None = None, **metadata: object
) -> CheckFunc | Callable[[CheckCallable], CheckFunc]:
    """Build a :class:`CheckFunc`; usable directly or as a decorator.

    Examples
    --------
    >>> c = check_func(lambda ctx: None, type="noop")
    >>> c.metadata()["type"]
    'noop'

    ::

        @check_func(type="db", target="primary")
        async def database(ctx: CheckContext) -> None:
            await pool.execute("SELECT 1")
    """
    if fn is None:
        def decorator(inner: CheckCallable) -> CheckFunc:
            return CheckFunc(inner, **metadata)

        return decorator
    return CheckFunc(fn, **metadata)


def _is_coroutine_callable(fn: object) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


async def invoke(fn: CheckCallable, ctx: CheckContext) -> None:
    """Call ``fn(ctx)`` without blocking the event loop.

    Coroutine functions are awaited directly.  Plain callables run in the
    running loop's default executor; an awaitable they return is then
    awaited on the loop.
    """
    if _is_coroutine_callable(fn):
        await fn(ctx)  # type: ignore[misc]
        return
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, fn, ctx)
    if inspect.isawaitable(result):
        await result

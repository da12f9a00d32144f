"""Error taxonomy for healthy-sdk.

All exceptions raised by healthy (and by the bundled checks) derive from
``HealthyError`` so that callers can catch the entire family with a single
``except HealthyError`` clause while still being able to distinguish
individual failure modes.

Shipped in this module
----------------------
- ErrorSeverity          — ordered severity enum
- HealthyError           — root exception with severity and context payload
- ConfigurationError     — bad configuration values or files
- CheckError             — failures reported by the bundled checks
- UnexpectedStatusError  — HTTP check received the wrong status code
- FatalError             — non-retryable wrapper; aborts a retry loop
- ScopeCancelledError    — cause recorded when a scope is cancelled
- DeadlineExceededError  — cause recorded when a scope deadline fires
- WaitCancelledError     — terminal outcome of a cancelled retry loop
- WaitTimeoutError       — cancelled outcome caused by a deadline
- fatal / is_fatal / is_timeout / is_cancelled — chain inspection helpers
"""
from __future__ import annotations

from collections.abc import Iterator
from enum import Enum


class ErrorSeverity(str, Enum):
    """Ordered severity levels for ``HealthyError`` instances.

    Severity is purely advisory metadata — it does not change the
    exception-handling semantics, but it lets logging and alerting
    infrastructure filter by impact level.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class HealthyError(Exception):
    """Root exception for all healthy failures.

    Parameters
    ----------
    message:
        Human-readable description of what went wrong.
    severity:
        Advisory ``ErrorSeverity`` level.  Defaults to ``HIGH``.
    context:
        Optional dict of structured metadata (check targets, attempt
        numbers, etc.) that helps diagnostics without requiring log scraping.

    Examples
    --------
    >>> try:
    ...     raise HealthyError("something broke", ErrorSeverity.MEDIUM)
    ... except HealthyError as exc:
    ...     print(exc.severity)
    ErrorSeverity.MEDIUM
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.severity: ErrorSeverity = severity
        self.context: dict[str, object] = context or {}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"message={str(self)!r}, "
            f"severity={self.severity.value!r})"
        )


class ConfigurationError(HealthyError):
    """Raised when configuration loading or validation fails.

    Examples: negative delay, unparsable duration string, bad YAML.
    """


class CheckError(HealthyError):
    """Raised by the bundled checks when a target reports unhealthy."""


class UnexpectedStatusError(CheckError):
    """Raised by the HTTP check when the response status does not match.

    Attributes
    ----------
    status_code:
        The status code actually received.
    expected:
        The status code the check was configured to expect.
    """

    def __init__(self, status_code: int, expected: int, url: str = "") -> None:
        super().__init__(
            f"incorrect status code: {status_code}",
            severity=ErrorSeverity.MEDIUM,
            context={"status_code": status_code, "expected": expected, "url": url},
        )
        self.status_code = status_code
        self.expected = expected


class FatalError(HealthyError):
    """Marks an error as non-retryable.

    A retry loop that observes a ``FatalError`` (directly or anywhere in the
    ``__cause__`` chain) stops immediately and surfaces it.  The wrapped
    exception is available as :attr:`error` and as ``__cause__``; the message
    is the wrapped exception's message.

    Use :func:`fatal` rather than constructing this directly.
    """

    def __init__(self, error: BaseException) -> None:
        super().__init__(str(error), severity=ErrorSeverity.CRITICAL)
        self.error: BaseException = error
        self.__cause__ = error


class ScopeCancelledError(HealthyError):
    """Default cause recorded when a :class:`CancelScope` is cancelled explicitly."""

    def __init__(self, message: str = "scope cancelled") -> None:
        super().__init__(message, severity=ErrorSeverity.LOW)


class DeadlineExceededError(HealthyError, TimeoutError):
    """Cause recorded when a :class:`CancelScope` deadline fires."""

    def __init__(self, timeout: float | None = None) -> None:
        message = "deadline exceeded"
        if timeout is not None:
            message = f"deadline exceeded after {timeout:g}s"
        super().__init__(message, severity=ErrorSeverity.MEDIUM, context={"timeout": timeout})
        self.timeout = timeout


class WaitCancelledError(HealthyError):
    """Terminal outcome of a retry loop whose scope was cancelled.

    Both causes stay recoverable: :attr:`cause` is why the scope was
    cancelled, :attr:`last_error` is the last error the check raised before
    that (``None`` if no attempt completed).  ``__cause__`` points at
    ``last_error`` so tracebacks show the check failure.
    """

    def __init__(self, cause: BaseException, last_error: BaseException | None = None) -> None:
        message = str(cause)
        if last_error is not None:
            message = f"{cause}: {last_error}"
        super().__init__(message, severity=ErrorSeverity.MEDIUM)
        self.cause: BaseException = cause
        self.last_error: BaseException | None = last_error
        self.__cause__ = last_error

    @classmethod
    def for_cause(
        cls, cause: BaseException, last_error: BaseException | None = None
    ) -> "WaitCancelledError":
        """Build a :class:`WaitTimeoutError` when *cause* is a timeout, else a plain instance."""
        if is_timeout(cause):
            return WaitTimeoutError(cause, last_error)
        return cls(cause, last_error)


class WaitTimeoutError(WaitCancelledError, TimeoutError):
    """A :class:`WaitCancelledError` caused by deadline expiry."""


# ---------------------------------------------------------------------------
# Chain inspection
# ---------------------------------------------------------------------------


def _walk(exc: BaseException | None) -> Iterator[BaseException]:
    """Yield *exc* and everything reachable through causes and groups."""
    pending: list[BaseException] = [exc] if exc is not None else []
    seen: set[int] = set()
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if isinstance(current, WaitCancelledError):
            pending.append(current.cause)
        if isinstance(current, BaseExceptionGroup):
            pending.extend(current.exceptions)


def fatal(error: BaseException) -> FatalError:
    """Wrap *error* so that retry loops stop on it.

    Examples
    --------
    >>> is_fatal(fatal(ValueError("bad url")))
    True
    """
    if isinstance(error, FatalError):
        return error
    return FatalError(error)


def is_fatal(exc: BaseException | None) -> bool:
    """Return ``True`` if *exc* is, or transitively wraps, a :class:`FatalError`."""
    return any(isinstance(item, FatalError) for item in _walk(exc))


def is_timeout(exc: BaseException | None) -> bool:
    """Return ``True`` if *exc* was caused by a scope deadline firing.

    A ``TimeoutError`` raised by a check itself (a slow TCP dial, say) is an
    ordinary retryable failure and does not count.
    """
    return any(isinstance(item, DeadlineExceededError) for item in _walk(exc))


def is_cancelled(exc: BaseException | None) -> bool:
    """Return ``True`` if *exc* is, or wraps, a :class:`WaitCancelledError`."""
    return any(isinstance(item, WaitCancelledError) for item in _walk(exc))

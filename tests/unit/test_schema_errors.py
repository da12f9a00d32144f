"""Unit tests for healthy.schema.errors.

Tests cover the error hierarchy, severity enum, context payload, the fatal
wrapper, the cancellation outcomes, and chain inspection helpers.
"""
from __future__ import annotations

import pytest

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
# ErrorSeverity enum
# ---------------------------------------------------------------------------


class TestErrorSeverity:
    def test_expected_members_exist(self) -> None:
        values = {m.value for m in ErrorSeverity}
        assert values == {"critical", "high", "medium", "low", "info"}

    def test_members_are_str_subclass(self) -> None:
        assert isinstance(ErrorSeverity.HIGH, str)
        assert ErrorSeverity.CRITICAL == "critical"


# ---------------------------------------------------------------------------
# HealthyError base
# ---------------------------------------------------------------------------


class TestHealthyError:
    def test_message_preserved(self) -> None:
        assert str(HealthyError("boom")) == "boom"

    def test_default_severity_is_high(self) -> None:
        assert HealthyError("x").severity == ErrorSeverity.HIGH

    def test_context_defaults_to_empty_dict(self) -> None:
        assert HealthyError("x").context == {}

    def test_context_is_stored(self) -> None:
        exc = HealthyError("x", context={"target": "db:5432"})
        assert exc.context["target"] == "db:5432"

    def test_repr_contains_class_and_severity(self) -> None:
        text = repr(ConfigurationError("bad", ErrorSeverity.LOW))
        assert text.startswith("ConfigurationError(")
        assert "'low'" in text

    @pytest.mark.parametrize(
        "exc",
        [ConfigurationError("x"), CheckError("x"), ScopeCancelledError(), DeadlineExceededError()],
    )
    def test_subclasses_caught_by_base(self, exc: HealthyError) -> None:
        with pytest.raises(HealthyError):
            raise exc


# ---------------------------------------------------------------------------
# Check errors
# ---------------------------------------------------------------------------


class TestUnexpectedStatusError:
    def test_attributes(self) -> None:
        exc = UnexpectedStatusError(503, 200, url="http://svc/healthz")
        assert exc.status_code == 503
        assert exc.expected == 200
        assert exc.context["url"] == "http://svc/healthz"

    def test_message_names_status(self) -> None:
        assert str(UnexpectedStatusError(404, 200)) == "incorrect status code: 404"

    def test_is_check_error(self) -> None:
        assert isinstance(UnexpectedStatusError(500, 200), CheckError)


# ---------------------------------------------------------------------------
# fatal / FatalError
# ---------------------------------------------------------------------------


class TestFatal:
    def test_wraps_error(self) -> None:
        inner = ValueError("bad url")
        wrapped = fatal(inner)
        assert isinstance(wrapped, FatalError)
        assert wrapped.error is inner
        assert wrapped.__cause__ is inner

    def test_message_is_inner_message(self) -> None:
        assert str(fatal(ValueError("bad url"))) == "bad url"

    def test_severity_is_critical(self) -> None:
        assert fatal(ValueError("x")).severity == ErrorSeverity.CRITICAL

    def test_fatal_of_fatal_is_identity(self) -> None:
        once = fatal(ValueError("x"))
        assert fatal(once) is once

    def test_is_fatal_direct(self) -> None:
        assert is_fatal(fatal(OSError("nope")))

    def test_is_fatal_through_cause_chain(self) -> None:
        try:
            try:
                raise fatal(ValueError("root"))
            except FatalError as exc:
                raise RuntimeError("outer") from exc
        except RuntimeError as outer:
            assert is_fatal(outer)

    def test_is_fatal_through_exception_group(self) -> None:
        group = ExceptionGroup("many", [ValueError("a"), fatal(KeyError("b"))])
        assert is_fatal(group)

    def test_plain_errors_are_not_fatal(self) -> None:
        assert not is_fatal(ValueError("x"))
        assert not is_fatal(None)


# ---------------------------------------------------------------------------
# Cancellation outcomes
# ---------------------------------------------------------------------------


class TestDeadlineExceededError:
    def test_is_timeout_error(self) -> None:
        assert isinstance(DeadlineExceededError(1.5), TimeoutError)

    def test_message_includes_timeout(self) -> None:
        assert str(DeadlineExceededError(1.5)) == "deadline exceeded after 1.5s"

    def test_message_without_timeout(self) -> None:
        assert str(DeadlineExceededError()) == "deadline exceeded"


class TestWaitCancelledError:
    def test_both_causes_recoverable(self) -> None:
        cause = ScopeCancelledError()
        last = OSError("connection refused")
        exc = WaitCancelledError(cause, last)
        assert exc.cause is cause
        assert exc.last_error is last
        assert exc.__cause__ is last

    def test_message_joins_cause_and_last_error(self) -> None:
        exc = WaitCancelledError(ScopeCancelledError(), OSError("refused"))
        assert str(exc) == "scope cancelled: refused"

    def test_message_without_last_error(self) -> None:
        exc = WaitCancelledError(ScopeCancelledError())
        assert str(exc) == "scope cancelled"
        assert exc.last_error is None

    def test_for_cause_builds_timeout_variant(self) -> None:
        exc = WaitCancelledError.for_cause(DeadlineExceededError(1), OSError("x"))
        assert isinstance(exc, WaitTimeoutError)
        assert isinstance(exc, TimeoutError)

    def test_for_cause_builds_plain_variant(self) -> None:
        exc = WaitCancelledError.for_cause(ScopeCancelledError())
        assert type(exc) is WaitCancelledError


# ---------------------------------------------------------------------------
# Chain inspection
# ---------------------------------------------------------------------------


class TestChainInspection:
    def test_is_timeout_on_wait_timeout(self) -> None:
        exc = WaitCancelledError.for_cause(DeadlineExceededError(1))
        assert is_timeout(exc)
        assert is_cancelled(exc)

    def test_check_timeout_is_not_a_wait_timeout(self) -> None:
        exc = WaitCancelledError(ScopeCancelledError(), TimeoutError("dial timed out"))
        assert not is_timeout(exc)
        assert is_cancelled(exc)

    def test_is_cancelled_false_for_plain_error(self) -> None:
        assert not is_cancelled(ValueError("x"))

    def test_fatal_cause_visible_through_cancellation(self) -> None:
        sibling = WaitCancelledError(fatal(ValueError("x")))
        assert is_fatal(sibling)
        assert is_cancelled(sibling)

    def test_cycles_do_not_loop_forever(self) -> None:
        a = ValueError("a")
        b = ValueError("b")
        a.__cause__ = b
        b.__cause__ = a
        assert not is_fatal(a)

"""Wait configuration schema for healthy-sdk.

``WaitConfig`` is a Pydantic v2 model that acts as the validated,
immutable boundary object between raw configuration sources (keyword
arguments here; files and environment variables through
``healthy.config.loader``) and the retry engine.  A wait resolves exactly
one ``WaitConfig`` before any check runs.

Shipped in this module
----------------------
- DEFAULT_TIMEOUT / DEFAULT_DELAY / DEFAULT_JITTER — default durations
- WaitConfig      — frozen Pydantic v2 model with merge helpers
- join_configs    — bundle several configs into one reusable config
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from healthy.context.scope import CancelScope
from healthy.schema.duration import parse_duration
from healthy.schema.errors import ConfigurationError

DEFAULT_TIMEOUT: float = 30.0
"""Overall deadline for a wait, in seconds."""

DEFAULT_DELAY: float = 1.0
"""Base delay between attempts of one check, in seconds."""

DEFAULT_JITTER: float = 0.1
"""Upper bound of the random extra delay, in seconds."""


class WaitConfig(BaseModel):
    """Validated configuration for one wait.

    All fields have sensible defaults so that ``Waiter(...).wait()`` works
    with zero configuration.

    Parameters
    ----------
    timeout:
        Overall deadline in seconds.  ``0`` or negative means no deadline of
        its own; the wait then ends only through *scope* cancellation.
    delay:
        Base delay between attempts of one check.  Must not be negative.
    jitter:
        Maximum random extra delay added to *delay*.  ``0`` or negative
        disables jitter.
    scope:
        Caller-owned :class:`~healthy.context.scope.CancelScope`.  Cancelling
        it stops the wait.
    callback:
        Observer invoked as ``callback(ctx, result)`` after every attempt.
        May be sync or async.

    Duration fields accept seconds as numbers or duration strings such as
    ``"30s"`` and ``"250ms"``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    timeout: float = Field(default=DEFAULT_TIMEOUT)
    delay: float = Field(default=DEFAULT_DELAY, ge=0)
    jitter: float = Field(default=DEFAULT_JITTER)
    scope: CancelScope | None = Field(default=None)
    callback: Callable[..., Any] | None = Field(default=None)

    @field_validator("timeout", "delay", "jitter", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:  # noqa: ANN401
        """Accept ``"100ms"``-style strings for every duration field."""
        if value is None:
            return value
        return parse_duration(value)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def merge(self, overrides: "WaitConfig") -> "WaitConfig":
        """Produce a new ``WaitConfig`` where fields set on *overrides* win.

        Only fields explicitly given to *overrides* (at construction or by an
        earlier merge) take precedence, so a later config can restore a
        default value on purpose.  Neither config is mutated.
        """
        update = {name: getattr(overrides, name) for name in overrides.model_fields_set}
        return self.model_copy(update=update)

    def with_overrides(self, **overrides: Any) -> "WaitConfig":  # noqa: ANN401
        """Return a copy with *overrides* validated and applied.

        Raises
        ------
        ConfigurationError
            If an override fails validation.
        """
        if not overrides:
            return self
        try:
            extra = WaitConfig(**overrides)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid wait option: {exc}",
                context={"errors": exc.errors()},
            ) from exc
        return self.merge(extra)

    def summary(self) -> dict[str, object]:
        """Return the plain duration settings, suitable for display or JSON."""
        return {
            "timeout": self.timeout,
            "delay": self.delay,
            "jitter": self.jitter,
            "scope": self.scope is not None,
            "callback": self.callback is not None,
        }


def join_configs(*configs: WaitConfig) -> WaitConfig:
    """Bundle several configs into one; later explicitly-set fields win.

    Examples
    --------
    >>> base = WaitConfig(timeout=10)
    >>> fast = WaitConfig(delay="100ms")
    >>> joined = join_configs(base, fast)
    >>> joined.timeout, joined.delay
    (10.0, 0.1)
    """
    joined = WaitConfig()
    for config in configs:
        joined = joined.merge(config)
    return joined

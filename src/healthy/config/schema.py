"""Validation of wait settings read from outside the program.

Only the duration fields of ``WaitConfig`` can come from a config file, the
environment or command-line flags.  ``scope`` and ``callback`` hold live
Python objects and are handed to ``Waiter.wait`` in code; a source that
names them is rejected with a message saying so instead of pydantic's
generic "extra fields" error.

Shipped in this module
----------------------
- CONFIGURABLE_KEYS — settings accepted from files, environment and flags
- RUNTIME_ONLY_KEYS — ``WaitConfig`` fields that only code may set
- validate_config   — check the keys of one source and build a ``WaitConfig``
"""
from __future__ import annotations

from collections.abc import Mapping

from pydantic import ValidationError

from healthy.schema.config import WaitConfig
from healthy.schema.errors import ConfigurationError

__all__ = ["WaitConfig", "CONFIGURABLE_KEYS", "RUNTIME_ONLY_KEYS", "validate_config"]

CONFIGURABLE_KEYS: tuple[str, ...] = ("timeout", "delay", "jitter")
RUNTIME_ONLY_KEYS: frozenset[str] = frozenset({"scope", "callback"})


def validate_config(data: Mapping[str, object], source: str = "config") -> WaitConfig:
    """Build a ``WaitConfig`` from the raw settings of one *source*.

    Values are seconds or duration strings (``"30s"``, ``"1m30s"``).  Only
    the keys present in *data* end up in ``model_fields_set``, so results
    from several sources layer cleanly with ``WaitConfig.merge``.

    Parameters
    ----------
    data:
        Unvalidated settings, e.g. a parsed YAML mapping.
    source:
        Human-readable origin used in error messages and as
        ``context["source"]``.

    Raises
    ------
    ConfigurationError
        If *data* names ``scope``/``callback`` or an unknown key, holds an
        unparsable duration, or fails pydantic validation (the
        ``ValidationError`` is attached as ``__cause__``).

    Examples
    --------
    >>> validate_config({"timeout": "5s"}).timeout
    5.0
    """
    keys = {str(key) for key in data}
    runtime_only = sorted(keys & RUNTIME_ONLY_KEYS)
    if runtime_only:
        raise ConfigurationError(
            f"{', '.join(runtime_only)} cannot be set from {source}; "
            "pass it to Waiter.wait() in code",
            context={"source": source, "keys": runtime_only},
        )
    unknown = sorted(keys - set(CONFIGURABLE_KEYS))
    if unknown:
        raise ConfigurationError(
            f"Unknown setting(s) in {source}: {', '.join(unknown)} "
            f"(expected any of {', '.join(CONFIGURABLE_KEYS)})",
            context={"source": source, "keys": unknown},
        )

    try:
        return WaitConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid {source}: {exc}",
            context={"source": source, "errors": exc.errors()},
        ) from exc
    except ConfigurationError as exc:
        raise ConfigurationError(
            f"Invalid {source}: {exc}",
            context={"source": source},
        ) from exc

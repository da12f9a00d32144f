"""Duration parsing and formatting.

Durations are plain ``float`` seconds everywhere inside healthy.  Config
files, environment variables and the CLI may also spell them as duration
strings such as ``"30s"``, ``"100ms"`` or ``"1m30s"``; check metadata
reports timeouts in the same notation.
"""
from __future__ import annotations

import re

from healthy.schema.errors import ConfigurationError

_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: object) -> float:
    """Convert *value* to seconds.

    Numbers (and numeric strings) are taken as seconds.  Strings may chain
    several unit-suffixed parts, optionally signed: ``"1h2m"``, ``"-5s"``.

    Raises
    ------
    ConfigurationError
        If *value* cannot be interpreted as a duration.

    Examples
    --------
    >>> parse_duration("1m30s")
    90.0
    >>> parse_duration("100ms")
    0.1
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ConfigurationError(f"Invalid duration: {value!r}")

    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass

    sign = 1.0
    if text[:1] in {"+", "-"}:
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    total = 0.0
    position = 0
    for match in _PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()

    if not text or position != len(text):
        raise ConfigurationError(
            f"Invalid duration: {value!r}",
            context={"value": value},
        )
    return sign * total


def format_duration(seconds: float) -> str:
    """Render *seconds* in the compact unit notation.

    >>> format_duration(1.0)
    '1s'
    >>> format_duration(0.25)
    '250ms'
    >>> format_duration(90)
    '1m30s'
    """
    if seconds == 0:
        return "0s"
    if seconds < 0:
        return "-" + format_duration(-seconds)
    if seconds < 1:
        millis = seconds * 1000
        if millis >= 1:
            return f"{millis:g}ms"
        return f"{seconds * 1e6:g}us"

    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    parts: list[str] = []
    if hours:
        parts.append(f"{int(hours)}h")
    if minutes:
        parts.append(f"{int(minutes)}m")
    if secs or not parts:
        parts.append(f"{secs:g}s")
    return "".join(parts)

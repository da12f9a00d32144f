"""Backoff policy: base delay plus uniform jitter."""
from __future__ import annotations

import random

_rng = random.Random()


def next_delay(delay: float, jitter: float, rng: random.Random | None = None) -> float:
    """Return the seconds to wait before the next attempt.

    With ``jitter <= 0`` the result is exactly *delay*; otherwise it is
    ``delay + uniform[0, jitter)``.

    Parameters
    ----------
    delay:
        Base delay in seconds.
    jitter:
        Upper bound (exclusive) of the random extra delay in seconds.
    rng:
        Random source; defaults to a module-level ``random.Random``.

    Examples
    --------
    >>> next_delay(1.0, 0)
    1.0
    >>> 1.0 <= next_delay(1.0, 0.5) < 1.5
    True
    """
    if jitter <= 0:
        return delay
    source = rng if rng is not None else _rng
    # random() is in [0, 1), so the product stays below jitter
    return delay + source.random() * jitter

"""Metadata bag and the per-attempt check context.

Every retry loop owns one :class:`Metadata` bag.  It starts as a copy of the
check's own descriptive metadata and the loop stamps the current attempt
number into it before each attempt.  The bag travels inside a
:class:`CheckContext` together with the shared :class:`CancelScope`; the
context is what checks and observer callbacks receive.

Shipped in this module
----------------------
- ATTEMPT_KEY    — metadata key holding the 1-based attempt number
- Metadata       — mutable key/value bag
- CheckContext   — explicit request scope passed to checks and callbacks
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from healthy.context.scope import CancelScope

ATTEMPT_KEY = "attempt"


class Metadata(dict[str, Any]):
    """Mutable string-keyed bag of check metadata.

    Examples
    --------
    >>> md = Metadata({"type": "tcp"})
    >>> md.set("attempt", 2)
    >>> md.get("attempt")
    2
    """

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401
        self[key] = value

    def merge(self, other: Mapping[str, Any] | None) -> None:
        """Copy every pair from *other* into the bag."""
        if other:
            self.update(other)

    def copy(self) -> Metadata:
        return Metadata(self)


@dataclass(frozen=True)
class CheckContext:
    """What a check and an observer callback see for one attempt.

    Attributes
    ----------
    scope:
        Cancellation scope shared by all checks of the wait.  Read-only from
        the check's point of view.
    metadata:
        The loop's own metadata bag, including :data:`ATTEMPT_KEY`.
    """

    scope: CancelScope
    metadata: Metadata = field(default_factory=Metadata)

    @property
    def cancelled(self) -> bool:
        return self.scope.cancelled

    @property
    def attempt(self) -> int:
        """Return the current attempt number, ``0`` outside a retry loop."""
        value = self.metadata.get(ATTEMPT_KEY, 0)
        return int(value) if isinstance(value, int) else 0

"""TCP dial check.

Opens a connection to ``host:port`` within a timeout and closes it again
straight away.  Refused or timed-out dials are retryable; an address that
cannot be split into host and port can never succeed and is fatal.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from healthy.schema.duration import format_duration
from healthy.schema.errors import ConfigurationError, fatal

if TYPE_CHECKING:
    from healthy.context.metadata import CheckContext

logger = logging.getLogger(__name__)

DEFAULT_TCP_TIMEOUT: float = 1.0


def split_address(addr: str) -> tuple[str, int]:
    """Split ``"host:port"`` (or ``"[v6addr]:port"``) into its parts.

    Raises
    ------
    ConfigurationError
        If the port is missing or not an integer in ``0..65535``.

    Examples
    --------
    >>> split_address("localhost:5432")
    ('localhost', 5432)
    >>> split_address("[::1]:80")
    ('::1', 80)
    """
    host, sep, port_text = addr.rpartition(":")
    if not sep or not port_text.isdigit():
        raise ConfigurationError(
            f"Invalid TCP address {addr!r}; expected 'host:port'",
            context={"addr": addr},
        )
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    port = int(port_text)
    if port > 65535:
        raise ConfigurationError(f"Invalid TCP port in {addr!r}", context={"addr": addr})
    return host, port


class TCPCheck:
    """Healthy once a TCP connection to *addr* can be established.

    Parameters
    ----------
    addr:
        Target in ``"host:port"`` form.
    timeout:
        Dial timeout in seconds.  Non-positive disables it.
    """

    def __init__(self, addr: str, timeout: float = DEFAULT_TCP_TIMEOUT) -> None:
        self._addr = addr
        self._timeout = timeout

    def with_timeout(self, timeout: float) -> TCPCheck:
        """Set the dial timeout and return ``self`` for chaining."""
        self._timeout = timeout
        return self

    @property
    def addr(self) -> str:
        return self._addr

    @property
    def timeout(self) -> float:
        return self._timeout

    async def healthy(self, ctx: CheckContext) -> None:
        try:
            host, port = split_address(self._addr)
        except ConfigurationError as exc:
            raise fatal(exc) from exc

        timeout = self._timeout if self._timeout > 0 else None
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout)
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()
        logger.debug("TCP dial to %s succeeded", self._addr)

    def metadata(self) -> Mapping[str, object]:
        return {
            "type": "tcp",
            "target": self._addr,
            "timeout": format_duration(self._timeout),
        }

    def __repr__(self) -> str:
        return f"TCPCheck({self._addr!r}, timeout={self._timeout!r})"


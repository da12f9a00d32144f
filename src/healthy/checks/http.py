"""HTTP GET check.

Issues a GET against the target URL and compares the response status with
the expected one.  A request that cannot even be built (malformed URL,
unsupported scheme) is fatal; transport errors and unexpected status codes
are retried.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

import httpx

from healthy.schema.duration import format_duration
from healthy.schema.errors import CheckError, UnexpectedStatusError, fatal

if TYPE_CHECKING:
    from healthy.context.metadata import CheckContext

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT: float = 1.0

_SUPPORTED_SCHEMES = frozenset({"http", "https"})


class HTTPCheck:
    """Healthy once GET *url* answers with the expected status code.

    Parameters
    ----------
    url:
        Target URL.
    timeout:
        Client timeout in seconds for the whole request.  Non-positive
        disables it.
    expect:
        Expected status code.  Defaults to ``200``.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        expect: int = 200,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._expect = expect
        self._transport = transport

    def with_timeout(self, timeout: float) -> HTTPCheck:
        """Set the client timeout and return ``self`` for chaining."""
        self._timeout = timeout
        return self

    def expect_status(self, status_code: int) -> HTTPCheck:
        """Set the expected status code and return ``self`` for chaining."""
        self._expect = status_code
        return self

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def expected_status(self) -> int:
        return self._expect

    async def healthy(self, ctx: CheckContext) -> None:
        timeout = self._timeout if self._timeout > 0 else None
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            try:
                request = client.build_request("GET", self._url)
            except httpx.InvalidURL as exc:
                raise fatal(exc) from exc
            if request.url.scheme not in _SUPPORTED_SCHEMES:
                raise fatal(
                    CheckError(
                        f"Unsupported URL scheme in {self._url!r}",
                        context={"url": self._url},
                    )
                )
            try:
                response = await client.send(request)
            except httpx.UnsupportedProtocol as exc:
                raise fatal(exc) from exc

        if response.status_code != self._expect:
            raise UnexpectedStatusError(response.status_code, self._expect, url=self._url)
        logger.debug("GET %s returned %d", self._url, response.status_code)

    def metadata(self) -> Mapping[str, object]:
        return {
            "type": "http",
            "target": self._url,
            "timeout": format_duration(self._timeout),
        }

    def __repr__(self) -> str:
        return f"HTTPCheck({self._url!r}, expect={self._expect})"


"""Unit tests for healthy.checks (protocols, CheckFunc, file, TCP and HTTP checks)."""
from __future__ import annotations

import asyncio
import socket
import time
from pathlib import Path

import httpx
import pytest

from healthy.checks.base import Check, CheckFunc, MetadataCheck, check_func
from healthy.checks.file import FileCheck
from healthy.checks.http import HTTPCheck
from healthy.checks.tcp import TCPCheck, split_address
from healthy.context.metadata import CheckContext
from healthy.context.scope import CancelScope
from healthy.schema.errors import (
    CheckError,
    ConfigurationError,
    FatalError,
    UnexpectedStatusError,
    is_fatal,
)


def _ctx() -> CheckContext:
    return CheckContext(scope=CancelScope())


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class TestProtocols:
    def test_custom_class_satisfies_check(self) -> None:
        class AlwaysUp:
            async def healthy(self, ctx: CheckContext) -> None:
                return None

        assert isinstance(AlwaysUp(), Check)
        assert not isinstance(AlwaysUp(), MetadataCheck)

    def test_object_without_healthy_is_not_a_check(self) -> None:
        assert not isinstance(object(), Check)

    def test_bundled_checks_describe_themselves(self) -> None:
        for check in (FileCheck("/tmp/x"), TCPCheck("h:1"), HTTPCheck("http://h")):
            assert isinstance(check, Check)
            assert isinstance(check, MetadataCheck)


# ---------------------------------------------------------------------------
# CheckFunc
# ---------------------------------------------------------------------------


class TestCheckFunc:
    def test_sync_callable_success(self) -> None:
        seen: list[CheckContext] = []
        check = CheckFunc(seen.append)
        ctx = _ctx()
        asyncio.run(check.healthy(ctx))
        assert seen == [ctx]

    def test_sync_callable_failure_propagates(self) -> None:
        def boom(ctx: CheckContext) -> None:
            raise ValueError("down")

        with pytest.raises(ValueError, match="down"):
            asyncio.run(CheckFunc(boom).healthy(_ctx()))

    def test_async_callable_is_awaited(self) -> None:
        calls: list[int] = []

        async def probe(ctx: CheckContext) -> None:
            await asyncio.sleep(0)
            calls.append(1)

        asyncio.run(CheckFunc(probe).healthy(_ctx()))
        assert calls == [1]

    def test_blocking_sync_callable_leaves_loop_free(self) -> None:
        def blocks(ctx: CheckContext) -> None:
            time.sleep(0.2)

        async def _run() -> int:
            ticks = 0
            task = asyncio.create_task(CheckFunc(blocks).healthy(_ctx()))
            while not task.done():
                ticks += 1
                await asyncio.sleep(0.01)
            await task
            return ticks

        assert asyncio.run(_run()) > 5

    def test_sync_callable_returning_awaitable(self) -> None:
        calls: list[int] = []

        async def later() -> None:
            calls.append(1)

        asyncio.run(CheckFunc(lambda ctx: later()).healthy(_ctx()))
        assert calls == [1]

    def test_metadata_returned(self) -> None:
        check = CheckFunc(lambda ctx: None, type="db", target="primary")
        assert check.metadata() == {"type": "db", "target": "primary"}

    def test_non_callable_rejected(self) -> None:
        with pytest.raises(TypeError):
            CheckFunc("not callable")  # type: ignore[arg-type]

    def test_check_func_direct(self) -> None:
        check = check_func(lambda ctx: None, type="noop")
        assert isinstance(check, CheckFunc)
        assert check.metadata()["type"] == "noop"

    def test_check_func_decorator(self) -> None:
        @check_func(type="cache")
        async def cache(ctx: CheckContext) -> None:
            return None

        assert isinstance(cache, CheckFunc)
        assert cache.metadata() == {"type": "cache"}
        assert "cache" in repr(cache)


# ---------------------------------------------------------------------------
# FileCheck
# ---------------------------------------------------------------------------


class TestFileCheck:
    def test_existing_file_is_healthy(self, tmp_path: Path) -> None:
        target = tmp_path / "ready"
        target.write_text("", encoding="utf-8")
        asyncio.run(FileCheck(target).healthy(_ctx()))

    def test_missing_file_raises_retryable_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError) as exc_info:
            asyncio.run(FileCheck(tmp_path / "missing").healthy(_ctx()))
        assert not is_fatal(exc_info.value)

    def test_metadata(self, tmp_path: Path) -> None:
        check = FileCheck(tmp_path / "x")
        assert check.metadata() == {"type": "file", "target": str(tmp_path / "x")}
        assert check.path == str(tmp_path / "x")


# ---------------------------------------------------------------------------
# TCPCheck
# ---------------------------------------------------------------------------


class TestSplitAddress:
    def test_host_and_port(self) -> None:
        assert split_address("db:5432") == ("db", 5432)

    def test_ipv6(self) -> None:
        assert split_address("[::1]:8080") == ("::1", 8080)

    @pytest.mark.parametrize("addr", ["nope", "host:", "host:http", "host:70000"])
    def test_invalid_addresses(self, addr: str) -> None:
        with pytest.raises(ConfigurationError):
            split_address(addr)


class TestTCPCheck:
    def test_listening_port_is_healthy(self) -> None:
        async def _run() -> None:
            server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
            port = server.sockets[0].getsockname()[1]
            async with server:
                await TCPCheck(f"127.0.0.1:{port}").healthy(_ctx())

        asyncio.run(_run())

    def test_closed_port_is_retryable(self) -> None:
        port = _free_port()
        with pytest.raises(OSError) as exc_info:
            asyncio.run(TCPCheck(f"127.0.0.1:{port}").healthy(_ctx()))
        assert not is_fatal(exc_info.value)

    def test_bad_address_is_fatal(self) -> None:
        with pytest.raises(FatalError) as exc_info:
            asyncio.run(TCPCheck("nope").healthy(_ctx()))
        assert isinstance(exc_info.value.error, ConfigurationError)

    def test_with_timeout_chains(self) -> None:
        check = TCPCheck("db:5432").with_timeout(2.5)
        assert check.timeout == 2.5
        assert check.addr == "db:5432"

    def test_metadata(self) -> None:
        check = TCPCheck("db:5432", timeout=0.5)
        assert check.metadata() == {"type": "tcp", "target": "db:5432", "timeout": "500ms"}


# ---------------------------------------------------------------------------
# HTTPCheck
# ---------------------------------------------------------------------------


def _transport(status: int, seen: list[httpx.Request] | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status)

    return httpx.MockTransport(handler)


class TestHTTPCheck:
    def test_expected_status_is_healthy(self) -> None:
        seen: list[httpx.Request] = []
        check = HTTPCheck("http://svc/healthz", transport=_transport(200, seen))
        asyncio.run(check.healthy(_ctx()))
        assert seen[0].method == "GET"
        assert str(seen[0].url) == "http://svc/healthz"

    def test_unexpected_status_is_retryable(self) -> None:
        check = HTTPCheck("http://svc/healthz", transport=_transport(503))
        with pytest.raises(UnexpectedStatusError) as exc_info:
            asyncio.run(check.healthy(_ctx()))
        assert exc_info.value.status_code == 503
        assert not is_fatal(exc_info.value)

    def test_expect_status_changes_expectation(self) -> None:
        check = HTTPCheck("http://svc/", transport=_transport(204)).expect_status(204)
        assert check.expected_status == 204
        asyncio.run(check.healthy(_ctx()))

    def test_non_positive_timeout_disables_client_timeout(self) -> None:
        seen: list[httpx.Request] = []
        check = HTTPCheck("http://svc/healthz", timeout=0, transport=_transport(200, seen))
        asyncio.run(check.healthy(_ctx()))
        assert set(seen[0].extensions["timeout"].values()) == {None}

    def test_positive_timeout_reaches_client(self) -> None:
        seen: list[httpx.Request] = []
        check = HTTPCheck("http://svc/", timeout=2.5, transport=_transport(200, seen))
        asyncio.run(check.healthy(_ctx()))
        assert set(seen[0].extensions["timeout"].values()) == {2.5}

    def test_invalid_url_is_fatal(self) -> None:
        check = HTTPCheck("http://localhost:abc/", transport=_transport(200))
        with pytest.raises(FatalError):
            asyncio.run(check.healthy(_ctx()))

    def test_unsupported_scheme_is_fatal(self) -> None:
        check = HTTPCheck("ftp://svc/file", transport=_transport(200))
        with pytest.raises(FatalError) as exc_info:
            asyncio.run(check.healthy(_ctx()))
        assert isinstance(exc_info.value.error, CheckError)

    def test_transport_error_is_retryable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        check = HTTPCheck("http://svc/", transport=httpx.MockTransport(handler))
        with pytest.raises(httpx.ConnectError) as exc_info:
            asyncio.run(check.healthy(_ctx()))
        assert not is_fatal(exc_info.value)

    def test_metadata(self) -> None:
        check = HTTPCheck("http://svc/").with_timeout(2)
        assert check.metadata() == {"type": "http", "target": "http://svc/", "timeout": "2s"}
        assert check.timeout == 2

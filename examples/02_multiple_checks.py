#!/usr/bin/env python3
"""Example: Multiple checks

Starts a throwaway TCP server and creates a marker file a little later,
then waits for both with one ``Waiter``.  A third wait shows how a fatal
error stops everything immediately.

Usage:
    python examples/02_multiple_checks.py

Requirements:
    pip install healthy-sdk
"""
from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from healthy import (
    FatalError,
    FileCheck,
    TCPCheck,
    Waiter,
    WaitConfig,
    WaitTimeoutError,
)


async def main_async() -> None:
    config = WaitConfig(timeout="10s", delay="100ms", jitter="20ms")

    with tempfile.TemporaryDirectory() as tmp:
        marker = Path(tmp) / "ready"
        server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]

        # Step 1: The marker file appears after 300ms
        asyncio.get_running_loop().call_later(0.3, marker.touch)

        # Step 2: Wait for both the port and the file
        async with server:
            waiter = Waiter(TCPCheck(f"127.0.0.1:{port}"), FileCheck(marker))
            await waiter.wait(config)
        print(f"Both checks healthy: {waiter!r}")

        # Step 3: A file that never appears runs into the deadline
        try:
            await Waiter(FileCheck(Path(tmp) / "never")).wait(config, timeout="500ms")
        except WaitTimeoutError as exc:
            print(f"Timed out as expected: {exc}")

    # Step 4: An unparsable address is fatal and is not retried
    try:
        await Waiter(TCPCheck("not-an-address")).wait(config)
    except FatalError as exc:
        print(f"Fatal error, no retries: {exc}")


def main() -> None:
    asyncio.run(main_async())


if __name__ == "__main__":
    main()

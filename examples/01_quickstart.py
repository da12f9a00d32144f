#!/usr/bin/env python3
"""Example: Quickstart

Demonstrates the minimal setup for healthy-sdk: wrap a function as a check
and wait for it with the default configuration.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install healthy-sdk
"""
from __future__ import annotations

import asyncio
import time

import healthy
from healthy import CheckContext, Result, Waiter, check_func

_STARTED = time.monotonic()


@check_func(type="demo", target="warm-up")
def warmed_up(ctx: CheckContext) -> None:
    # Pretend the dependency needs a little over half a second to start.
    if time.monotonic() - _STARTED < 0.6:
        raise ConnectionError("still warming up")


def report(ctx: CheckContext, result: Result) -> None:
    status = "ok" if result.ok else f"failed: {result.error}"
    print(f"  attempt {result.attempt} on {result.metadata['target']}: {status}")


async def main_async() -> None:
    print(f"healthy-sdk version: {healthy.__version__}")

    # Step 1: Create a waiter over one check
    waiter = Waiter(warmed_up)

    # Step 2: Wait, retrying every 200ms with a little jitter
    await waiter.wait(timeout="5s", delay="200ms", jitter="50ms", callback=report)
    print("Dependency is healthy.")


def main() -> None:
    asyncio.run(main_async())


if __name__ == "__main__":
    main()

"""Benchmark: wait latency for already-healthy checks and retry overhead (p50/p95/mean)."""
from __future__ import annotations

import asyncio
import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from healthy.checks.base import check_func
from healthy.schema.config import WaitConfig
from healthy.waiter.waiter import Waiter

_WARMUP: int = 50
_ITERATIONS: int = 500
_GROUP_SIZE: int = 10


def _summarise(operation: str, latencies_ms: list[float]) -> dict[str, object]:
    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000
    return {
        "operation": operation,
        "iterations": n,
        "total_seconds": round(total, 4),
        "ops_per_second": round(n / total, 1) if total else 0.0,
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }


def bench_group_wait_latency(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark ``Waiter.wait()`` over a group of immediately healthy checks.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    waiter = Waiter(*(check_func(lambda ctx: None) for _ in range(_GROUP_SIZE)))
    config = WaitConfig(delay=0, jitter=0)
    latencies_ms: list[float] = []

    async def _run() -> None:
        for _ in range(_WARMUP):
            await waiter.wait(config)
        for _ in range(iterations):
            t0 = time.perf_counter()
            await waiter.wait(config)
            latencies_ms.append((time.perf_counter() - t0) * 1000)

    asyncio.run(_run())

    result = _summarise("group_wait_latency", latencies_ms)
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def bench_retry_overhead(iterations: int = _ITERATIONS, failures: int = 5) -> dict[str, object]:
    """Benchmark a check that fails *failures* times with zero backoff."""
    config = WaitConfig(delay=0, jitter=0)
    latencies_ms: list[float] = []

    async def _run() -> None:
        for _ in range(iterations):
            remaining = [failures]

            def flaky(ctx: object) -> None:
                if remaining[0]:
                    remaining[0] -= 1
                    raise OSError("not yet")

            t0 = time.perf_counter()
            await Waiter(check_func(flaky)).wait(config)
            latencies_ms.append((time.perf_counter() - t0) * 1000)

    asyncio.run(_run())

    result = _summarise("retry_overhead", latencies_ms)
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


if __name__ == "__main__":
    results = [bench_group_wait_latency(), bench_retry_overhead()]
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(results, fh, indent=2)
    print(f"Results saved to {output_path}")

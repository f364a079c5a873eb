#!/usr/bin/env python3
"""
Example of streamstats usage with periodic reporting.

Demonstrates:
1. Latency histograms fed from instrumented coroutines
2. A request rate meter driven by its background ticker
3. Tag statistics recorded with @measure_async
4. Periodic percentile reports and a final JSON report
5. Graceful shutdown

Usage:
    python scripts/example_metrics_usage.py
"""

import asyncio
import random
import time

from streamstats import (
    ConfigManager,
    Histogram,
    Meter,
    Statistics,
    StatisticsType,
    StatsLogger,
    measure_async,
)

stats = Statistics("example")
latency = Histogram(measurement="p99")
requests = Meter(samples=1, timeframe=5, tick_interval=1000)


async def simulate_requests():
    """Simulate request handling with varying latencies."""

    @measure_async(stats, "handle_request")
    async def handle_request(processing_time_ms: float):
        await asyncio.sleep(processing_time_ms / 1000.0)
        if random.random() < 0.05:
            raise ConnectionError("upstream reset")

    for _ in range(200):
        processing_time_ms = random.lognormvariate(3, 0.5)
        try:
            await handle_request(processing_time_ms)
        except ConnectionError:
            pass
        latency.update(processing_time_ms)
        requests.mark()
        await asyncio.sleep(0.02)


async def print_periodic_stats(interval_seconds: int = 2):
    """Print histogram and meter readings periodically."""
    while True:
        await asyncio.sleep(interval_seconds)

        snapshot = latency.full_results()
        print(f"\nStats Report @ {time.strftime('%H:%M:%S')}")
        print("-" * 60)
        if snapshot.count == 0:
            print("  No data collected yet...")
            continue

        print(f"  Count:   {snapshot.count}")
        print(f"  Rate:    {requests.val:6.2f}/s")
        print(f"  Median:  {snapshot.median:6.2f}ms")
        print(f"  P95:     {snapshot.p95:6.2f}ms")
        print(f"  P99:     {snapshot.p99:6.2f}ms")
        print(f"  EMA:     {snapshot.ema:6.2f}ms")


async def main():
    """Main example execution."""
    config = ConfigManager()
    StatsLogger.from_config(config.logging_config)

    stats.init(StatisticsType.SAMPLES, "handle_request_success", "Handled requests (ms)")
    stats.init(StatisticsType.SAMPLES, "handle_request_error", "Failed requests (ms)")

    reporting_task = asyncio.create_task(print_periodic_stats())

    try:
        await simulate_requests()

    except KeyboardInterrupt:
        print("\nStopping...")

    finally:
        reporting_task.cancel()
        try:
            await reporting_task
        except asyncio.CancelledError:
            pass

        print("\nFINAL STATISTICS")
        print("=" * 60)
        for name, value in latency.full_results().to_dict().items():
            print(f"  {name:<9} {value}")

        stats.log_report()
        requests.stop()
        print("Shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())

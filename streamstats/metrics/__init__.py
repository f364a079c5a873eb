"""
Runtime metrics built on the streaming core.

Usage:
    from streamstats.metrics import Histogram, Meter

    latency = Histogram(measurement="p99")
    latency.update(12.5)
    print(latency.val, latency.full_results().to_dict())

    with Meter(samples=1) as requests:
        requests.mark()
        print(f"{requests.val} req/s")
"""

from .counter import Counter
from .gauge import Gauge
from .histogram import MEASUREMENTS, Histogram
from .meter import Meter
from .snapshot import HistogramSnapshot
from .statistics import Statistics, StatisticsType, TagItem, TimerHandle
from .timing import measure, measure_async, measure_sync

__all__ = [
    "Counter",
    "Gauge",
    "Histogram",
    "HistogramSnapshot",
    "MEASUREMENTS",
    "Meter",
    "Statistics",
    "StatisticsType",
    "TagItem",
    "TimerHandle",
    "measure",
    "measure_async",
    "measure_sync",
]

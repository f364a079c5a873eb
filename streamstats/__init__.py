"""
streamstats: streaming statistics for runtime instrumentation

Bounded-memory histograms (forward-decaying reservoir sample, Welford
variance, adaptive EMA, percentiles) and EWMA rate meters.
"""

__version__ = "0.1.0"

from streamstats.core import (
    EWMA,
    BinaryHeap,
    ConfigurationError,
    ExponentiallyDecayingSample,
    InvalidMeasurementError,
    PeriodicTicker,
    StreamStatsError,
)
from streamstats.metrics import (
    Counter,
    Gauge,
    Histogram,
    HistogramSnapshot,
    Meter,
    Statistics,
    StatisticsType,
    measure,
    measure_async,
    measure_sync,
)
from streamstats.utils import units
from streamstats.utils.config import ConfigManager
from streamstats.utils.logger import StatsLogger

__all__ = [
    "BinaryHeap",
    "ExponentiallyDecayingSample",
    "EWMA",
    "PeriodicTicker",
    "StreamStatsError",
    "ConfigurationError",
    "InvalidMeasurementError",
    "Counter",
    "Gauge",
    "Histogram",
    "HistogramSnapshot",
    "Meter",
    "Statistics",
    "StatisticsType",
    "measure",
    "measure_async",
    "measure_sync",
    "units",
    "ConfigManager",
    "StatsLogger",
]

"""
Core streaming algorithms: priority heap, decaying reservoir sample,
EWMA rate estimator and the periodic ticker that drives it.
"""

from .binary_heap import BinaryHeap
from .decaying_sample import ExponentiallyDecayingSample, SampleElement
from .ewma import EWMA
from .exceptions import ConfigurationError, InvalidMeasurementError, StreamStatsError
from .ticker import PeriodicTicker

__all__ = [
    "BinaryHeap",
    "ExponentiallyDecayingSample",
    "SampleElement",
    "EWMA",
    "PeriodicTicker",
    "StreamStatsError",
    "ConfigurationError",
    "InvalidMeasurementError",
]

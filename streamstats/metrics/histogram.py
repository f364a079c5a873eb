"""
Histogram metric: exact running aggregates plus sample-based percentiles.

Min, max, sum, count, mean, variance (Welford) and the adaptive EMA are exact
over every observation. Percentiles are estimated from a forward-decaying
reservoir sample and therefore approximate recent history.
"""

import threading
from typing import Callable, Dict, Iterable, Optional

import numpy as np

from streamstats.core.decaying_sample import (
    ALPHA,
    RESCALE_INTERVAL,
    SIZE,
    ExponentiallyDecayingSample,
)
from streamstats.core.exceptions import InvalidMeasurementError

from .snapshot import HistogramSnapshot

# Percentile reported under each measurement name
PERCENTILE_MEASUREMENTS: Dict[str, float] = {
    "median": 0.5,
    "p75": 0.75,
    "p95": 0.95,
    "p99": 0.99,
    "p999": 0.999,
}

SCALAR_MEASUREMENTS = ("min", "max", "sum", "count", "variance", "mean", "ema")

MEASUREMENTS = SCALAR_MEASUREMENTS + tuple(PERCENTILE_MEASUREMENTS)


class Histogram:
    """
    Streaming distribution of a numeric value.

    The scalar ``val`` view is chosen once with ``measurement`` (one of
    MEASUREMENTS); full_results() returns every statistic at once.

    Thread safety:
    - update() and reads are serialized by a per-instance lock
    """

    def __init__(
        self,
        measurement: str = "mean",
        size: int = SIZE,
        alpha: float = ALPHA,
        rescale_interval: float = RESCALE_INTERVAL,
        random: Optional[Callable[[], float]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize histogram.

        Args:
            measurement: Statistic returned by ``val``
            size: Reservoir capacity
            alpha: Reservoir decay factor
            rescale_interval: Reservoir rescale interval in ms
            random: Random source for the reservoir (deterministic tests)
            clock: Epoch-ms clock for the reservoir

        Raises:
            InvalidMeasurementError: If measurement is not one of MEASUREMENTS
            ConfigurationError: If the reservoir parameters are invalid
        """
        self._measurement = measurement
        self._read_val = self._resolve_measurement(measurement)

        self._sample = ExponentiallyDecayingSample(
            size=size,
            alpha=alpha,
            rescale_interval=rescale_interval,
            random=random,
            clock=clock,
        )
        self._lock = threading.RLock()

        self._count = 0
        self._sum = 0.0
        self._min: Optional[float] = None
        self._max: Optional[float] = None

        # Welford running variance
        self._variance_m = 0.0
        self._variance_s = 0.0
        self._ema: Optional[float] = None

        self._used = False

    def _resolve_measurement(self, measurement: str) -> Callable[[], Optional[float]]:
        scalar_readers: Dict[str, Callable[[], Optional[float]]] = {
            "min": lambda: self.min,
            "max": lambda: self.max,
            "sum": lambda: self.sum,
            "count": lambda: self.count,
            "variance": self.variance,
            "mean": self.mean,
            "ema": lambda: self.ema,
        }

        if measurement in scalar_readers:
            return scalar_readers[measurement]

        if measurement in PERCENTILE_MEASUREMENTS:
            percentile = PERCENTILE_MEASUREMENTS[measurement]
            return lambda: self.percentiles([percentile])[percentile]

        raise InvalidMeasurementError(
            f"Unknown histogram measurement: {measurement!r}. "
            f"Must be one of {list(MEASUREMENTS)}"
        )

    @property
    def measurement(self) -> str:
        return self._measurement

    @property
    def val(self) -> Optional[float]:
        """Value of the configured measurement."""
        return self._read_val()

    @property
    def is_used(self) -> bool:
        return self._used

    @property
    def min(self) -> Optional[float]:
        return self._min

    @property
    def max(self) -> Optional[float]:
        return self._max

    @property
    def sum(self) -> float:
        return self._sum

    @property
    def count(self) -> int:
        return self._count

    @property
    def ema(self) -> Optional[float]:
        return self._ema

    @property
    def sample(self) -> ExponentiallyDecayingSample:
        return self._sample

    def update(self, value: float) -> None:
        """Record one observation."""
        with self._lock:
            self._used = True
            self._count += 1
            self._sum += value

            self._sample.update(value)
            self._update_min(value)
            self._update_max(value)
            self._update_variance(value)
            self._update_ema(value)

    def mean(self) -> Optional[float]:
        with self._lock:
            if self._count == 0:
                return None
            return self._sum / self._count

    def variance(self) -> Optional[float]:
        """Sample variance, None until two observations have been seen."""
        with self._lock:
            if self._count <= 1:
                return None
            return self._variance_s / (self._count - 1)

    def percentiles(self, percentiles: Iterable[float]) -> Dict[float, Optional[float]]:
        """
        Estimate percentiles from one snapshot of the reservoir sample.

        Args:
            percentiles: Fractions in (0, 1), e.g. [0.5, 0.99]

        Returns:
            Mapping of each requested fraction to its estimate (None if the
            sample is empty)
        """
        with self._lock:
            values = np.sort(np.fromiter(self._sample.to_array(), dtype=np.float64))
        return {p: _interpolate(values, p) for p in percentiles}

    def full_results(self) -> HistogramSnapshot:
        """Every statistic, computed from a single sample snapshot."""
        with self._lock:
            estimates = self.percentiles(PERCENTILE_MEASUREMENTS.values())
            return HistogramSnapshot(
                count=self._count,
                sum=self._sum,
                min=self._min,
                max=self._max,
                mean=self.mean(),
                variance=self.variance(),
                ema=self._ema,
                **{
                    name: estimates[percentile]
                    for name, percentile in PERCENTILE_MEASUREMENTS.items()
                },
            )

    def _update_min(self, value: float) -> None:
        if self._min is None or value < self._min:
            self._min = value

    def _update_max(self, value: float) -> None:
        if self._max is None or value > self._max:
            self._max = value

    def _update_variance(self, value: float) -> None:
        if self._count == 1:
            self._variance_m = value
            return

        old_m = self._variance_m
        self._variance_m += (value - old_m) / self._count
        self._variance_s += (value - old_m) * (value - self._variance_m)

    def _update_ema(self, value: float) -> None:
        # alpha shrinks as count grows: cumulative mean early, slow smoother later
        if self._count <= 1:
            self._ema = self._sum / self._count
            return

        alpha = 2 / (1 + self._count)
        self._ema = value * alpha + self._ema * (1 - alpha)


def _interpolate(sorted_values: np.ndarray, percentile: float) -> Optional[float]:
    """Weighted percentile estimate at position p * (n + 1) of a sorted sample."""
    n = len(sorted_values)
    if n == 0:
        return None

    pos = percentile * (n + 1)

    if pos < 1:
        return float(sorted_values[0])
    if pos >= n:
        return float(sorted_values[-1])

    lower = sorted_values[int(np.floor(pos)) - 1]
    upper = sorted_values[int(np.ceil(pos)) - 1]
    return float(lower + (pos - np.floor(pos)) * (upper - lower))

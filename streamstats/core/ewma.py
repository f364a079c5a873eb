"""
Exponentially weighted moving average of an event rate.

Events are accumulated by update() and folded into the rate on every tick():

    instant_rate = count / tick_interval
    rate += alpha * (instant_rate - rate),  alpha = 1 - exp(-tick_interval / time_period)

Rates are per millisecond; rate(unit) converts to the caller's unit.
"""

import math
import threading

from streamstats.core.exceptions import ConfigurationError
from streamstats.utils.units import MINUTES, SECONDS

TICK_INTERVAL = 5 * SECONDS
TIME_PERIOD = 1 * MINUTES


class EWMA:
    """Single decaying rate updated on a fixed tick cadence."""

    def __init__(self, time_period: float = TIME_PERIOD, tick_interval: float = TICK_INTERVAL):
        """
        Args:
            time_period: Decay period in ms (default: 1 minute)
            tick_interval: Expected ms between tick() calls (default: 5 seconds)

        Raises:
            ConfigurationError: If either argument is not positive
        """
        if time_period <= 0:
            raise ConfigurationError(f"EWMA time period must be positive, got {time_period}")
        if tick_interval <= 0:
            raise ConfigurationError(f"EWMA tick interval must be positive, got {tick_interval}")

        self._time_period = time_period
        self._tick_interval = tick_interval
        self._alpha = 1 - math.exp(-tick_interval / time_period)

        self._count = 0.0
        self._rate = 0.0
        # update() and tick() run on different threads when owned by a Meter
        self._lock = threading.Lock()

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    def update(self, n: float = 1) -> None:
        """Accumulate n events; the rate changes on the next tick."""
        with self._lock:
            self._count += n

    def tick(self) -> None:
        """Fold the events seen since the last tick into the rate."""
        with self._lock:
            instant_rate = self._count / self._tick_interval
            self._count = 0.0
            self._rate += self._alpha * (instant_rate - self._rate)

    def rate(self, time_unit: float = 1) -> float:
        """
        Current rate in events per ``time_unit`` milliseconds.

        Example:
            ewma.rate(SECONDS)  # events per second
        """
        return self._rate * time_unit

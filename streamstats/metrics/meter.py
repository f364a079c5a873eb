"""
Meter metric: smoothed event rate.
"""

import weakref
from typing import Optional

from streamstats.core.ewma import EWMA
from streamstats.core.ticker import PeriodicTicker
from streamstats.utils.config import MeterConfig
from streamstats.utils.units import SECONDS


class Meter:
    """
    Exponentially weighted event rate, reported per ``samples`` seconds.

    A background ticker decays the EWMA every ``tick_interval`` ms from the
    moment the meter is built until stop() is called or the meter is
    garbage-collected.

    Usage:
        with Meter(samples=1, timeframe=60) as requests:
            requests.mark()
            print(requests.val)  # requests per second, 2 decimals
    """

    def __init__(
        self,
        samples: Optional[float] = None,
        timeframe: Optional[float] = None,
        tick_interval: Optional[float] = None,
        seconds: Optional[float] = None,
        autostart: bool = True,
    ):
        """
        Initialize meter and start its ticker.

        Args:
            samples: Reporting unit in seconds (default: 1, i.e. per second)
            timeframe: EWMA time period in seconds (default: 60)
            tick_interval: Milliseconds between ticks (default: 5000)
            seconds: Alias for samples
            autostart: Start the background ticker immediately

        Raises:
            ConfigurationError: If any parameter is not positive
        """
        defaults = MeterConfig()
        if samples is None:
            samples = seconds if seconds is not None else defaults.samples
        config = MeterConfig(
            samples=samples,
            timeframe=timeframe if timeframe is not None else defaults.timeframe,
            tick_interval=tick_interval if tick_interval is not None else defaults.tick_interval,
        )

        self._samples = config.samples
        self._timeframe = config.timeframe
        self._tick_interval = config.tick_interval

        self._rate = EWMA(
            time_period=self._timeframe * SECONDS,
            tick_interval=self._tick_interval,
        )
        self._ticker = PeriodicTicker(
            self._rate.tick,
            interval=self._tick_interval,
            name=f"meter-tick-{id(self):x}",
        )
        self._used = False

        # Stops the ticker when the Meter is collected without stop()
        self._finalizer = weakref.finalize(self, self._ticker.stop)

        if autostart:
            self._ticker.start()

    @classmethod
    def from_config(cls, config: MeterConfig, autostart: bool = True) -> "Meter":
        return cls(
            samples=config.samples,
            timeframe=config.timeframe,
            tick_interval=config.tick_interval,
            autostart=autostart,
        )

    @property
    def val(self) -> float:
        """Current rate per ``samples`` seconds, rounded to 2 decimals."""
        return round(self._rate.rate(self._samples * SECONDS), 2)

    @property
    def is_used(self) -> bool:
        return self._used

    @property
    def is_running(self) -> bool:
        return self._ticker.is_running

    def mark(self, n: float = 1) -> None:
        """Record n events."""
        self._used = True
        self._rate.update(n)

    def tick(self) -> None:
        """Decay the rate once; normally called by the background ticker."""
        self._rate.tick()

    def start(self) -> None:
        self._ticker.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Cancel the background ticker."""
        self._ticker.stop(timeout=timeout)

    def __enter__(self) -> "Meter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

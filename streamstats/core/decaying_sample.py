"""
Forward-decaying priority reservoir sample.

Keeps a fixed-size random sample of a stream, biased towards recent values
(Cormode et al., "Forward Decay: A Practical Time Decay Model for Streaming
Systems", ICDE 2009). Each value gets priority ``weight(age) / u`` where
``weight(age) = exp(alpha * age_ms / 1000)`` and ``u ~ Uniform(0, 1)``; the
lowest priority value is evicted first.
"""

import logging
import math
import random as _random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from streamstats.utils.config import ReservoirConfig
from streamstats.utils.units import HOURS

from .binary_heap import BinaryHeap

logger = logging.getLogger(__name__)

RESCALE_INTERVAL = 1 * HOURS
ALPHA = 0.015
SIZE = 1028

# Floor for the uniform draw; u == 0 would give an infinite priority
MIN_UNIFORM = 1e-12


def _epoch_millis() -> float:
    return time.time() * 1000


@dataclass(slots=True)
class SampleElement:
    """Retained observation with its decay-weighted priority."""

    priority: float
    value: float


def _sample_score(element: SampleElement) -> float:
    # Negated so the heap root is the minimum-priority element
    return -element.priority


class ExponentiallyDecayingSample:
    """
    Bounded, recency-biased sample of a numeric stream.

    Architecture:
    - BinaryHeap scored by -priority (root = eviction candidate)
    - Landmark set lazily on the first update
    - Rescale every ``rescale_interval`` ms, triggered inside update()

    Invariant: size() <= capacity at all times.

    Thread safety:
    - None; the owning Histogram serializes access
    """

    def __init__(
        self,
        size: int = SIZE,
        alpha: float = ALPHA,
        rescale_interval: float = RESCALE_INTERVAL,
        random: Optional[Callable[[], float]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the sample.

        Args:
            size: Reservoir capacity (default: 1028)
            alpha: Exponential decay factor (default: 0.015)
            rescale_interval: Milliseconds between landmark resets (default: 1 hour)
            random: Zero-argument callable returning floats in [0, 1)
            clock: Zero-argument callable returning epoch milliseconds

        Raises:
            ConfigurationError: If size, alpha or rescale_interval is not positive
        """
        config = ReservoirConfig(size=size, alpha=alpha, rescale_interval=rescale_interval)

        self._size = config.size
        self._alpha = config.alpha
        self._rescale_interval = config.rescale_interval
        self._random = random or _random.Random().random
        self._clock = clock or _epoch_millis

        self._elements: BinaryHeap[SampleElement] = BinaryHeap(score=_sample_score)
        self._landmark: Optional[float] = None
        self._next_rescale: Optional[float] = None

    @classmethod
    def from_config(
        cls,
        config: ReservoirConfig,
        random: Optional[Callable[[], float]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> "ExponentiallyDecayingSample":
        return cls(
            size=config.size,
            alpha=config.alpha,
            rescale_interval=config.rescale_interval,
            random=random,
            clock=clock,
        )

    @property
    def capacity(self) -> int:
        return self._size

    @property
    def landmark(self) -> Optional[float]:
        """Epoch ms from which ages are measured, None before the first update."""
        return self._landmark

    def update(self, value: float, timestamp: Optional[float] = None) -> None:
        """
        Offer a value to the sample.

        Args:
            value: Observation
            timestamp: Epoch ms of the observation (default: now)
        """
        now = self._clock()
        if self._landmark is None:
            self._landmark = now
            self._next_rescale = now + self._rescale_interval

        # Re-base before weighting so exp() never sees more than one interval of age
        if now >= self._next_rescale:
            self._rescale(now)

        if timestamp is None:
            timestamp = now

        element = SampleElement(
            priority=self._priority(timestamp - self._landmark),
            value=value,
        )

        if self._elements.size() < self._size:
            self._elements.add(element)
        elif element.priority > self._elements.first().priority:
            self._elements.remove_first()
            self._elements.add(element)

    def size(self) -> int:
        return self._elements.size()

    def __len__(self) -> int:
        return self._elements.size()

    def to_array(self) -> List[float]:
        """Retained values in heap order."""
        return [element.value for element in self._elements.to_array()]

    def to_sorted_array(self) -> List[float]:
        """Retained values, highest priority first."""
        # Heap is scored by -priority, so its sorted order is ascending priority
        return [element.value for element in reversed(self._elements.to_sorted_array())]

    def avg(self) -> Optional[float]:
        """
        Mean of the retained values.

        Returns:
            Mean, or None if nothing is retained
        """
        if self._elements.size() == 0:
            return None
        values = np.fromiter(self.to_array(), dtype=np.float64)
        return float(values.mean())

    def clear(self) -> None:
        """Drop every retained value; the next update sets a new landmark."""
        self._elements = BinaryHeap(score=_sample_score)
        self._landmark = None
        self._next_rescale = None

    def _weight(self, age: float) -> float:
        # Age in ms scaled to seconds to keep exp() bounded between rescales
        try:
            return math.exp(self._alpha * (age / 1000))
        except OverflowError:
            return math.inf

    def _priority(self, age: float) -> float:
        u = max(self._random(), MIN_UNIFORM)
        return self._weight(age) / u

    def _rescale(self, now: float) -> None:
        """
        Re-base every priority on a new landmark.

        All priorities share one factor, so their relative order (and the
        heap layout) is unchanged.
        """
        old_landmark = self._landmark
        self._landmark = now
        self._next_rescale = now + self._rescale_interval

        factor = self._weight(-(self._landmark - old_landmark))
        for element in self._elements.to_array():
            element.priority *= factor

        logger.debug(
            f"Rescaled {self._elements.size()} sample elements "
            f"(landmark moved {now - old_landmark:.0f}ms, factor={factor:.6g})"
        )

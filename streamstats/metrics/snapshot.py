"""
Histogram snapshot data structure.

Holds one consistent read of a histogram: exact running aggregates plus
percentiles estimated from a single copy of the reservoir sample.
"""

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass(slots=True)
class HistogramSnapshot:
    """
    Full results of a histogram at one point in time.

    Every field except count and sum is None while the histogram is empty;
    variance stays None until a second observation arrives.
    """

    count: int = 0
    sum: float = 0.0
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    variance: Optional[float] = None
    ema: Optional[float] = None

    # Percentiles estimated from the reservoir sample
    median: Optional[float] = None
    p75: Optional[float] = None
    p95: Optional[float] = None
    p99: Optional[float] = None
    p999: Optional[float] = None

    # Metadata
    taken_at: float = field(default_factory=time.time, compare=False)

    @property
    def p50(self) -> Optional[float]:
        return self.median

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "min": self.min,
            "max": self.max,
            "sum": self.sum,
            "variance": self.variance,
            "mean": self.mean,
            "count": self.count,
            "median": self.median,
            "p75": self.p75,
            "p95": self.p95,
            "p99": self.p99,
            "p999": self.p999,
            "ema": self.ema,
        }

"""
Tag-keyed statistics registry with JSON-ready reporting.

Each tag is one of three kinds:
- counter: a running total
- samples: count plus running min / max / mean of added values
- data: an arbitrary payload, last write wins
"""

import json
import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from streamstats.utils.logger import StatsLogger

# Sentinels so the first sample always replaces them
_INITIAL_MIN = float("inf")
_INITIAL_MAX = float("-inf")


class StatisticsType(str, Enum):
    COUNTER = "counter"
    SAMPLES = "samples"
    DATA = "data"


@dataclass(slots=True)
class TagItem:
    """Accumulated state of one tag."""

    type: StatisticsType
    title: str
    counter: float = 0
    min: float = _INITIAL_MIN
    max: float = _INITIAL_MAX
    avg: float = 0.0
    data: Any = None

    def reset(self) -> None:
        self.counter = 0
        self.min = _INITIAL_MIN
        self.max = _INITIAL_MAX
        self.avg = 0.0
        self.data = None


class TimerHandle:
    """
    Elapsed-time recorder returned by Statistics.timer().

    Records whole milliseconds into the tag (or ``<tag>_<type>``).
    """

    __slots__ = ("_stats", "_tag", "_start")

    def __init__(self, stats: "Statistics", tag: str):
        self._stats = stats
        self._tag = tag
        self._start = time.perf_counter()

    def end(self, type: Optional[str] = None) -> int:
        spent = int((time.perf_counter() - self._start) * 1000)
        name = f"{self._tag}_{type}" if type else self._tag
        self._stats.add(name, spent)
        return spent

    def ok(self) -> int:
        return self.end("success")

    def err(self) -> int:
        return self.end("error")


class Statistics:
    """
    Registry of named statistics for one process.

    Tags must be registered with init() first; updates to unknown tags are
    ignored so instrumentation never breaks the caller.

    Usage:
        stats = Statistics("api")
        stats.init(StatisticsType.SAMPLES, "db_query_success")
        timer = stats.timer("db_query")
        ...
        timer.ok()
        report = stats.json_report()
    """

    def __init__(self, app_name: Optional[str] = None):
        self.app_name = app_name
        self.pid = os.getpid()
        self.app_instance = int(os.getenv("APP_INSTANCE", "0"))
        self._tags: Dict[str, TagItem] = {}

    def get(self, tag: str) -> Optional[TagItem]:
        return self._tags.get(tag)

    def init(self, type: StatisticsType, tag: str, title: Optional[str] = None) -> None:
        """Register (or reset) a tag."""
        self._tags[tag] = TagItem(type=StatisticsType(type), title=title or tag)

    def incr(self, tag: str, n: float = 1) -> "Statistics":
        item = self._tags.get(tag)
        if item:
            item.counter += n
        return self

    def decr(self, tag: str, n: float = 1) -> "Statistics":
        return self.incr(tag, -n)

    def add(self, tag: str, n: float) -> "Statistics":
        """Add a sample: updates min, max, the incremental mean and the count."""
        item = self._tags.get(tag)
        if item:
            if n < item.min:
                item.min = n
            if n > item.max:
                item.max = n
            item.avg = (n - item.avg) / (item.counter + 1) + item.avg
            item.counter += 1
        return self

    def set(self, tag: str, data: Any) -> None:
        item = self._tags.get(tag)
        if item:
            item.data = data

    def timer(self, tag: str) -> TimerHandle:
        return TimerHandle(self, tag)

    def json_report(self) -> dict:
        """
        Snapshot of every tag as a JSON-serializable dict.

        Returns:
            Dict with pid, app_instance, app_name, time (ISO 8601 UTC) and
            list (one entry per tag, shape depending on its kind)
        """
        entries = []
        for tag, item in self._tags.items():
            if item.type is StatisticsType.COUNTER:
                entries.append({"tag": tag, "type": item.type.value, "counter": item.counter})

            elif item.type is StatisticsType.SAMPLES:
                entry = {"tag": tag, "type": item.type.value, "counter": item.counter}
                if item.counter == 1:
                    entry.update(min=item.avg, max=item.avg, avg=item.avg)
                elif item.counter > 1:
                    entry.update(min=item.min, max=item.max, avg=round(item.avg, 4))
                entries.append(entry)

            elif item.type is StatisticsType.DATA:
                entries.append({"tag": tag, "type": item.type.value, "data": item.data})

        return {
            "pid": self.pid,
            "app_instance": self.app_instance,
            "app_name": self.app_name,
            "time": datetime.now(timezone.utc).isoformat(),
            "list": entries,
        }

    def dump_report(self) -> str:
        """json_report() rendered as a JSON string."""
        return json.dumps(self.json_report(), default=str)

    def log_report(self) -> None:
        """Emit the report as one JSON line on the report logger."""
        StatsLogger.log_report(self.json_report())

    def flush(self) -> None:
        """Reset every tag, keeping registrations."""
        for item in self._tags.values():
            item.reset()

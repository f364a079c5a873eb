"""
Counter metric.
"""


class Counter:
    """Monotonic-by-convention counter that remembers whether it was touched."""

    def __init__(self, count: float = 0):
        self._count = count
        self._used = False

    @property
    def val(self) -> float:
        return self._count

    @property
    def is_used(self) -> bool:
        return self._used

    def inc(self, n: float = 1) -> None:
        self._used = True
        self._count += n

    def dec(self, n: float = 1) -> None:
        self._used = True
        self._count -= n

    def reset(self, count: float = 0) -> None:
        """Set the count without marking the counter as used."""
        self._count = count

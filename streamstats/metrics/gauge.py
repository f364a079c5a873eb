"""
Gauge metric.
"""


class Gauge:
    """Last value wins."""

    def __init__(self):
        self._value = 0
        self._used = False

    @property
    def val(self) -> float:
        return self._value

    @property
    def is_used(self) -> bool:
        return self._used

    def set(self, value: float) -> None:
        self._used = True
        self._value = value

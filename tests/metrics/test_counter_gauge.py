"""
Unit tests for Counter and Gauge
"""

from streamstats.metrics.counter import Counter
from streamstats.metrics.gauge import Gauge


class TestCounter:
    """Test Counter"""

    def test_starts_at_zero(self):
        """Verify default initial count"""
        counter = Counter()

        assert counter.val == 0
        assert not counter.is_used

    def test_initial_count(self):
        """Verify a custom starting count"""
        assert Counter(count=10).val == 10

    def test_inc_and_dec(self):
        """Verify increments and decrements by one and by arbitrary deltas"""
        counter = Counter()
        counter.inc()
        counter.inc(5)
        counter.dec()
        counter.dec(2)

        assert counter.val == 3
        assert counter.is_used

    def test_reset(self):
        """Verify reset() sets the count and leaves the used flag alone"""
        counter = Counter()
        counter.reset(7)
        assert counter.val == 7
        assert not counter.is_used

        counter.inc()
        counter.reset()
        assert counter.val == 0
        assert counter.is_used


class TestGauge:
    """Test Gauge"""

    def test_initial_value(self):
        """Verify default value and used flag"""
        gauge = Gauge()

        assert gauge.val == 0
        assert not gauge.is_used

    def test_last_value_wins(self):
        """Verify set() replaces the value"""
        gauge = Gauge()
        gauge.set(3.5)
        gauge.set(-1)

        assert gauge.val == -1
        assert gauge.is_used

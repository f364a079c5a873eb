"""
Unit tests for the timing decorators and context manager
"""

import asyncio

import pytest

from streamstats.metrics.statistics import Statistics, StatisticsType
from streamstats.metrics.timing import measure, measure_async, measure_sync


@pytest.fixture
def stats():
    registry = Statistics("timing")
    registry.init(StatisticsType.SAMPLES, "op_success")
    registry.init(StatisticsType.SAMPLES, "op_error")
    return registry


class TestMeasureSync:
    """Test @measure_sync"""

    def test_success_recorded(self, stats):
        """Verify a normal return records into <tag>_success"""

        @measure_sync(stats, "op")
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert stats.get("op_success").counter == 1
        assert stats.get("op_error").counter == 0

    def test_error_recorded_and_reraised(self, stats):
        """Verify exceptions propagate and record into <tag>_error"""

        @measure_sync(stats, "op")
        def fail():
            raise ValueError("bad input")

        with pytest.raises(ValueError, match="bad input"):
            fail()

        assert stats.get("op_error").counter == 1
        assert stats.get("op_success").counter == 0

    def test_preserves_metadata(self, stats):
        """Verify functools.wraps keeps the function name"""

        @measure_sync(stats, "op")
        def documented():
            """Docstring"""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring"


class TestMeasureAsync:
    """Test @measure_async"""

    @pytest.mark.asyncio
    async def test_success_recorded(self, stats):
        """Verify awaited result and success timing"""

        @measure_async(stats, "op")
        async def fetch():
            await asyncio.sleep(0)
            return "payload"

        assert await fetch() == "payload"
        assert stats.get("op_success").counter == 1

    @pytest.mark.asyncio
    async def test_error_recorded(self, stats):
        """Verify async exceptions propagate and record into <tag>_error"""

        @measure_async(stats, "op")
        async def fail():
            raise RuntimeError("timeout")

        with pytest.raises(RuntimeError):
            await fail()

        assert stats.get("op_error").counter == 1


class TestMeasureContext:
    """Test the measure context manager"""

    def test_block_success(self, stats):
        """Verify a clean block records success"""
        with measure(stats, "op"):
            sum(range(100))

        assert stats.get("op_success").counter == 1

    def test_block_error_not_suppressed(self, stats):
        """Verify exceptions leave the block and record an error"""
        with pytest.raises(KeyError):
            with measure(stats, "op"):
                {}["missing"]

        assert stats.get("op_error").counter == 1
        assert stats.get("op_success").counter == 0

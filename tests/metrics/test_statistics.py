"""
Unit tests for the Statistics registry and its JSON report
"""

import json
import logging
from unittest.mock import patch

import pytest

from streamstats.metrics.statistics import Statistics, StatisticsType, TagItem
from streamstats.utils.logger import REPORT_LOGGER


@pytest.fixture
def stats(monkeypatch):
    monkeypatch.delenv("APP_INSTANCE", raising=False)
    return Statistics("test-app")


def _entry(report: dict, tag: str) -> dict:
    return next(item for item in report["list"] if item["tag"] == tag)


class TestStatisticsTags:
    """Test tag registration and updates"""

    def test_init_and_get(self, stats):
        """Verify init() registers a tag with defaults"""
        stats.init(StatisticsType.COUNTER, "requests", "Requests served")

        item = stats.get("requests")
        assert isinstance(item, TagItem)
        assert item.type is StatisticsType.COUNTER
        assert item.title == "Requests served"
        assert item.counter == 0

    def test_title_defaults_to_tag(self, stats):
        """Verify title falls back to the tag name"""
        stats.init("samples", "latency")

        assert stats.get("latency").title == "latency"
        assert stats.get("latency").type is StatisticsType.SAMPLES

    def test_get_unknown_tag(self, stats):
        """Verify get() on an unknown tag returns None"""
        assert stats.get("missing") is None

    def test_incr_decr_chain(self, stats):
        """Verify incr/decr adjust the counter and return the registry"""
        stats.init(StatisticsType.COUNTER, "jobs")

        stats.incr("jobs").incr("jobs", 4).decr("jobs", 2)

        assert stats.get("jobs").counter == 3

    def test_add_tracks_min_max_avg(self, stats):
        """Verify add() maintains min, max and the running mean"""
        stats.init(StatisticsType.SAMPLES, "latency")

        for value in [10, 30, 20]:
            stats.add("latency", value)

        item = stats.get("latency")
        assert item.counter == 3
        assert item.min == 10
        assert item.max == 30
        assert item.avg == pytest.approx(20)

    def test_set_data(self, stats):
        """Verify set() stores arbitrary payloads"""
        stats.init(StatisticsType.DATA, "build")
        stats.set("build", {"version": "1.2.3"})

        assert stats.get("build").data == {"version": "1.2.3"}

    def test_unknown_tags_are_ignored(self, stats):
        """Verify updates to unregistered tags are no-ops"""
        stats.incr("nope").add("nope", 1)
        stats.set("nope", 1)

        assert stats.get("nope") is None

    def test_flush_resets_values(self, stats):
        """Verify flush() clears values but keeps registrations"""
        stats.init(StatisticsType.SAMPLES, "latency")
        stats.add("latency", 5)
        stats.init(StatisticsType.DATA, "build")
        stats.set("build", "abc")

        stats.flush()

        assert stats.get("latency").counter == 0
        assert stats.get("latency").avg == 0
        assert stats.get("build").data is None


class TestStatisticsTimer:
    """Test the timer handle"""

    def test_end_records_elapsed_ms(self, stats):
        """Verify end() adds whole milliseconds to the tag"""
        stats.init(StatisticsType.SAMPLES, "query")

        with patch("streamstats.metrics.statistics.time") as time_mock:
            time_mock.perf_counter.side_effect = [1.0, 1.25]
            spent = stats.timer("query").end()

        assert spent == 250
        assert stats.get("query").avg == 250

    def test_ok_and_err_use_suffixed_tags(self, stats):
        """Verify ok()/err() record into <tag>_success / <tag>_error"""
        stats.init(StatisticsType.SAMPLES, "query_success")
        stats.init(StatisticsType.SAMPLES, "query_error")

        stats.timer("query").ok()
        stats.timer("query").ok()
        stats.timer("query").err()

        assert stats.get("query_success").counter == 2
        assert stats.get("query_error").counter == 1


class TestStatisticsReport:
    """Test json_report/dump_report/log_report"""

    def test_report_header(self, stats):
        """Verify process identity fields"""
        report = stats.json_report()

        assert report["app_name"] == "test-app"
        assert isinstance(report["pid"], int)
        assert report["app_instance"] == 0
        assert "T" in report["time"]
        assert report["list"] == []

    def test_app_instance_from_env(self, monkeypatch):
        """Verify APP_INSTANCE is read from the environment"""
        monkeypatch.setenv("APP_INSTANCE", "3")

        assert Statistics().json_report()["app_instance"] == 3

    def test_counter_entry(self, stats):
        """Verify counter tags report only their counter"""
        stats.init(StatisticsType.COUNTER, "requests")
        stats.incr("requests", 2)

        assert _entry(stats.json_report(), "requests") == {
            "tag": "requests", "type": "counter", "counter": 2,
        }

    def test_samples_entry_shapes(self, stats):
        """Verify samples report by count: 0, 1 and many"""
        stats.init(StatisticsType.SAMPLES, "empty")
        stats.init(StatisticsType.SAMPLES, "single")
        stats.init(StatisticsType.SAMPLES, "many")
        stats.add("single", 7)
        for value in [1, 2, 2]:
            stats.add("many", value)

        report = stats.json_report()

        assert _entry(report, "empty") == {"tag": "empty", "type": "samples", "counter": 0}
        assert _entry(report, "single") == {
            "tag": "single", "type": "samples", "counter": 1, "min": 7, "max": 7, "avg": 7,
        }
        assert _entry(report, "many") == {
            "tag": "many", "type": "samples", "counter": 3, "min": 1, "max": 2, "avg": 1.6667,
        }

    def test_data_entry(self, stats):
        """Verify data tags report their payload"""
        stats.init(StatisticsType.DATA, "build")
        stats.set("build", [1, 2])

        assert _entry(stats.json_report(), "build") == {
            "tag": "build", "type": "data", "data": [1, 2],
        }

    def test_dump_report_is_json(self, stats):
        """Verify dump_report() renders valid JSON"""
        stats.init(StatisticsType.COUNTER, "requests")

        decoded = json.loads(stats.dump_report())

        assert decoded["list"][0]["tag"] == "requests"

    def test_log_report(self, stats, caplog):
        """Verify log_report() emits one JSON line on the report logger"""
        stats.init(StatisticsType.COUNTER, "requests")
        stats.incr("requests")

        with caplog.at_level(logging.INFO, logger=REPORT_LOGGER):
            stats.log_report()

        records = [r for r in caplog.records if r.name == REPORT_LOGGER]
        assert len(records) == 1
        payload = json.loads(records[0].getMessage())
        assert payload["app_name"] == "test-app"
        assert payload["list"][0]["counter"] == 1
        assert "logged_at" in payload

"""Tests for performance logging."""

import pytest
from structlog.testing import capture_logs

from tablestat.logging.performance import PerformanceLogger, TimingContext, TimingMetrics


class TestTimingMetrics:

    def test_incomplete(self):
        timing = TimingMetrics(operation="connect", start_time=1.0)

        assert not timing.is_complete
        assert timing.duration_ms is None

    def test_complete(self):
        timing = TimingMetrics(operation="connect", start_time=0.0)

        timing.complete(success=False, error="refused")

        assert timing.is_complete
        assert timing.duration is not None
        assert timing.duration_ms == pytest.approx(timing.duration * 1000)
        assert timing.success is False
        assert timing.error == "refused"


class TestTimingContext:

    def test_measures_duration(self):
        with TimingContext("stat_query") as timer:
            pass

        assert timer.timing.is_complete
        assert timer.duration >= 0

    def test_silent_without_logger(self):
        with capture_logs() as logs:
            with TimingContext("stat_query"):
                pass

        assert logs == []


class TestPerformanceLogger:

    def test_records_timings(self):
        perf = PerformanceLogger("connector")

        with perf.measure("connect"):
            pass
        with perf.measure("stat_query", rows=3):
            pass

        assert [t.operation for t in perf.timings] == ["connect", "stat_query"]
        assert perf.last("stat_query").metadata == {"rows": 3}
        assert perf.last("missing") is None

    def test_failure_recorded_and_reraised(self):
        perf = PerformanceLogger("connector")

        with pytest.raises(RuntimeError):
            with perf.measure("connect"):
                raise RuntimeError("refused")

        timing = perf.last("connect")
        assert timing.success is False
        assert timing.error == "refused"

    def test_auto_log(self):
        perf = PerformanceLogger("connector")

        with capture_logs() as logs:
            with perf.measure("connect"):
                pass

        assert [entry["event"] for entry in logs] == [
            "Operation started",
            "Operation completed",
        ]
        assert logs[1]["operation"] == "connect"
        assert "duration_ms" in logs[1]

    def test_auto_log_disabled(self):
        perf = PerformanceLogger("connector", auto_log=False)

        with capture_logs() as logs:
            with perf.measure("connect"):
                pass

        assert logs == []
        assert len(perf.timings) == 1

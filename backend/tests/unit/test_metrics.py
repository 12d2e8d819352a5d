"""
Unit tests for metrics collection.
"""

import pytest

from weekly.core.metrics import (
    ApplicationMetrics,
    Counter,
    Histogram,
    get_metrics,
)


class TestCounter:
    """Tests for Counter metric."""

    def test_counter_increment(self):
        """Test counter increment."""
        counter = Counter("test_counter", "Test counter")
        counter.inc()
        assert counter.get() == 1
        counter.inc()
        assert counter.get() == 2

    def test_counter_increment_by_value(self):
        counter = Counter("test_counter", "Test counter")
        counter.inc(5)
        counter.inc(3)
        assert counter.get() == 8

    def test_counter_with_labels(self):
        """Test counter with labels."""
        counter = Counter("test_counter", "Test counter")
        counter.inc(tool_name="list_data_sources", status="success")
        counter.inc(tool_name="get_zoom_meetings", status="error")
        counter.inc(status="success", tool_name="list_data_sources")

        assert counter.get(tool_name="list_data_sources", status="success") == 2
        assert counter.get(tool_name="get_zoom_meetings", status="error") == 1
        assert counter.get(tool_name="get_template", status="success") == 0

    def test_counter_get_all(self):
        counter = Counter("test_counter", "Test counter")
        counter.inc(source="slack")
        counter.inc(source="zoom")
        counter.inc(source="slack")

        all_values = counter.get_all()
        assert len(all_values) == 2
        slack = next(v for v in all_values if v.labels.get("source") == "slack")
        assert slack.value == 2


class TestHistogram:
    """Tests for Histogram metric."""

    def test_histogram_observe(self):
        """Test histogram observe."""
        histogram = Histogram("test_histogram", "Test histogram")
        histogram.observe(0.5)
        histogram.observe(1.0)
        histogram.observe(2.0)

        stats = histogram.get_stats()
        assert stats["count"] == 3
        assert stats["sum"] == 3.5
        assert stats["avg"] == pytest.approx(1.167, rel=0.01)
        assert stats["min"] == 0.5
        assert stats["max"] == 2.0

    def test_empty_histogram(self):
        stats = Histogram("empty", "Empty").get_stats()

        assert stats == {"count": 0, "sum": 0, "avg": 0, "min": 0, "max": 0}

    def test_histogram_with_labels(self):
        histogram = Histogram("tool_duration", "Tool duration")
        histogram.observe(0.5, tool_name="get_zoom_meetings")
        histogram.observe(0.3, tool_name="get_zoom_meetings")
        histogram.observe(1.0, tool_name="read_sheet_data")

        assert histogram.get_stats(tool_name="get_zoom_meetings")["avg"] == pytest.approx(0.4)
        assert histogram.get_stats(tool_name="read_sheet_data")["count"] == 1


class TestApplicationMetrics:
    """Tests for ApplicationMetrics."""

    def test_record_request(self):
        metrics = ApplicationMetrics()
        metrics.record_request(method="GET", endpoint="/api/templates", status=200, duration=0.05)

        assert metrics.requests_total.get(method="GET", endpoint="/api/templates", status="200") == 1

    def test_record_chat_turn(self):
        metrics = ApplicationMetrics()
        metrics.record_chat_turn("done", 1.5)
        metrics.record_chat_turn("cancelled", 0.5)

        assert metrics.chat_turns_total.get(state="done") == 1
        assert metrics.chat_turn_duration.get_stats()["count"] == 2

    def test_record_tool_call(self):
        metrics = ApplicationMetrics()
        metrics.record_tool_call("get_slack_conversations", success=False, duration=0.01)

        assert metrics.tool_calls_total.get(tool_name="get_slack_conversations", status="error") == 1

    def test_record_connection_attempt(self):
        metrics = ApplicationMetrics()
        metrics.record_connection_attempt("zoom", success=True)
        metrics.record_connection_attempt("zoom", success=False)

        assert metrics.connections_total.get(source="zoom", status="success") == 1
        assert metrics.connections_total.get(source="zoom", status="failure") == 1

    def test_record_llm_call(self):
        metrics = ApplicationMetrics()
        metrics.record_llm_call(model="claude-sonnet", input_tokens=100, output_tokens=50)

        assert metrics.llm_calls_total.get(model="claude-sonnet") == 1
        assert metrics.llm_tokens.get(model="claude-sonnet", direction="input") == 100
        assert metrics.llm_tokens.get(model="claude-sonnet", direction="output") == 50

    def test_record_error(self):
        metrics = ApplicationMetrics()
        metrics.record_error("NOT_CONNECTED")

        assert metrics.errors_total.get(code="NOT_CONNECTED") == 1

    def test_get_summary(self):
        metrics = ApplicationMetrics()
        metrics.record_request("GET", "/api/chat", 200, 0.5)
        metrics.record_chat_turn("done", 2.0)
        metrics.record_tool_call("list_templates", True, 0.01)
        metrics.record_error("UNKNOWN_TOOL")

        summary = metrics.get_summary()

        assert summary["requests"] == 1
        assert summary["chat_turns"] == 1
        assert summary["avg_chat_turn_seconds"] == 2.0
        assert summary["tool_calls"] == 1
        assert summary["errors"] == 1

    def test_export_prometheus(self):
        metrics = ApplicationMetrics()
        metrics.record_tool_call("list_templates", True, 0.01)

        output = metrics.export_prometheus()

        assert "# HELP weekly_tool_calls_total" in output
        assert "# TYPE weekly_tool_calls_total counter" in output
        assert 'weekly_tool_calls_total{status="success",tool_name="list_templates"} 1.0' in output


class TestGlobalMetrics:
    """Tests for global metrics instance."""

    def test_get_metrics_returns_instance(self):
        assert get_metrics() is get_metrics()
        assert isinstance(get_metrics(), ApplicationMetrics)

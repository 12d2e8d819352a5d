"""
Metrics collection for the weekly update assistant.

Keeps in-process counters and histograms and renders them in the
Prometheus text format for the /health/metrics endpoint.
"""

import time
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Dict, List


@dataclass
class MetricValue:
    """A single metric value with labels."""

    value: float
    labels: Dict[str, str] = field(default_factory=dict)


class Counter:
    """A monotonically increasing counter metric."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self._values: Dict[tuple, float] = defaultdict(float)
        self._lock = Lock()

    def inc(self, value: float = 1, **labels) -> None:
        """Increment the counter."""
        label_key = tuple(sorted(labels.items()))
        with self._lock:
            self._values[label_key] += value

    def get(self, **labels) -> float:
        """Get current counter value."""
        label_key = tuple(sorted(labels.items()))
        with self._lock:
            return self._values.get(label_key, 0)

    def get_all(self) -> List[MetricValue]:
        """Get all counter values with labels."""
        with self._lock:
            return [
                MetricValue(value=value, labels=dict(label_key))
                for label_key, value in self._values.items()
            ]


class Histogram:
    """A histogram metric for measuring distributions such as latencies."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self._observations: Dict[tuple, List[float]] = defaultdict(list)
        self._lock = Lock()

    def observe(self, value: float, **labels) -> None:
        """Record an observation."""
        label_key = tuple(sorted(labels.items()))
        with self._lock:
            self._observations[label_key].append(value)

    def get_stats(self, **labels) -> Dict[str, float]:
        """Get histogram statistics."""
        label_key = tuple(sorted(labels.items()))
        with self._lock:
            observations = self._observations.get(label_key, [])
            if not observations:
                return {"count": 0, "sum": 0, "avg": 0, "min": 0, "max": 0}

            return {
                "count": len(observations),
                "sum": sum(observations),
                "avg": sum(observations) / len(observations),
                "min": min(observations),
                "max": max(observations),
            }


# ============ Application Metrics ============


class ApplicationMetrics:
    """Central metrics registry for the application."""

    def __init__(self):
        self.requests_total = Counter(
            "weekly_requests_total",
            "Total number of HTTP requests",
        )
        self.request_duration = Histogram(
            "weekly_request_duration_seconds",
            "HTTP request duration in seconds",
        )
        self.chat_turns_total = Counter(
            "weekly_chat_turns_total",
            "Chat turns completed, by final state",
        )
        self.chat_turn_duration = Histogram(
            "weekly_chat_turn_seconds",
            "Chat turn duration in seconds",
        )
        self.tool_calls_total = Counter(
            "weekly_tool_calls_total",
            "Tool dispatches, by tool and status",
        )
        self.tool_duration = Histogram(
            "weekly_tool_duration_seconds",
            "Tool dispatch duration in seconds",
        )
        self.llm_calls_total = Counter(
            "weekly_llm_calls_total",
            "Total model API calls",
        )
        self.llm_tokens = Counter(
            "weekly_llm_tokens_total",
            "Total model tokens used",
        )
        self.connections_total = Counter(
            "weekly_connection_attempts_total",
            "Data source connect attempts, by source and status",
        )
        self.errors_total = Counter(
            "weekly_errors_total",
            "Errors, by error code",
        )

    def record_request(self, method: str, endpoint: str, status: int, duration: float) -> None:
        """Record an HTTP request."""
        self.requests_total.inc(method=method, endpoint=endpoint, status=str(status))
        self.request_duration.observe(duration, method=method)

    def record_chat_turn(self, final_state: str, duration: float) -> None:
        """Record a completed chat turn."""
        self.chat_turns_total.inc(state=final_state)
        self.chat_turn_duration.observe(duration)

    def record_tool_call(self, tool_name: str, success: bool, duration: float) -> None:
        """Record a tool dispatch."""
        status = "success" if success else "error"
        self.tool_calls_total.inc(tool_name=tool_name, status=status)
        self.tool_duration.observe(duration, tool_name=tool_name)

    def record_connection_attempt(self, source: str, success: bool) -> None:
        """Record the outcome of a connect call."""
        self.connections_total.inc(source=source, status="success" if success else "failure")

    def record_llm_call(self, model: str, input_tokens: int, output_tokens: int) -> None:
        """Record a model API call."""
        self.llm_calls_total.inc(model=model)
        self.llm_tokens.inc(input_tokens, model=model, direction="input")
        self.llm_tokens.inc(output_tokens, model=model, direction="output")

    def record_error(self, error_code: str) -> None:
        """Record an error."""
        self.errors_total.inc(code=error_code)

    # ============ Export Methods ============

    def export_prometheus(self) -> str:
        """Export counters in Prometheus text format."""
        lines = []

        for attr in vars(self).values():
            if not isinstance(attr, Counter):
                continue
            lines.append(f"# HELP {attr.name} {attr.description}")
            lines.append(f"# TYPE {attr.name} counter")
            for mv in attr.get_all():
                label_str = ",".join(f'{k}="{v}"' for k, v in mv.labels.items())
                label_part = f"{{{label_str}}}" if label_str else ""
                lines.append(f"{attr.name}{label_part} {mv.value}")

        return "\n".join(lines)

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of all metrics."""
        return {
            "requests": sum(mv.value for mv in self.requests_total.get_all()),
            "chat_turns": sum(mv.value for mv in self.chat_turns_total.get_all()),
            "avg_chat_turn_seconds": self.chat_turn_duration.get_stats()["avg"],
            "tool_calls": sum(mv.value for mv in self.tool_calls_total.get_all()),
            "llm_calls": sum(mv.value for mv in self.llm_calls_total.get_all()),
            "errors": sum(mv.value for mv in self.errors_total.get_all()),
        }


# Global metrics instance
metrics = ApplicationMetrics()


def get_metrics() -> ApplicationMetrics:
    """Get the global metrics instance."""
    return metrics


# ============ Middleware for Request Metrics ============


class MetricsMiddleware:
    """ASGI middleware that records request counts and latencies."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500  # Default if something goes wrong

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            metrics.record_request(
                method=scope.get("method", "UNKNOWN"),
                endpoint=scope.get("path", "/"),
                status=status_code,
                duration=time.perf_counter() - start,
            )

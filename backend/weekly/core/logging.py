"""
Structured logging configuration for the weekly update assistant.

Provides JSON-formatted or readable logs with context propagation, so
every line emitted while serving a conversation carries its request,
conversation and data source identifiers.
"""

import logging
import json
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
conversation_id_var: ContextVar[str] = ContextVar("conversation_id", default="")
datasource_var: ContextVar[str] = ContextVar("datasource", default="")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())[:8]


def set_request_context(
    request_id: Optional[str] = None,
    conversation_id: Optional[str] = None,
    datasource: Optional[str] = None,
) -> str:
    """Set request context variables for logging."""
    req_id = request_id or generate_request_id()
    request_id_var.set(req_id)
    if conversation_id:
        conversation_id_var.set(conversation_id[:8])
    if datasource:
        datasource_var.set(datasource)
    return req_id


def clear_request_context() -> None:
    """Clear request context after request completes."""
    request_id_var.set("")
    conversation_id_var.set("")
    datasource_var.set("")


def _context_fields() -> Dict[str, str]:
    fields = {}
    if request_id := request_id_var.get():
        fields["request_id"] = request_id
    if conversation_id := conversation_id_var.get():
        fields["conversation_id"] = conversation_id
    if datasource := datasource_var.get():
        fields["datasource"] = datasource
    return fields


class StructuredLogFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per line, suitable for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update(_context_fields())

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable, colorized formatter for local development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    SHORT_KEYS = {"request_id": "req", "conversation_id": "conv", "datasource": "ds"}

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        context = _context_fields()
        context_str = ""
        if context:
            parts = ", ".join(f"{self.SHORT_KEYS[k]}={v}" for k, v in context.items())
            context_str = f" [{parts}]"

        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]

        log_line = (
            f"{color}{timestamp} {record.levelname:8}{reset}"
            f"{context_str} "
            f"{record.name}: {record.getMessage()}"
        )

        if hasattr(record, "extra_fields") and record.extra_fields:
            extras = " | ".join(f"{k}={v}" for k, v in record.extra_fields.items())
            log_line += f" | {extras}"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that carries structured fields through to the formatters.

    Usage:
        logger = get_logger(__name__)
        logger.info("Tool executed", extra={"tool": "get_zoom_meetings", "duration_ms": 150})
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.get("extra", {})
        if extra:
            kwargs["extra"] = {"extra_fields": extra}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """
    Get a configured logger with context support.

    Args:
        name: Logger name (typically __name__)

    Returns:
        ContextLogger instance
    """
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format for production, readable format for development
        stream: Output stream, stdout by default. The stdio protocol server
            passes stderr because stdout carries protocol frames.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(StructuredLogFormatter() if json_format else DevelopmentFormatter())
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    for noisy in ("httpx", "httpcore", "urllib3", "asyncio", "googleapiclient.discovery_cache", "slack_sdk"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ============ Specialized Loggers ============


class PerformanceLogger:
    """Logger specialized for performance metrics."""

    def __init__(self, name: str = "performance"):
        self.logger = get_logger(name)

    def log_tool_execution(
        self,
        tool_name: str,
        datasource: str,
        duration_ms: float,
        success: bool = True,
    ) -> None:
        """Log tool execution metrics."""
        self.logger.info(
            f"Tool execution: {tool_name}",
            extra={
                "tool_name": tool_name,
                "datasource": datasource,
                "duration_ms": round(duration_ms, 2),
                "success": success,
            },
        )

    def log_llm_call(
        self,
        model: str,
        input_tokens: int,
        output_tokens: int,
        duration_ms: float,
    ) -> None:
        """Log model call metrics."""
        self.logger.info(
            "LLM call",
            extra={
                "model": model,
                "input_tokens": input_tokens,
                "output_tokens": output_tokens,
                "duration_ms": round(duration_ms, 2),
            },
        )


perf_logger = PerformanceLogger()

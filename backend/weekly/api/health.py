"""
Health check endpoints.

Liveness, configuration and metrics endpoints for monitoring. None of
them touch a vendor API.
"""

import platform
import sys
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from weekly.connectors import CONNECTOR_CLASSES
from weekly.core.config import Settings, settings as default_settings
from weekly.core.logging import get_logger
from weekly.core.metrics import get_metrics

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])

# Track application start time
_start_time = time.time()


def get_settings() -> Settings:
    """Dependency provider for settings."""
    return default_settings


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """
    Basic health check endpoint.

    Returns 200 if the application is running.
    """
    uptime_seconds = time.time() - _start_time
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "version": settings.version,
        "environment": settings.environment,
        "uptime": _format_uptime(uptime_seconds),
        "python_version": sys.version.split()[0],
        "platform": platform.system(),
        "metrics": get_metrics().get_summary(),
    }


@router.get("/health/live")
async def liveness_probe():
    """Liveness probe."""
    return {"status": "alive"}


@router.get("/health/metrics")
async def metrics_endpoint():
    """
    Prometheus-compatible metrics endpoint.

    Returns metrics in Prometheus text format for scraping.
    """
    return PlainTextResponse(
        content=get_metrics().export_prometheus(),
        media_type="text/plain; version=0.0.4",
    )


@router.get("/health/config")
async def config_check(settings: Settings = Depends(get_settings)):
    """
    Configuration health check.

    Reports which credentials are present without exposing them. Missing
    connector credentials are not an error: connect reports them.
    """
    connectors = {}
    for cls in CONNECTOR_CLASSES:
        connector = cls(settings=settings)
        missing = connector.missing_credentials()
        connectors[connector.metadata.id] = {
            "configured": not missing,
            "missing": missing,
        }

    return {
        "status": "configured" if settings.anthropic_api_key.strip() else "misconfigured",
        "core": {"anthropic_api_key": bool(settings.anthropic_api_key.strip())},
        "connectors": connectors,
    }


def _format_uptime(seconds: float) -> str:
    """Format uptime in human-readable form."""
    days = int(seconds // 86400)
    hours = int((seconds % 86400) // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")

    return " ".join(parts)

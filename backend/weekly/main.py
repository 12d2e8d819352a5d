"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weekly.api import chat, datasources, health, templates, tools
from weekly.core.config import settings
from weekly.core.exceptions import AppError
from weekly.core.logging import clear_request_context, configure_logging, get_logger, set_request_context
from weekly.core.metrics import MetricsMiddleware, metrics

# Configure structured logging
configure_logging(
    log_level=settings.log_level,
    json_format=settings.log_format == "json",
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    A missing model API key aborts startup; connector credentials are
    only checked when a source is connected.
    """
    logger.info(
        "Starting weekly update backend...",
        extra={"version": settings.version, "environment": settings.environment},
    )
    try:
        settings.require_model_api_key()
    except AppError as e:
        logger.critical(e.message)
        raise

    yield

    logger.info("Shutting down weekly update backend...")


# Create FastAPI app
app = FastAPI(
    title="Weekly Update Assistant API",
    description="Chat assistant that collects weekly update material from Slack, Zoom, Chorus.ai and Google Sheets",
    version=settings.version,
    lifespan=lifespan,
)


# ============ Exception Handlers ============


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle application errors with structured response."""
    metrics.record_error(exc.code.value)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(include_details=not settings.is_production),
    )


# ============ Middleware ============


# Add metrics middleware (outermost to capture all requests)
app.add_middleware(MetricsMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next: Callable):
    """Add request context for logging."""
    request_id = set_request_context()
    request.state.request_id = request_id

    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        clear_request_context()


# ============ Include Routers ============

app.include_router(health.router)
app.include_router(chat.router)
app.include_router(tools.router)
app.include_router(datasources.router)
app.include_router(templates.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Weekly Update Assistant API",
        "version": settings.version,
        "status": "running",
        "environment": settings.environment,
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "weekly.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

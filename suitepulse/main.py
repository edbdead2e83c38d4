"""SuitePulse — FastAPI Application Entry Point.

Unified metrics for the productivity & business suite.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from suitepulse.scheduler.jobs import monitor, start_scheduler, stop_scheduler
from suitepulse.api.metrics_routes import router as metrics_router
from suitepulse.api.analytics_routes import router as analytics_router
from suitepulse.api.ai_routes import router as ai_router
from suitepulse.api.task_routes import router as task_router
from suitepulse.api.crm_routes import router as crm_router
from suitepulse.api.revenue_routes import router as revenue_router
from suitepulse.api.team_routes import router as team_router
from suitepulse.core.errors import AuthError, SuitePulseError
from suitepulse.core.logging import get_logger

logger = get_logger("main")


IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("SuitePulse starting up...")
    logger.info(f"Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("SuitePulse shut down")


app = FastAPI(
    title="SuitePulse",
    description="Unified task, revenue, gamification and focus metrics with graceful degradation.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(metrics_router)
app.include_router(analytics_router)
app.include_router(ai_router)
app.include_router(task_router)
app.include_router(crm_router)
app.include_router(revenue_router)
app.include_router(team_router)


@app.exception_handler(SuitePulseError)
async def gateway_error_handler(request: Request, exc: SuitePulseError):
    """Map gateway failures that reach a route to HTTP errors."""
    status = 401 if isinstance(exc, AuthError) else 502
    logger.warning(
        f"{request.url.path} failed: {exc}",
        extra={"endpoint": request.url.path, "status_code": status},
    )
    return JSONResponse(
        status_code=status,
        content={"error": {"code": exc.code, "kind": exc.kind, "message": str(exc)}},
    )


@app.exception_handler(ValidationError)
async def payload_error_handler(request: Request, exc: ValidationError):
    """Backend rows that fail validation."""
    logger.warning(f"Malformed backend payload on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={"error": {"code": "SHAPE", "kind": "shape", "message": "Malformed backend payload"}},
    )


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "suitepulse",
        "version": "1.0.0",
        "backend_connected": monitor.connected,
        "backend_checked_at": monitor.checked_at,
    }

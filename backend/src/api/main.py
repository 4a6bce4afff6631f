"""
Live Match Predictor - FastAPI Application

Main entry point for the backend API.
This module configures the FastAPI app, middleware, and routes.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.api.routes import predictions
from src.application.dtos.dtos import CacheStatusDTO, ErrorResponseDTO, HealthResponseDTO
from src.config import get_settings
from src.utils.time_utils import get_current_time


# Custom logging implementation to use the application timezone
class AppTimeFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        ct = get_current_time()
        if datefmt:
            s = ct.strftime(datefmt)
        else:
            t = ct.strftime("%Y-%m-%d %H:%M:%S")
            s = "%s,%03d" % (t, record.msecs)
        return s

formatter = AppTimeFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
handler = logging.StreamHandler()
handler.setFormatter(formatter)
root_logger = logging.getLogger()
root_logger.setLevel(getattr(logging, get_settings().log_level, logging.INFO))
root_logger.handlers = [handler]
logger = logging.getLogger(__name__)


# Application metadata
APP_TITLE = "Live Match Predictor"
APP_DESCRIPTION = """
**Live Football Match Prediction API**

Turns in-play telemetry from the Betmines live feed into calibrated
probabilities for fixtures in progress.

## Predictions Include

- Home Win / Draw / Away Win probabilities (Poisson model on live xG)
- Over 1.5 / 2.5 / 3.5 goals and both-teams-to-score probabilities
- Goal likelihood for four fixed match windows
- Recommended market with confidence and reasons

---
**Educational purposes only** - Not for actual betting
"""
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting {APP_TITLE} v{APP_VERSION}")
    logger.info(f"Live feed: {settings.feed_base_url} (blend policy: {settings.prior_blend_policy})")

    if settings.redis_host:
        logger.info(f"Redis cache layer configured at {settings.redis_host}:{settings.redis_port}")
    else:
        logger.info("Redis not configured, using in-memory cache only")

    scheduler = None
    if settings.live_warmup_enabled:
        from src.scheduler import LiveWarmupScheduler
        from src.api.dependencies import get_betmines_source

        scheduler = LiveWarmupScheduler(
            get_betmines_source(),
            interval_seconds=settings.live_warmup_interval_seconds,
        )
        scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down...")
    if scheduler is not None:
        scheduler.shutdown()


# Create FastAPI app
app = FastAPI(
    title=APP_TITLE,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# Configure CORS
# Explicitly include loopback IPs which browsers sometimes use instead of 'localhost'
base_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
# Combine and remove empty/duplicates
all_origins = list(set([o for o in base_origins + get_settings().cors_origins if o]))

app.add_middleware(
    CORSMiddleware,
    allow_origins=all_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
_ERROR_CODES = {
    400: "bad_request",
    404: "not_found",
    502: "upstream_unavailable",
}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Render HTTP errors with the standard error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponseDTO(
            error=_ERROR_CODES.get(exc.status_code, "http_error"),
            message=str(exc.detail),
            details={"path": str(request.url.path)},
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponseDTO(
            error="internal_server_error",
            message="An unexpected error occurred",
            details={"path": str(request.url)},
        ).model_dump(),
    )


# Health check endpoint
@app.get(
    "/health",
    response_model=HealthResponseDTO,
    tags=["Health"],
    summary="Health check",
    description="Check if the API is running and healthy.",
)
async def health_check() -> HealthResponseDTO:
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        version=APP_VERSION,
        timestamp=get_current_time(),
    )


# Cache status endpoint
@app.get(
    "/cache/status",
    response_model=CacheStatusDTO,
    tags=["Health"],
    summary="Cache status",
    description="Feed cache entry count, hit/miss counters and Redis connectivity.",
)
async def cache_status() -> CacheStatusDTO:
    """Get cache status for debugging."""
    from src.api.dependencies import get_cache_service

    return CacheStatusDTO(**get_cache_service().stats())


# Root endpoint
@app.get(
    "/",
    tags=["Root"],
    summary="API Information",
    description="Get basic API information and links.",
)
async def root():
    """Root endpoint with API info."""
    return {
        "name": APP_TITLE,
        "version": APP_VERSION,
        "documentation": "/docs",
        "health": "/health",
        "endpoints": {
            "live_predictions": "/api/v1/predictions",
            "fixture_prediction": "/api/v1/predictions/{fixture_id}",
        },
    }


# Include routers
app.include_router(predictions.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )

"""FastAPI app entry point for the Hybrid Savings Calculator."""

import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.deps import check_store_health, get_vehicle_store, limiter
from app.api.routes import router
from app.config import get_settings, validate_settings
from app.core.logging import log_request, log_response, logger, setup_logging
from app.services.vehicle_db import VehicleStore

# Validate settings on startup
try:
    validate_settings()
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    raise

settings = get_settings()
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup / shutdown."""
    logger.info("Starting Hybrid Savings Calculator API...")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Hybrid Savings Calculator API",
    description="Estimate fuel savings from switching to a hybrid vehicle",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    log_request(request.method, request.url.path)

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    log_response(request.method, request.url.path, response.status_code, duration_ms)

    return response


# Routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health(detailed: bool = False, store: VehicleStore = Depends(get_vehicle_store)):
    """
    Health check endpoint.

    - Basic: Returns {"status": "ok"}
    - Detailed (?detailed=true): Also probes the reference-data store
    """
    if not detailed:
        return {"status": "ok", "service": "hybrid-savings-calculator"}

    store_health = await check_store_health(store)
    overall = "ok" if store_health["status"] == "healthy" else "degraded"
    return {
        "status": overall,
        "service": "hybrid-savings-calculator",
        "store": store_health,
    }

# parking_engine/main.py
"""
FastAPI application entry point.
Builds the AllocationEngine on startup, installs security middleware,
the error handlers for the parking core, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from parking_engine.routers import parking, spots, stats, alerts, health
from parking_engine.database import create_tables
from parking_engine.config import settings
from parking_engine.services.allocation_engine import build_engine
from parking_engine.services.exceptions import ParkingError, ConflictError, NotFoundError
from parking_engine.utils.logger import get_invariant_logger, get_logger
import time

logger = get_logger(__name__)
invariant_logger = get_invariant_logger()

app = FastAPI(
    title="Parking Allocation API",
    description="Spot allocation, ticketing and hourly billing for a single lot.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the gate dashboard to call the API) ─────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Parking Core Errors ──────────────────────────────────────────────────────
@app.exception_handler(ParkingError)
async def parking_error_handler(request: Request, exc: ParkingError):
    if isinstance(exc, (ConflictError, NotFoundError)):
        # Spot/ticket state disagreed under the lock — never expected
        invariant_logger.error(f"Invariant violation on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "error": type(exc).__name__},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(parking.router, prefix="/api/v1", tags=["🚗 Entry/Exit"])
app.include_router(spots.router,   prefix="/api/v1", tags=["🅿️  Spots"])
app.include_router(stats.router,   prefix="/api/v1", tags=["📊 Stats"])
app.include_router(alerts.router,  prefix="/api/v1", tags=["🔔 Alerts"])
app.include_router(health.router,  prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Parking backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    app.state.engine = build_engine(settings)
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Parking backend shutting down...")

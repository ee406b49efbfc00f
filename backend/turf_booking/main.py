"""
Turf Booking API - Main Application Entry Point

Lets owners publish turfs and users reserve whole-hour windows on them:
- Conflict-checked slot admission for bookings and owner blocks
- Per-(turf, date) serialization with an optimistic version guard
- Redis caching of the turf listing and optional distributed slot locks
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from turf_booking.core.config import get_settings
from turf_booking.core.errors import AdmissionError
from turf_booking.core.logging import setup_logging, get_logger
from turf_booking.core.metrics import metrics_endpoint
from turf_booking.api.router import api_router
from turf_booking.api.middleware import RequestLoggingMiddleware
from turf_booking.db.session import AsyncSessionLocal, engine
from turf_booking.infrastructure.redis_client import get_redis, close_redis
from turf_booking.services.admission_service import AdmissionService
from turf_booking.services.cache_service import get_cache_stats
from turf_booking.services.interval_store import IntervalStore
from turf_booking.services.strategy_factory import get_slot_lock
from turf_booking.services.turf_service import TurfDirectory

settings = get_settings()


def build_admission_service(session_factory, settings) -> AdmissionService:
    """Wire the interval store and turf directory around one session factory."""
    store = IntervalStore(
        session_factory,
        slot_lock=get_slot_lock(settings),
        max_commit_attempts=settings.COMMIT_MAX_ATTEMPTS,
    )
    return AdmissionService(store, TurfDirectory(session_factory))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    # Initialize Redis connection
    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache or distributed locks")

    app.state.admission_service = build_admission_service(AsyncSessionLocal, settings)

    yield

    # Cleanup
    await close_redis()
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Turf booking API with conflict-checked hourly slot admission",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(api_router)


@app.exception_handler(AdmissionError)
async def admission_error_handler(request: Request, exc: AdmissionError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }

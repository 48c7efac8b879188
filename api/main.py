"""
FastAPI application initialization
"""

from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import health, users
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import async_session_maker
from core.exceptions import QueryValidationError, PersistenceError
from core.logging import setup_logging
from ingestion.extractors.randomuser_extractor import RandomUserSource
from ingestion.loaders.profile_store import ProfileStore
from ingestion.runner import IngestionRunner
from ingestion.scheduler import IngestionScheduler
import logging

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Random User Backend API",
    description="Ingests randomuser.me profiles and serves them with filtering and field selection",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(users.router)

scheduler: Optional[IngestionScheduler] = None


def build_scheduler() -> IngestionScheduler:
    """Wire the periodic ingestion job from settings"""
    runner = IngestionRunner(
        source=RandomUserSource(
            api_url=settings.RANDOMUSER_API_URL,
            timeout=settings.RANDOMUSER_TIMEOUT
        ),
        store=ProfileStore(async_session_maker),
        max_concurrency=settings.INGEST_CONCURRENCY
    )
    return IngestionScheduler(
        runner,
        count=settings.INGEST_DEFAULT_COUNT,
        interval_minutes=settings.INGEST_SCHEDULE_MINUTES
    )


@app.exception_handler(QueryValidationError)
async def query_validation_error_handler(request: Request, exc: QueryValidationError):
    logger.info(f"Rejected listing parameters: {exc.errors}")
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "message": exc.message,
            "errors": exc.errors
        }
    )


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(
        f"Store failure while serving {request.url.path}: {exc.message}",
        extra={"error_context": exc.to_dict()}
    )
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "message": "Storage is unavailable"
        }
    )


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    global scheduler
    logger.info("Starting Random User Backend API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    if settings.INGEST_SCHEDULE_ENABLED:
        scheduler = build_scheduler()
        scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Random User Backend API")
    if scheduler is not None:
        scheduler.stop()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Random User Backend API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "users": "/users"
        }
    }

"""
ReWa List backend.

Search book and video catalogs, ingest a selected result into the catalog,
and keep a per-user read/watch list.
"""
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from datetime import datetime
from pathlib import Path
import logging
import os

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.aggregator import SearchAggregator
from database import CREATE_ALL_ON_STARTUP, check_db_health, get_session, init_db
from dependencies import get_search_aggregator
from exceptions import ReWaListError
from observability.health import check_catalog_providers, check_database
from observability.metrics import metrics_registry
from observability.middleware import ObservabilityMiddleware
from observability.sentry_config import init_sentry
from routes import auth, books, rewalist, search, videos

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"

app = FastAPI(
    title="ReWa List Backend",
    description="Personal read/watch list with book and video catalog search",
    version=APP_VERSION,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(search.router)
app.include_router(books.router)
app.include_router(videos.router)
app.include_router(rewalist.router)


@app.exception_handler(ReWaListError)
async def rewalist_error_handler(request: Request, exc: ReWaListError):
    if exc.status_code >= 500:
        logger.error("Application error on %s: %s", request.url.path, exc.message, exc_info=exc)
    else:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Same envelope as ValidationError, but keep FastAPI's 422 for malformed bodies
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": {"errors": jsonable_errors(exc)},
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors with an error id and return a safe 500."""
    error_id = f"ERR-{datetime.utcnow().strftime('%Y%m%d%H%M%S')}-{id(exc)}"
    logger.error(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please try again.",
        },
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": APP_VERSION}


@app.get("/health/ready")
async def readiness_check(
    session: AsyncSession = Depends(get_session),
    aggregator: SearchAggregator = Depends(get_search_aggregator),
):
    """Readiness check. 503 when the database is unreachable; missing providers only degrade."""
    database = await check_database(session)
    if database.is_healthy:
        database.details["pool"] = await check_db_health()
    providers = check_catalog_providers(aggregator)

    return JSONResponse(
        status_code=200 if database.is_healthy else 503,
        content={
            "status": "ready" if database.is_healthy and providers.is_healthy else (
                "degraded" if database.is_healthy else "unavailable"
            ),
            "checks": {
                database.name: database.to_dict(),
                providers.name: providers.to_dict(),
            },
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)


@app.on_event("startup")
async def startup_event():
    logger.info(
        "ReWa List backend starting",
        extra={"environment": os.getenv("ENVIRONMENT", "development")},
    )
    init_sentry()
    if CREATE_ALL_ON_STARTUP:
        await init_db()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("ReWa List backend shutting down")

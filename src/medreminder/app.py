"""
FastAPI application factory and main app configuration.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder

from .adapters.db.mongo.client import init_database
from .api.errors import domain_error_response, internal_error_response
from .api.routers import health, reminders
from .api.utils.responses import fail
from .core.config import get_settings
from .core.exceptions import DatabaseError
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.auth_middleware import AuthenticationMiddleware
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware
from .workers.dose_sweeper import run_dose_sweeper_forever

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.format)
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"📊 Environment: {settings.app_env} | timezone: {settings.reminders.timezone}")

    try:
        client = await init_database(settings.database)
    except Exception as e:
        logger.error(f"❌ Database connection failed: {type(e).__name__}: {e}", exc_info=True)
        raise

    sweeper_stop = asyncio.Event()
    sweeper_task = None
    if settings.sweeper.enabled:
        sweeper_task = asyncio.create_task(run_dose_sweeper_forever(sweeper_stop))
        logger.info("✅ Dose sweeper started")
    else:
        logger.info("ℹ️  Dose sweeper disabled (set DOSE_SWEEPER_ENABLED=true to enable)")

    logger.info("✅ Application startup completed successfully")

    yield

    # Shutdown
    logger.info(f"🛑 Shutting down {settings.app_name}")
    if sweeper_task:
        sweeper_stop.set()
        sweeper_task.cancel()
        try:
            await sweeper_task
        except asyncio.CancelledError:
            pass
        logger.info("✅ Dose sweeper stopped")
    client.close()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Medication reminders, dose tracking and adherence statistics",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RequestID, Performance, Auth, then CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        max_age=600,
    )
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(PerformanceMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(reminders.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return domain_error_response(request, exc)

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"DatabaseError: {exc.message} | request_id={req_id}")
        return internal_error_response(request)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        req_id = getattr(request.state, "request_id", None)
        error_details = exc.errors()
        logger.warning(f"ValidationError on {request.method} {request.url.path} | request_id={req_id}")

        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")

        return fail(
            request,
            error="INVALID_INPUT",
            message=f"Input validation failed: {'; '.join(error_messages)}",
            details={"errors": jsonable_encoder(error_details), "path": request.url.path},
            status_code=422,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
        response = fail(request, error="HTTP_ERROR", message=detail, status_code=exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"Unhandled error: {type(exc).__name__} | request_id={req_id}", exc_info=exc)
        return internal_error_response(request)

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "create_reminder": "POST /reminders",
                "list_reminders": "GET /reminders",
                "get_reminder": "GET /reminders/{reminder_id}",
                "update_reminder": "PUT /reminders/{reminder_id}",
                "delete_reminder": "DELETE /reminders/{reminder_id}",
                "toggle_reminder": "PATCH /reminders/{reminder_id}/toggle",
                "log_dose": "POST /reminders/{reminder_id}/log",
                "todays_doses": "GET /reminders/today",
                "adherence_stats": "GET /reminders/stats",
                "due_doses": "GET /reminders/due",
                "mark_notified": "POST /reminders/doses/{dose_id}/notified",
                "push_subscription": "POST /reminders/subscribe",
            },
        }

    return app


# Create the app instance
app = create_app()

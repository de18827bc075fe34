"""
ScholarLink Backend API Server

FastAPI application for the ScholarLink tutor marketplace.
Serves registration, tutor discovery, session booking and notifications.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from scholarlink import config
from scholarlink.api.routes import accounts, admin, notifications, sessions, tutors
from scholarlink.database import AsyncSessionLocal, ping
from scholarlink.datetime_utils import utc_now
from scholarlink.services.container import build_services
from scholarlink.services.exceptions import ScholarLinkError
from scholarlink.services.scheduler import start_scheduler, stop_scheduler

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting ScholarLink API server...")
    scheduler = None
    if config.SCHEDULER_ENABLED:
        scheduler = start_scheduler(app.state.services.coordinator)
        logger.info("Background scheduler started")

    yield

    # Shutdown
    logger.info("Shutting down ScholarLink API server...")
    if scheduler is not None:
        stop_scheduler(scheduler)
        logger.info("Background scheduler stopped")


def create_app(session_factory: Optional[async_sessionmaker] = None) -> FastAPI:
    """
    Build the FastAPI application around one set of services.

    Args:
        session_factory: Database session factory (defaults to the configured database)
    """
    app = FastAPI(
        title="ScholarLink API",
        description="Tutor matching marketplace: booking lifecycle and notifications",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json"
    )
    app.state.services = build_services(session_factory or AsyncSessionLocal)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing"""
        start_time = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Duration: {duration_ms:.2f}ms"
        )

        return response

    # Domain error handler
    @app.exception_handler(ScholarLinkError)
    async def domain_exception_handler(request: Request, exc: ScholarLinkError):
        """Map service errors to their status code and the error envelope"""
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Auth errors already carry the error envelope as their detail
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            content = exc.detail
        else:
            content = {"error": {"code": "HTTP_ERROR", "message": str(exc.detail), "details": None}}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    # Validation error handler
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors"""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": exc.errors()
                }
            }
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all uncaught exceptions"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal server error occurred",
                    "details": str(exc) if app.debug else None
                }
            }
        )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint.

        Returns server status, database reachability and version information.
        """
        database_ok = await ping(request.app.state.services.session_factory)
        return {
            "status": "ok" if database_ok else "degraded",
            "database": "ok" if database_ok else "unreachable",
            "timestamp": utc_now().isoformat(),
            "version": VERSION,
            "service": "scholarlink-api"
        }

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """API root endpoint"""
        return {
            "name": "ScholarLink API",
            "version": VERSION,
            "description": "Tutor matching marketplace",
            "docs": "/api/docs",
            "health": "/health"
        }

    # Include routers
    app.include_router(accounts.router)
    app.include_router(tutors.router)
    app.include_router(sessions.router)
    app.include_router(notifications.router)
    app.include_router(admin.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )

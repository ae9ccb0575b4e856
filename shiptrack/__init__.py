"""
ShipTrack Application Factory
=============================

Builds the FastAPI application: settings, database engine, middleware,
exception handlers and routers.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, configure_logging, get_settings
from .database import build_engine, build_session_factory, create_tables
from .responses import APIResponse
from .routes import (
    admin_router, auth_router, catalog_router, shipment_router,
    subscription_router, verification_router
)
from .schemas import first_error
from .services.exceptions import ShipTrackException, ValidationError

__version__ = "1.0.0"

logger = logging.getLogger("shiptrack")

# Routes that still answer errors as {"message", "field"}
LEGACY_ERROR_PREFIXES = ("/api/subscriptions",)


def _uses_legacy_errors(request: Request) -> bool:
    return request.url.path.startswith(LEGACY_ERROR_PREFIXES)


def setup_middleware(app: FastAPI, settings: Settings):
    """Setup all application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS
    )

    @app.middleware("http")
    async def add_request_id_and_process_time(request: Request, call_next):
        request_id = str(uuid.uuid4())
        start_time = time.time()

        request.state.request_id = request_id
        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Map every error to a JSON body with a single "error" string."""

    @app.exception_handler(ShipTrackException)
    async def shiptrack_exception_handler(request: Request, exc: ShipTrackException):
        if isinstance(exc, ValidationError) and _uses_legacy_errors(request):
            return JSONResponse(status_code=exc.status_code,
                                content=APIResponse.legacy_error(exc.message, exc.field))
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message, field = first_error(exc.errors())
        if _uses_legacy_errors(request):
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                                content=APIResponse.legacy_error(message, field))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=APIResponse.error(message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=APIResponse.error(str(exc.detail)),
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content=APIResponse.error("Internal server error"))


def setup_routes(app: FastAPI):
    """Include every router in the application."""

    @app.get("/health", tags=["System"])
    async def health_check():
        return {"status": "healthy", "timestamp": time.time()}

    @app.get("/", tags=["System"])
    async def root():
        return {"message": "ShipTrack API", "version": __version__, "docs": "/docs"}

    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(verification_router, prefix="/api/verification", tags=["Verification"])
    app.include_router(shipment_router, prefix="/api/shipments", tags=["Shipments"])
    app.include_router(catalog_router, prefix="/api/services", tags=["Shipping Services"])
    app.include_router(subscription_router, prefix="/api/subscriptions", tags=["Subscriptions"])
    app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])


def create_app(settings: Optional[Settings] = None, engine: Optional[AsyncEngine] = None) -> FastAPI:
    """
    Application Factory: build and configure a FastAPI instance.

    ``settings`` and ``engine`` default to the environment configuration;
    tests pass their own to get an isolated database.
    """
    settings = settings or get_settings()
    engine = engine or build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        logger.info("ShipTrack API starting up")
        if settings.uses_demo_secret:
            logger.warning("DEMO_MODE is on: tokens are signed with the public demo secret")
        if settings.AUTO_CREATE_TABLES:
            await create_tables(engine)
        yield
        await engine.dispose()
        logger.info("ShipTrack API shut down")

    app = FastAPI(
        title="ShipTrack API",
        description="Shipment creation, public tracking and account management",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    setup_middleware(app, settings)
    setup_exception_handlers(app)
    setup_routes(app)

    return app

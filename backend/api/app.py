"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.exceptions import OutlayError
from modules.expenses.routes import router as expenses_router
from .middleware import SessionGateMiddleware
from .routes import auth, dashboard, health, settings as settings_routes

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Something went wrong. Please try again."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name)


async def outlay_error_handler(request: Request, exc: OutlayError) -> JSONResponse:
    """
    Render domain errors as ErrorResponse bodies.

    Server-side failures get a generic message; the cause is logged.
    """
    body = exc.to_dict()
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        body["message"] = SERVER_ERROR_MESSAGE
    return JSONResponse(status_code=exc.status_code, content=body)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Expense tracker behind a Supabase session cookie gate",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    app.add_exception_handler(OutlayError, outlay_error_handler)

    # Session gate runs inside CORS so preflight answers never touch auth
    app.add_middleware(SessionGateMiddleware)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth.router, tags=["auth"])
    app.include_router(dashboard.router, tags=["dashboard"])
    app.include_router(expenses_router, prefix="/expenses", tags=["expenses"])
    app.include_router(settings_routes.router, prefix="/settings", tags=["settings"])

    return app


# Application instance for uvicorn
app = create_app()

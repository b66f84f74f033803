"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    NurooError,
    ValidationError,
)
from shared.logging_config import configure_logging
from modules.admin.routes import bootstrap_router, router as admin_router
from modules.children.routes import router as children_router
from modules.groups.routes import router as groups_router
from modules.invites.routes import router as invites_router
from modules.organizations.routes import router as organizations_router
from .routes import health, me

logger = logging.getLogger(__name__)

# Most specific first; the first matching base decides the status
STATUS_BY_ERROR: list[tuple[type[NurooError], int]] = [
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 400),
]


def status_for(exc: NurooError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def nuroo_error_handler(request: Request, exc: NurooError) -> JSONResponse:
    """Render module exceptions as ``{"error", "message", "details"}``."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed input is a 400 in the same error shape as module exceptions."""
    error = ValidationError(
        "Invalid request",
        code="VALIDATION_ERROR",
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(status_code=400, content=error.to_dict())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(
        f"Starting {settings.app_name} ({settings.environment}) on {settings.host}:{settings.port}"
    )
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Organization portal for special-needs therapy teams",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(NurooError, nuroo_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Register routes
    app.include_router(health.router, tags=["health"])
    app.include_router(me.router, tags=["me"])
    app.include_router(invites_router, tags=["invites"])
    app.include_router(organizations_router, prefix="/orgs", tags=["organizations"])
    app.include_router(children_router, prefix="/orgs", tags=["children"])
    app.include_router(groups_router, prefix="/orgs", tags=["groups"])
    app.include_router(admin_router, prefix="/admin", tags=["admin"])
    app.include_router(bootstrap_router, prefix="/bootstrap", tags=["bootstrap"])

    return app


# Application instance for uvicorn
app = create_app()

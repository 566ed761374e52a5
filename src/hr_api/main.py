"""FastAPI application entry point.

Run with ``uvicorn hr_api.main:create_app --factory``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hr_api import __version__
from hr_api.config import Settings, get_settings
from hr_api.database import create_engine, create_session_maker
from hr_api.exceptions import HRAPIError
from hr_api.middleware.error_handler import (
    domain_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from hr_api.middleware.security_headers import SecurityHeadersMiddleware
from hr_api.routers import departments, employees, me

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info(f"Starting {app.title} ({app.state.settings.environment})")
    yield
    # Shutdown
    await app.state.engine.dispose()


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings (loaded from the environment if omitted)

    Returns:
        Configured FastAPI application with its own engine and session factory
    """
    config = settings or get_settings()
    configure_logging(config)

    app = FastAPI(
        title=config.app_name,
        version=__version__,
        description="Employee and department management with role-based access control",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    engine = create_engine(config)
    app.state.settings = config
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)

    # Sanitized error handlers to prevent information disclosure
    app.add_exception_handler(HRAPIError, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    allowed_origins = []
    for origin in config.cors_origins_list:
        # Wildcards are not allowed together with credentials
        if origin == "*":
            raise ValueError(
                "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
                "Specify explicit origins."
            )
        if origin.startswith(("http://", "https://")):
            allowed_origins.append(origin)

    # Middleware runs in reverse order of addition: CORS first on requests
    app.add_middleware(SecurityHeadersMiddleware, hsts=not config.debug)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.include_router(employees.router, prefix="/api/v1/employees", tags=["Employees"])
    app.include_router(departments.router, prefix="/api/v1/departments", tags=["Departments"])
    app.include_router(me.router, prefix="/api/v1/me", tags=["Session"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app

"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from typing import Dict, Any, Optional

from taskhub.config import Settings, get_settings
from taskhub.domain.repositories.department_repository import DepartmentRepository
from taskhub.domain.repositories.task_repository import TaskRepository
from taskhub.infrastructure.web.dependencies import build_container
from taskhub.infrastructure.web.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)
from taskhub.infrastructure.web.routers import dashboard, tasks

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.
    """
    app_settings: Settings = app.state.settings
    logger.info(f"Starting {app_settings.api_title} v{app_settings.api_version}")
    logger.info(f"Environment: {app_settings.environment}")

    yield

    logger.info("Shutting down application")


def create_application(
    app_settings: Optional[Settings] = None,
    task_repository: Optional[TaskRepository] = None,
    department_repository: Optional[DepartmentRepository] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app_settings = app_settings or settings
    app = FastAPI(
        title=app_settings.api_title,
        version=app_settings.api_version,
        debug=app_settings.debug,
        docs_url=f"{app_settings.api_prefix}/docs" if app_settings.debug else None,
        redoc_url=f"{app_settings.api_prefix}/redoc" if app_settings.debug else None,
        openapi_url=f"{app_settings.api_prefix}/openapi.json" if app_settings.debug else None,
        lifespan=lifespan
    )
    app.state.settings = app_settings
    app.state.container = build_container(app_settings, task_repository, department_repository)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
    )

    # Add custom error handler middleware
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    # Include routers
    app.include_router(
        tasks.router,
        prefix=f"{app_settings.api_prefix}/tasks",
        tags=["Tasks"]
    )
    app.include_router(
        dashboard.router,
        prefix=f"{app_settings.api_prefix}/dashboard",
        tags=["Dashboard"]
    )

    # Health check endpoint
    @app.get(f"{app_settings.api_prefix}/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "environment": app_settings.environment,
            "version": app_settings.api_version
        }

    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "taskhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )

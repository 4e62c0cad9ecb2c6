"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_admin.api.responses import OperationFailed, operation_failed_handler
from payroll_admin.api.routes import (
    health_router,
    payroll_periods_router,
    payroll_records_router,
)
from payroll_admin.config import settings
from payroll_admin.database import create_schema, dispose_db
from payroll_admin.services import ChangeEmitter, ChangeNotification

logger = logging.getLogger(__name__)


def log_change(notification: ChangeNotification) -> None:
    """Default subscriber: record every change at debug level."""
    logger.debug("change %s", notification.to_dict())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    if settings.database_url.startswith("sqlite"):
        await create_schema()
    yield
    # Shutdown
    await dispose_db()


def create_app(emitter: ChangeEmitter | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payroll Admin API",
        description="Payroll periods, records and their approval workflow",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.emitter = emitter or ChangeEmitter()
    app.state.emitter.on_all(log_change)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(OperationFailed, operation_failed_handler)  # type: ignore[arg-type]

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(payroll_periods_router, prefix="/api/v1")
    app.include_router(payroll_records_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()

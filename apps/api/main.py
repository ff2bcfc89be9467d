"""FastAPI application main entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.api.v1.endpoints import credit_notes, orders, statistics
from core.domain.exceptions import (
    CreditNoteCreationFailed,
    IntegrityError,
    NotFoundError,
    OrderCreationFailed,
    ValidationError,
)
from core.infrastructure.database.config import (
    DatabaseSettings,
    close_database,
    create_engine,
    create_session_factory,
    init_database,
)
from core.infrastructure.logging import configure_logging, get_logger
from core.settings import AppSettings, get_app_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the engine and session factory unless they were injected."""
    settings: AppSettings = app.state.app_settings
    engine = None

    if getattr(app.state, "session_factory", None) is None:
        engine = create_engine(app.state.database_settings or DatabaseSettings())
        if settings.create_schema_on_startup:
            await init_database(engine)
        app.state.session_factory = create_session_factory(engine)
        logger.info(f"✅ {settings.app_name} ready")

    yield

    if engine is not None:
        await close_database(engine)
        app.state.session_factory = None


def create_app(
    app_settings: Optional[AppSettings] = None,
    database_settings: Optional[DatabaseSettings] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        app_settings: Service settings (environment when omitted)
        database_settings: Database settings (environment when omitted)

    Returns:
        FastAPI app; set app.state.session_factory to bypass engine creation
    """
    app_settings = app_settings or get_app_settings()
    configure_logging(app_settings.log_level)

    app = FastAPI(
        title="Order Service API",
        description="Order transactions and financial reconciliation",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.app_settings = app_settings
    app.state.database_settings = database_settings
    app.state.session_factory = None

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(orders.router, prefix="/api/v1")
    app.include_router(credit_notes.router, prefix="/api/v1")
    app.include_router(statistics.router, prefix="/api/v1")

    _register_exception_handlers(app)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint.

        Returns:
            Health status
        """
        return {"status": "healthy"}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    async def creation_failed_handler(request: Request, exc) -> JSONResponse:
        """Invalid line items are the caller's fault; anything else is ours."""
        if isinstance(exc.cause, ValidationError):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": str(exc.cause), "stage": exc.stage},
            )
        logger.error(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.add_exception_handler(OrderCreationFailed, creation_failed_handler)
    app.add_exception_handler(CreditNoteCreationFailed, creation_failed_handler)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle general exceptions.

        Args:
            request: FastAPI request
            exc: Exception

        Returns:
            JSONResponse with error details
        """
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

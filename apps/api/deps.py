"""FastAPI dependencies for dependency injection."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.services import OrderApplicationService, ReconciliationService
from core.settings import AppSettings


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Get SQLAlchemy session factory created for this application.

    Returns:
        async_sessionmaker instance
    """
    session_factory = request.app.state.session_factory
    if session_factory is None:
        raise RuntimeError("Database not initialized. Start the application lifespan first.")
    return session_factory


def get_settings(request: Request) -> AppSettings:
    return request.app.state.app_settings


def get_order_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> OrderApplicationService:
    """Get OrderApplicationService instance.

    Returns:
        OrderApplicationService instance
    """
    return OrderApplicationService(session_factory)


def get_reconciliation_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: AppSettings = Depends(get_settings),
) -> ReconciliationService:
    """Get ReconciliationService instance.

    Returns:
        ReconciliationService instance
    """
    return ReconciliationService(session_factory, settings)

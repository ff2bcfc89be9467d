"""Pytest configuration and fixtures for integration tests."""

from datetime import datetime
from typing import Any, AsyncGenerator, Dict

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from apps.api.main import create_app
from core.application.dtos import CreateOrderFromCartRequest
from core.application.services import OrderApplicationService, ReconciliationService
from core.data.models import CreditNoteModel, OrderModel
from core.infrastructure.database.config import (
    DatabaseSettings,
    create_engine,
    create_session_factory,
    init_database,
)
from core.settings import AppSettings


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_engine(
        DatabaseSettings(database_url=TEST_DATABASE_URL),
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    await init_database(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Create test session factory."""
    yield create_session_factory(test_engine)


@pytest_asyncio.fixture
async def test_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(export_min_year=2025)


@pytest.fixture
def order_service(test_session_factory) -> OrderApplicationService:
    return OrderApplicationService(test_session_factory)


@pytest.fixture
def reconciliation_service(test_session_factory, app_settings) -> ReconciliationService:
    return ReconciliationService(test_session_factory, app_settings)


@pytest_asyncio.fixture
async def api_client(test_session_factory, app_settings) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to an app wired to the test database."""
    app = create_app(app_settings=app_settings)
    app.state.session_factory = test_session_factory

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


# =============================================================================
# PAYLOAD BUILDERS
# =============================================================================

def _cart_line(**overrides) -> Dict[str, Any]:
    """Cart line in the gateway's camelCase shape."""
    line = {
        "productId": 1,
        "productName": "Widget",
        "quantity": 2,
        "unitPriceHT": 10,
        "unitPriceTTC": 12.1,
        "vatRate": 21,
        "totalPriceHT": 20,
        "totalPriceTTC": 24.2,
    }
    line.update(overrides)
    return line


def _cart_payload(items=None, **overrides) -> Dict[str, Any]:
    items = [_cart_line()] if items is None else items
    payload = {
        "cart": {"items": items, "subtotal": 20, "tax": 4.2, "total": 24.2},
        "customerData": {"email": "a@b.com", "firstName": "Ada", "lastName": "Lovelace"},
        "paymentMethod": "card",
    }
    payload.update(overrides)
    return payload


def _cart_request(items=None, **overrides) -> CreateOrderFromCartRequest:
    return CreateOrderFromCartRequest.model_validate(_cart_payload(items, **overrides))


def _credit_note_payload(order_id: int, items=None, **overrides) -> Dict[str, Any]:
    payload = {
        "customerId": 7,
        "orderId": order_id,
        "reason": "Damaged on delivery",
        "paymentMethod": "card",
        "totalAmountHT": 0,
        "totalAmountTTC": 0,
        "items": [] if items is None else items,
    }
    payload.update(overrides)
    return payload


async def _backdate(session_factory, model, row_id: int, created_at: datetime) -> None:
    """Move a row's creation time (year filtering tests)."""
    async with session_factory() as session:
        await session.execute(
            update(model).where(model.id == row_id).values(created_at=created_at)
        )
        await session.commit()


@pytest.fixture
def cart_line():
    return _cart_line


@pytest.fixture
def cart_payload():
    return _cart_payload


@pytest.fixture
def cart_request():
    return _cart_request


@pytest.fixture
def credit_note_payload():
    return _credit_note_payload


@pytest.fixture
def backdate(test_session_factory):
    """Async callable: backdate("order" | "credit_note", id, created_at)."""
    models = {"order": OrderModel, "credit_note": CreditNoteModel}

    async def _move(kind: str, row_id: int, created_at: datetime) -> None:
        await _backdate(test_session_factory, models[kind], row_id, created_at)

    return _move

# tests/conftest.py
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from luxselle.core.config import Settings, clear_settings_cache
from luxselle.database import Base
from luxselle.dependencies import get_db, get_session_factory
from luxselle.main import create_app
from luxselle.services.ai.router import AiRouter
import luxselle.models  # noqa: F401


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Pin the settings every test sees, whatever the developer's .env holds."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite://")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("PERPLEXITY_API_KEY", "")
    monkeypatch.setenv("AI_ROUTING_MODE", "dynamic")
    monkeypatch.setenv("PRICING_PROVIDER", "mock")
    monkeypatch.setenv("AUTO_CREATE_TABLES", "false")
    monkeypatch.setenv("TARGET_MARGIN_PCT", "35")
    monkeypatch.setenv("RECEIVE_SELL_MARKUP", "1.5")
    monkeypatch.setenv("FX_USD_TO_EUR", "0.92")
    monkeypatch.setenv("LOW_STOCK_THRESHOLD", "2")
    monkeypatch.setenv("VAT_RATE_PCT", "20")
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
async def test_engine(tmp_path):
    """Function-scoped engine on a throwaway SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Provide a database session for tests"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory, settings):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.state.ai_router = AiRouter(settings)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def lenient_client(app):
    """Client that turns unhandled server errors into 500 responses instead of raising."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def buying_list_payload():
    return {
        "sourceType": "manual",
        "brand": "Chanel",
        "model": "Classic Flap",
        "category": "Handbags",
        "condition": "excellent",
        "colour": "Black",
        "targetBuyPriceEur": 5000,
    }


@pytest.fixture
def product_payload():
    return {
        "brand": "Hermes",
        "model": "Birkin 30",
        "category": "Handbags",
        "condition": "excellent",
        "colour": "Gold",
        "costPriceEur": 9000,
        "sellPriceEur": 12500,
        "quantity": 1,
    }

"""Integration-test fixtures.

The app runs in-process over ASGITransport with the market data provider
dependency replaced by the in-memory fake from tests/conftest.py, so API flow
tests need no network access.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.pm_orderbook.infrastructure.clob_provider import get_market_data_provider


@pytest_asyncio.fixture
async def client(provider) -> AsyncClient:
    """Async HTTP client bound to the app with the fake provider injected."""
    app.dependency_overrides[get_market_data_provider] = lambda: provider
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

"""Fixtures for API tests."""

from typing import AsyncGenerator

import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from bases_bridge.api.app import create_app
from bases_bridge.deps import get_app_config


@pytest_asyncio.fixture
async def app(app_config) -> FastAPI:
    """Create a FastAPI application bound to the test vault."""
    app = create_app()
    app.dependency_overrides[get_app_config] = lambda: app_config
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create client using ASGI transport."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

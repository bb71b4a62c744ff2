"""Pytest fixtures for testing"""

from typing import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI

from gocardless_client.infrastructure.clients.gocardless import GoCardlessClient
from mock.gocardless_server.main import BASE_URL, SECRET_ID, SECRET_KEY, create_app


@pytest.fixture
def mock_app() -> FastAPI:
    """Fresh in-memory GoCardless API per test"""
    return create_app()


@pytest.fixture
def transport(mock_app: FastAPI) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=mock_app)


@pytest.fixture
async def client(transport: httpx.ASGITransport) -> AsyncGenerator[GoCardlessClient, None]:
    """Client authenticated against the mock server"""
    client = await GoCardlessClient.authenticate(
        SECRET_ID,
        SECRET_KEY,
        base_url=BASE_URL,
        transport=transport,
    )
    try:
        yield client
    finally:
        await client.aclose()

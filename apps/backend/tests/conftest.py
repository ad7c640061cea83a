"""Shared test fixtures for pytest.

We pin ENVIRONMENT=test before anything imports settings so no .env file is
read, and replace the GitHub and generation clients with in-memory fakes so
no test ever touches the network.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient


os.environ["ENVIRONMENT"] = "test"

from dependencies.roast import get_generation_source, get_profile_source
from main import app
from schemas.roast import RoastRequest
from services.roast.relay import RoastSession
from tests.fixtures.roast_fixtures import NOW, FakeGenerationSource, FakeProfileSource


@pytest.fixture
def profile_source() -> FakeProfileSource:
    return FakeProfileSource()


@pytest.fixture
def generation_source() -> FakeGenerationSource:
    return FakeGenerationSource()


@pytest.fixture
def make_session(
    profile_source: FakeProfileSource, generation_source: FakeGenerationSource
) -> Callable[..., RoastSession]:
    """Factory building a `RoastSession` wired to the default fakes."""

    def _make(username: str = "octocat", mode: str = "roast", **kwargs: Any) -> RoastSession:
        kwargs.setdefault("profile_source", profile_source)
        kwargs.setdefault("generation_source", generation_source)
        kwargs.setdefault("now", NOW)
        return RoastSession(RoastRequest(username=username, mode=mode), **kwargs)

    return _make


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Create a test client for the FastAPI application.
    """
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture
async def async_client(
    profile_source: FakeProfileSource, generation_source: FakeGenerationSource
) -> AsyncGenerator[AsyncClient, None]:
    """Async client with the upstream clients replaced by fakes."""
    app.dependency_overrides[get_profile_source] = lambda: profile_source
    app.dependency_overrides[get_generation_source] = lambda: generation_source
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_profile_source, None)
        app.dependency_overrides.pop(get_generation_source, None)

"""Tests for the roast streaming endpoint."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest
from fastapi import status
from httpx import AsyncClient

from api.v1.roast import CLIENT_CLOSED_REQUEST, stream_roast
from core.exceptions import InvalidRequestError
from dependencies.roast import get_generation_source
from main import app
from tests.fixtures.roast_fixtures import FakeGenerationSource, FakeProfileSource, parse_sse


@pytest.mark.asyncio
async def test_stream_roast_success(async_client: AsyncClient) -> None:
    response = await async_client.post("/api/v1/roast", json={"username": "octocat", "mode": "roast"})

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "text/event-stream; charset=utf-8"
    assert response.headers["cache-control"] == "no-cache"
    assert response.headers["x-accel-buffering"] == "no"

    events = parse_sse(response.text)
    types = [event["type"] for event in events]
    assert types[0] == "status"
    assert types.count("response_start") == 1
    assert types[-1] == "response_end"
    assert [e["content"] for e in events if e["type"] == "response_chunk"] == ["a", "b", "c"]
    assert "content" not in events[-1]


@pytest.mark.asyncio
async def test_stream_roast_normalizes_profile_url(
    async_client: AsyncClient, profile_source: FakeProfileSource
) -> None:
    response = await async_client.post("/api/v1/roast", json={"target_identifier": "https://github.com/octocat/"})

    assert response.status_code == status.HTTP_200_OK
    assert profile_source.calls[0] == ("get_profile", "octocat")


@pytest.mark.asyncio
async def test_stream_feedback_mode(async_client: AsyncClient, generation_source: FakeGenerationSource) -> None:
    response = await async_client.post("/api/v1/roast", json={"username": "octocat", "mode": "feedback"})

    events = parse_sse(response.text)
    assert any("professional feedback" in e.get("content", "") for e in events if e["type"] == "status")
    assert generation_source.calls[0]["temperature"] == pytest.approx(0.7)


@pytest.mark.asyncio
async def test_zero_repositories_streams_error(async_client: AsyncClient, profile_source: FakeProfileSource) -> None:
    profile_source.repositories = []

    response = await async_client.post("/api/v1/roast", json={"username": "octocat"})

    assert response.status_code == status.HTTP_200_OK
    events = parse_sse(response.text)
    assert [e["type"] for e in events if e["type"] != "status"] == ["error"]
    assert "octocat" in events[-1]["content"]


@pytest.mark.parametrize("payload", [{}, {"username": ""}, {"username": "   "}, {"mode": "roast"}])
@pytest.mark.asyncio
async def test_missing_username_returns_400(async_client: AsyncClient, payload: dict[str, Any]) -> None:
    response = await async_client.post("/api/v1/roast", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Username required"
    assert body["error"]["type"] == "invalid_request"
    assert body["error"]["correlation_id"]


@pytest.mark.asyncio
async def test_invalid_mode_returns_400(async_client: AsyncClient, profile_source: FakeProfileSource) -> None:
    response = await async_client.post("/api/v1/roast", json={"username": "octocat", "mode": "praise"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"]["type"] == "invalid_request"
    assert profile_source.calls == []


@pytest.mark.asyncio
async def test_non_json_body_returns_400(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/api/v1/roast", content=b"username=octocat", headers={"content-type": "text/plain"}
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


class _DisconnectedRequest:
    async def json(self) -> dict[str, Any]:
        return {"username": "octocat"}

    async def is_disconnected(self) -> bool:
        return True


@pytest.mark.asyncio
async def test_client_gone_before_start_returns_499(
    profile_source: FakeProfileSource, generation_source: FakeGenerationSource
) -> None:
    response = await stream_roast(
        _DisconnectedRequest(),  # type: ignore[arg-type]
        profile_source=profile_source,
        generation_source=generation_source,
    )

    assert response.status_code == CLIENT_CLOSED_REQUEST
    assert profile_source.calls == []


@pytest.mark.asyncio
async def test_missing_username_raises_before_disconnect_check(
    profile_source: FakeProfileSource, generation_source: FakeGenerationSource
) -> None:
    class _EmptyRequest(_DisconnectedRequest):
        async def json(self) -> dict[str, Any]:
            return {"mode": "roast"}

    with pytest.raises(InvalidRequestError):
        await stream_roast(
            _EmptyRequest(),  # type: ignore[arg-type]
            profile_source=profile_source,
            generation_source=generation_source,
        )


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/api/v1/roast", json={"username": "octocat"}, headers={"X-Correlation-ID": "roast-123"}
    )

    assert response.headers["x-correlation-id"] == "roast-123"


@pytest.mark.asyncio
async def test_session_setup_failure_returns_500(
    async_client: AsyncClient, profile_source: FakeProfileSource
) -> None:
    with patch("api.v1.roast.get_settings", side_effect=ValueError("ENVIRONMENT must be set")):
        response = await async_client.post(
            "/api/v1/roast", json={"username": "octocat"}, headers={"X-Correlation-ID": "setup-500"}
        )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.headers["content-type"].startswith("application/json")
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Something went wrong"
    assert body["error"]["correlation_id"] == "setup-500"
    assert profile_source.calls == []


@pytest.mark.asyncio
async def test_generation_source_failure_returns_500(async_client: AsyncClient) -> None:
    def _unconfigured():
        raise ValueError("No valid LLM provider configured")

    app.dependency_overrides[get_generation_source] = _unconfigured

    response = await async_client.post("/api/v1/roast", json={"username": "octocat"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["error"]["type"] == "internal_server_error"
    assert body["error"]["correlation_id"]
    assert "No valid LLM provider" not in body["message"]

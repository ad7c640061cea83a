"""Roast endpoint: streams a roast or a review of a GitHub profile via SSE."""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import StreamingResponse

from core.config import get_settings
from core.exceptions import InvalidRequestError
from dependencies.roast import get_generation_source, get_profile_source
from schemas.roast import RoastRequest
from services.roast.interfaces import GenerationSourceProtocol, ProfileSourceProtocol
from services.roast.relay import RoastSession


logger = logging.getLogger(__name__)

router = APIRouter(tags=["roast"])

# Status used by nginx for "client closed request"
CLIENT_CLOSED_REQUEST = 499

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def _read_payload(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError("Request body must be a JSON object") from e
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    username = payload.get("username", payload.get("target_identifier"))
    if not isinstance(username, str) or not username.strip():
        raise InvalidRequestError()
    return payload


@router.post(
    "/roast",
    response_class=StreamingResponse,
    summary="Stream a roast or technical feedback for a GitHub profile",
    responses={
        400: {"description": "Username missing or mode invalid"},
        499: {"description": "Client disconnected before streaming began"},
    },
)
async def stream_roast(
    request: Request,
    profile_source: Annotated[ProfileSourceProtocol, Depends(get_profile_source)],
    generation_source: Annotated[GenerationSourceProtocol, Depends(get_generation_source)],
) -> Response:
    """Stream roast events as Server-Sent Events.

    Body: `{"username": "octocat", "mode": "roast" | "feedback"}`.

    Event JSON schema (sent in `data:` lines):
      type: status|response_start|response_chunk|response_end|error
      content: text for status, response_chunk and error events
    """
    payload = await _read_payload(request)
    roast_request = RoastRequest.model_validate(payload)

    if await request.is_disconnected():
        logger.info(f"Client disconnected before roast of @{roast_request.username} started")
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    try:
        settings = get_settings()
        session = RoastSession(
            roast_request,
            profile_source=profile_source,
            generation_source=generation_source,
            settings=settings,
        )
    except Exception as e:
        logger.error(f"Failed to start roast session: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Something went wrong",
        ) from e

    logger.info(f"Streaming {roast_request.mode} for @{roast_request.username}")
    return StreamingResponse(
        session.events(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )

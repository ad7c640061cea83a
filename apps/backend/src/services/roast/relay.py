"""Cancelable relay from upstream calls to the roast event stream.

A `RoastSession` owns one request: it looks up the profile, lists and inspects
repositories, renders the prompt and relays generated text to an `EventSink`
as SSE events. Every upstream await is raced against the session's
cancellation token so a disconnected client stops the work promptly.

Event order is always::

    status* (response_start response_chunk* response_end | error)

and an aborted session simply stops writing.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from enum import StrEnum

from core.config import Settings, get_settings
from core.observability import get_tracer
from schemas.roast import RoastRequest, RoastSseEvent
from services.ai.prompts import RenderedPrompt, render_prompt
from services.roast.aggregation import build_roast_data
from services.roast.cancellation import CancellationToken, race
from services.roast.collector import RepositoryCollector
from services.roast.exceptions import ClientAbortedError, ProfileNotFound, RoastError, classify_error
from services.roast.interfaces import GenerationSourceProtocol, ProfileSourceProtocol
from services.roast.sink import EventSink


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

MAX_REPOSITORY_PAGE = 100


class SessionPhase(StrEnum):
    PENDING = "pending"
    STATUS = "status"
    STREAMING = "streaming"
    DONE = "done"
    ERROR = "error"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_PHASES


TERMINAL_PHASES = frozenset({SessionPhase.DONE, SessionPhase.ERROR, SessionPhase.ABORTED})

_ALLOWED_TRANSITIONS: dict[SessionPhase, frozenset[SessionPhase]] = {
    SessionPhase.PENDING: frozenset({SessionPhase.STATUS, SessionPhase.ERROR, SessionPhase.ABORTED}),
    SessionPhase.STATUS: frozenset(
        {SessionPhase.STATUS, SessionPhase.STREAMING, SessionPhase.ERROR, SessionPhase.ABORTED}
    ),
    SessionPhase.STREAMING: frozenset({SessionPhase.DONE, SessionPhase.ERROR, SessionPhase.ABORTED}),
}


def status_message(request: RoastRequest) -> str:
    return "🔥 Preparing NUCLEAR roast..." if request.is_roast else "💡 Crafting professional feedback..."


class RoastSession:
    """One roast request from entry to sink closure."""

    def __init__(
        self,
        request: RoastRequest,
        *,
        profile_source: ProfileSourceProtocol,
        generation_source: GenerationSourceProtocol,
        settings: Settings | None = None,
        token: CancellationToken | None = None,
        sink: EventSink | None = None,
        now: datetime | None = None,
    ) -> None:
        self.request = request
        self.profile_source = profile_source
        self.generation_source = generation_source
        self.settings = settings or get_settings()
        self.token = token or CancellationToken()
        self.sink = sink or EventSink()
        self.now = now
        self.phase = SessionPhase.PENDING
        self.error: RoastError | None = None
        self.chunks_relayed = 0
        self.repository_count = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def _advance(self, phase: SessionPhase) -> None:
        if phase not in _ALLOWED_TRANSITIONS.get(self.phase, frozenset()):
            raise RuntimeError(f"Invalid session transition {self.phase} -> {phase}")
        self.phase = phase

    async def _emit(self, event: RoastSseEvent) -> None:
        # Nothing reaches the sink once the client is gone
        self.token.raise_if_cancelled()
        await race(self.sink.write(event), self.token)

    async def _status(self, content: str) -> None:
        await self._emit(RoastSseEvent.status(content))
        self._advance(SessionPhase.STATUS)

    async def _fail(self, error: RoastError) -> None:
        self.error = error
        if self.token.cancelled:
            self._abort()
            return
        await self._emit(RoastSseEvent.error(error.message))
        self._advance(SessionPhase.ERROR)

    def _abort(self) -> None:
        if not self.phase.is_terminal:
            self._advance(SessionPhase.ABORTED)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def cancel(self) -> None:
        """Stop awaiting upstream work and close the sink without an error."""
        if self.phase.is_terminal:
            return
        if self.token.cancel():
            logger.info(f"Roast session for @{self.request.username} cancelled by client")
        self.sink.close()

    async def run(self) -> SessionPhase:
        """Drive the session to a terminal phase. Never raises, except on task cancellation."""
        started = time.perf_counter()
        with tracer.start_as_current_span("roast.session") as span:
            span.set_attribute("roast.mode", self.request.mode)
            try:
                await self._pipeline()
            except ClientAbortedError:
                self._abort()
            except asyncio.CancelledError:
                self._abort()
                raise
            except Exception as exc:
                error = classify_error(exc)
                logger.warning(
                    f"Roast for @{self.request.username} failed ({error.error_code}): {exc}",
                    exc_info=error.error_code == "unknown",
                )
                try:
                    await self._fail(error)
                except ClientAbortedError:
                    self._abort()
            finally:
                self.sink.close()
                span.set_attribute("roast.phase", str(self.phase))
                span.set_attribute("roast.repositories", self.repository_count)
                span.set_attribute("roast.chunks", self.chunks_relayed)

        logger.info(
            f"Roast session for @{self.request.username} ended in {self.phase} "
            f"after {time.perf_counter() - started:.2f}s ({self.chunks_relayed} chunks)"
        )
        return self.phase

    async def events(self) -> AsyncIterator[str]:
        """Run the session in the background and yield its SSE frames.

        Intended as the body of a `StreamingResponse`; when the response stops
        consuming (client disconnect) the session is cancelled.
        """
        task = asyncio.create_task(self.run())
        try:
            async for frame in self.sink.frames():
                yield frame
        finally:
            self.cancel()
            # A cancelled session ends at its next suspension point
            await asyncio.shield(task)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    async def _pipeline(self) -> None:
        username = self.request.username
        source = self.profile_source

        await self._status("🔍 Investigating GitHub profile...")
        profile = await race(source.get_profile(username), self.token)

        await self._status(f"📚 Fetching ALL {profile.public_repos} repositories...")
        page_size = min(max(profile.public_repos, 1), MAX_REPOSITORY_PAGE)
        repositories = await race(source.list_repositories(username, per_page=page_size), self.token)

        self.repository_count = len(repositories)
        if not repositories:
            await self._fail(ProfileNotFound(f"No public repos found for @{username}."))
            return

        await self._status("⚡ Deep-diving into repos (this might take a moment)...")
        collector = RepositoryCollector(
            source,
            self.token,
            commits_per_repo=self.settings.GITHUB_COMMITS_PER_REPO,
            detailed_commits=self.settings.GITHUB_DETAILED_COMMITS,
            now=self.now,
        )
        summaries = await race(collector.collect_all(username, repositories), self.token)
        roast_data = build_roast_data(profile, summaries, now=self.now or datetime.now(UTC))

        await self._status(status_message(self.request))
        prompt = render_prompt(self.request.mode, roast_data)

        await self._emit(RoastSseEvent.response_start())
        self._advance(SessionPhase.STREAMING)

        await race(self._relay_generation(prompt), self.token)

        await self._emit(RoastSseEvent.response_end())
        self._advance(SessionPhase.DONE)

    async def _relay_generation(self, prompt: RenderedPrompt) -> None:
        stream = self.generation_source.stream(
            prompt,
            temperature=self.settings.temperature_for(self.request.mode),
            max_tokens=self.settings.MAX_OUTPUT_TOKENS,
            cancel=self.token,
        )
        async for fragment in stream:
            await self._emit(RoastSseEvent.chunk(fragment))
            self.chunks_relayed += 1

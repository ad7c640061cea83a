"""Output sink between a roast session and its HTTP response."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from schemas.roast import RoastSseEvent


class SinkClosedError(RuntimeError):
    """Raised when an event is written after the sink was closed."""


class EventSink:
    """Ordered hand-off of SSE frames from the session task to the response.

    The sink holds at most one unread event: `write` suspends until the
    response has taken the previous one, so a slow client slows the session
    down instead of the session buffering the whole generation. Closing is
    idempotent; once closed the sink accepts no further writes and `events()`
    ends after the pending event, if any.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[RoastSseEvent] = asyncio.Queue(maxsize=1)
        self._closed_event = asyncio.Event()
        self.events_written = 0

    @property
    def closed(self) -> bool:
        return self._closed_event.is_set()

    @property
    def backlog(self) -> int:
        """Number of events written but not yet taken by the consumer."""
        return self._queue.qsize()

    async def write(self, event: RoastSseEvent) -> None:
        if self.closed:
            raise SinkClosedError(f"Cannot write {event.type!r} event to a closed sink")
        await self._queue.put(event)
        self.events_written += 1

    def close(self) -> bool:
        """Close the sink. Returns False when it was already closed."""
        if self.closed:
            return False
        self._closed_event.set()
        return True

    async def _next(self) -> RoastSseEvent | None:
        if not self._queue.empty():
            return self._queue.get_nowait()
        if self.closed:
            return None

        getter = asyncio.ensure_future(self._queue.get())
        closer = asyncio.ensure_future(self._closed_event.wait())
        try:
            await asyncio.wait({getter, closer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            closer.cancel()
            if not getter.done():
                getter.cancel()

        if getter.done() and not getter.cancelled():
            return getter.result()
        # Closed while waiting; a write may still have landed
        return self._queue.get_nowait() if not self._queue.empty() else None

    async def events(self) -> AsyncIterator[RoastSseEvent]:
        while (event := await self._next()) is not None:
            yield event

    async def frames(self) -> AsyncIterator[str]:
        async for event in self.events():
            yield event.to_sse()

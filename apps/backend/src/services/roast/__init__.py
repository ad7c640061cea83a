"""Init file for roast services."""

from .cancellation import CancellationToken, race
from .exceptions import ClientAbortedError, RoastError, classify_error
from .relay import RoastSession, SessionPhase
from .sink import EventSink, SinkClosedError


__all__ = [
    "CancellationToken",
    "ClientAbortedError",
    "EventSink",
    "RoastError",
    "RoastSession",
    "SessionPhase",
    "SinkClosedError",
    "classify_error",
    "race",
]

"""
SSE session management for the streaming MCP transport.

Each GET on a streaming endpoint opens one Session. Responses to messages
posted for that session are queued and relayed over its event stream. The
SessionManager is the only shared mutable state and is owned by the
application, not by module globals.
"""

import asyncio
import enum
import json
import logging
import time
import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from adhdone.core.config import settings
from adhdone.core.logging_config import truncate_caller
from adhdone.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": keepalive\n\n"


class SessionState(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Session:
    id: str
    caller_id: str | None = None
    created_at: float = field(default_factory=time.time)
    state: SessionState = SessionState.OPEN
    queue: asyncio.Queue = field(default_factory=asyncio.Queue, repr=False)
    # Held from routing a posted message until its reply is queued
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN


def format_sse(event: str, data: Any) -> str:
    """Render one named SSE frame; non-string data is sent as compact JSON."""
    if not isinstance(data, str):
        data = json.dumps(data, separators=(",", ":"))
    lines = [f"event: {event}"]
    lines.extend(f"data: {line}" for line in data.splitlines() or [""])
    return "\n".join(lines) + "\n\n"


class SessionManager:
    """Owns every open streaming session, keyed by session token."""

    def __init__(self, keepalive_seconds: float | None = None, max_queue_size: int | None = None) -> None:
        self.keepalive_seconds = (
            keepalive_seconds if keepalive_seconds is not None else settings.SSE_KEEPALIVE_SECONDS
        )
        self.max_queue_size = max_queue_size if max_queue_size is not None else settings.SSE_QUEUE_MAXSIZE
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def open(self, caller_id: str | None = None) -> Session:
        session = Session(id=uuid.uuid4().hex, caller_id=caller_id, queue=asyncio.Queue(maxsize=self.max_queue_size))
        self._sessions[session.id] = session
        logger.info(
            f"Session opened ({len(self._sessions)} active)",
            extra={"session_id": session.id, "caller": truncate_caller(caller_id)},
        )
        return session

    def get(self, session_id: str | None) -> Session | None:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def require(self, session_id: str | None, request_id: Any = None) -> Session:
        """Return the open session with this token or raise SessionNotFoundError."""
        session = self.get(session_id)
        if session is None:
            logger.warning("Message posted without an open session", extra={"session_id": session_id})
            raise SessionNotFoundError(session_id, request_id=request_id)
        return session

    def close(self, session_id: str) -> bool:
        """Close and forget a session. Closing twice is a no-op."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.state = SessionState.CLOSED
        # Anything still queued has no destination any more
        while not session.queue.empty():
            session.queue.get_nowait()
        session.queue.put_nowait(None)
        logger.info(
            f"Session closed ({len(self._sessions)} active)",
            extra={"session_id": session_id},
        )
        return True

    def close_all(self) -> int:
        session_ids = list(self._sessions)
        for session_id in session_ids:
            self.close(session_id)
        return len(session_ids)

    def deliver(self, session_id: str, message: dict[str, Any]) -> bool:
        """Queue a message for a session's stream. Returns False if it was dropped."""
        session = self._sessions.get(session_id)
        if session is None or not session.is_open:
            logger.debug("Dropping message for closed session", extra={"session_id": session_id})
            return False
        try:
            session.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Dropping message for stalled session", extra={"session_id": session_id})
            return False
        return True

    async def event_stream(self, session: Session, endpoint: str) -> AsyncIterator[str]:
        """
        Yield the SSE frames for one session until the client goes away.

        The endpoint announcement is always the first frame. A keepalive comment
        is emitted whenever the session has been idle for keepalive_seconds.
        The session is closed when the generator is closed or cancelled.
        """
        try:
            yield format_sse("endpoint", endpoint)
            while session.is_open:
                try:
                    message = await asyncio.wait_for(session.queue.get(), timeout=self.keepalive_seconds)
                except asyncio.TimeoutError:
                    yield KEEPALIVE_FRAME
                    continue
                if message is None:
                    break
                yield format_sse("message", message)
        except Exception:
            logger.error("Streaming session failed", exc_info=True, extra={"session_id": session.id})
        finally:
            self.close(session.id)

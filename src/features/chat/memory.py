"""Conversation memory management (in-process session store)."""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from .models import ChatSession, Message, Role

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Map of session id to conversation transcript.

    Sessions live for the lifetime of the process and are only removed by
    sweep_expired. Session ids are client-supplied and not verified.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._sessions: dict[str, ChatSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    @staticmethod
    def generate_session_id() -> str:
        """Generate a new session ID."""
        return str(uuid.uuid4())

    def get(self, session_id: str) -> ChatSession | None:
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: str) -> ChatSession:
        """
        Get existing session or build a new empty one.

        A new session is not stored until save() is called, so two unsaved
        sessions with the same id resolve as last write wins.
        """
        session = self._sessions.get(session_id)
        if session is not None:
            return session

        now = self._clock()
        return ChatSession(id=session_id, created_at=now, last_activity=now)

    def append_message(self, session: ChatSession, role: Role, content: str) -> Message:
        """Append a message to the transcript. Caller must save() afterwards."""
        message = Message(role=role, content=content, timestamp=self._clock())
        session.messages.append(message)
        return message

    def save(self, session: ChatSession) -> None:
        """Touch last_activity and upsert the session."""
        session.last_activity = max(session.last_activity, self._clock())
        self._sessions[session.id] = session

    def sweep_expired(self, max_idle: timedelta) -> int:
        """
        Remove sessions idle for longer than max_idle.

        Returns:
            Number of sessions removed
        """
        cutoff = self._clock() - max_idle
        expired = [sid for sid, s in self._sessions.items() if s.last_activity < cutoff]
        for sid in expired:
            del self._sessions[sid]
            lock = self._locks.get(sid)
            if lock is not None and not lock.locked():
                del self._locks[sid]

        if expired:
            logger.info(f"Swept {len(expired)} expired sessions, {len(self._sessions)} remaining")
        return len(expired)

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session lock serializing read-append-save sequences."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

"""Realtime fan-out of ledger and receipt updates to live sessions.

The bus is a process-wide registry of connected sessions, created at
application startup and cleared at shutdown. Every broadcast goes to every
registered session: there is no topic routing, acknowledgement or replay
buffer, and a session that connects after a broadcast never receives it.
Sessions whose send fails are dropped from the registry.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Stable event names carried in the "event" field of every envelope.
EVENT_MESSAGE_APPENDED = "message:appended"
EVENT_MESSAGE_SEEN = "message:seen"
EVENT_SESSION_CONNECTED = "session:connected"


class LiveSession(Protocol):
    """Anything that can receive a JSON envelope (e.g. a Starlette WebSocket)."""

    async def send_json(self, data: Any) -> None: ...


class DeliveryBus:
    """Registry of live sessions with a global broadcast."""

    def __init__(self) -> None:
        # Starlette WebSockets are unhashable Mappings, so identity is tracked in a list.
        self._sessions: list[LiveSession] = []

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session: object) -> bool:
        return any(existing is session for existing in self._sessions)

    def register(self, session: LiveSession) -> LiveSession:
        """Add a session to the registry and return it as its own handle."""
        if session not in self:
            self._sessions.append(session)
        logger.info("Live session connected (%d active)", len(self._sessions))
        return session

    def deregister(self, session: LiveSession) -> None:
        """Remove a session; unknown sessions are ignored."""
        if session in self:
            self._discard(session)
            logger.info("Live session disconnected (%d active)", len(self._sessions))

    subscribe = register
    unsubscribe = deregister

    def clear(self) -> None:
        """Forget every session, as on process shutdown."""
        self._sessions.clear()

    async def broadcast(self, event: str, payload: Any) -> int:
        """Send ``{"event": event, "data": payload}`` to every live session.

        Returns the number of sessions the envelope was delivered to.
        """
        sessions = list(self._sessions)
        if not sessions:
            return 0

        envelope = {"event": event, "data": payload}
        results = await asyncio.gather(
            *[self._safe_send(session, envelope) for session in sessions],
        )

        failed = [session for session, ok in zip(sessions, results) if not ok]
        for session in failed:
            self._discard(session)
        if failed:
            logger.warning("Dropped %d unreachable live session(s)", len(failed))
        return len(sessions) - len(failed)

    broadcast_all = broadcast

    def _discard(self, session: LiveSession) -> None:
        self._sessions = [existing for existing in self._sessions if existing is not session]

    async def _safe_send(self, session: LiveSession, envelope: dict[str, Any]) -> bool:
        try:
            await session.send_json(envelope)
        except Exception as exc:  # noqa: BLE001 - any transport failure drops the session
            logger.debug("Failed to send to live session: %s", exc)
            return False
        return True

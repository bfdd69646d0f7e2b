"""
Debug event bus for the voice client.

Every user action and every request/response crossing the client/server
boundary is published here as a structured event. The bus is observability
only: emitting never fails and never changes control flow.
"""

import json
import logging
from collections import deque
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional

from pydantic import BaseModel, Field

from app.config.constants import DEBUG_HISTORY_SIZE, LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.debug")

# Event names
USER_ACTION = "USER_ACTION"
TOKEN_REQUEST = "TOKEN_REQUEST"
AGENT_START_REQUEST = "AGENT_START_REQUEST"
AGENT_STARTED = "AGENT_STARTED"
AGENT_STOP_REQUEST = "AGENT_STOP_REQUEST"
AUDIO_CONNECTED = "AUDIO_CONNECTED"
CHAT_MESSAGE = "CHAT_MESSAGE"
API_CALL = "API_CALL"
API_RESPONSE = "API_RESPONSE"
API_ERROR = "API_ERROR"

# Endpoints
SOURCE_USER = "User"
SOURCE_FRONTEND = "Frontend"
SOURCE_BACKEND = "Backend"
SOURCE_PLATFORM = "Agora"
SOURCE_ASSISTANT = "AI Assistant"


class DebugEvent(BaseModel):
    """One observed interaction."""

    event: str
    source: str
    destination: str
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_text(self) -> str:
        data = json.dumps(self.data, indent=2, default=str)
        return (
            f"{self.timestamp.strftime('%H:%M:%S')} - {self.event} | "
            f"{self.source} → {self.destination}\n  Data: {data}"
        )


Subscriber = Callable[[DebugEvent], None]


class DebugEventBus:
    """Fire-and-forget sink keeping the most recent events, newest first."""

    def __init__(self, max_events: int = DEBUG_HISTORY_SIZE):
        self._events: Deque[DebugEvent] = deque(maxlen=max_events)
        self._subscribers: List[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def emit(
        self,
        event: str,
        source: str,
        destination: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> DebugEvent:
        """Record an event, log it and hand it to every subscriber."""
        debug_event = DebugEvent(
            event=event, source=source, destination=destination, data=data or {}
        )
        self._events.appendleft(debug_event)
        logger.debug(
            f"{event} {source} -> {destination}: {json.dumps(debug_event.data, default=str)}"
        )
        for subscriber in list(self._subscribers):
            try:
                subscriber(debug_event)
            except Exception as e:
                logger.warning(f"Debug subscriber failed on {event}: {e}")
        return debug_event

    @property
    def history(self) -> List[DebugEvent]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()

    def export_text(self) -> str:
        """Render the history the way the debug panel exports it."""
        return "\n\n".join(event.to_text() for event in self._events)

"""
Text chat alongside the voice session.

Messages are relayed through the backend's /chat-message endpoint, which
forwards them to the webhook. Failures never raise to the caller; they are
turned into an assistant message the UI can show.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.client.backend_client import BackendClient
from app.client.debug_events import (
    CHAT_MESSAGE,
    SOURCE_ASSISTANT,
    SOURCE_USER,
    DebugEventBus,
)
from app.config.constants import (
    CHAT_DEFAULT_CHANNEL,
    CHAT_EMPTY_REPLY_TEXT,
    CHAT_UNAVAILABLE_TEXT,
    CHAT_USER_PREFIX,
    LOGGER_NAME,
)

logger = logging.getLogger(LOGGER_NAME)


class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str
    sender: Literal["user", "assistant"]
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatSession:
    """Conversation history plus the typing indicator."""

    def __init__(self, backend: BackendClient, debug_bus: Optional[DebugEventBus] = None):
        self.backend = backend
        self.debug_bus = debug_bus or backend.debug_bus
        self.messages: List[ChatMessage] = []
        self.typing = False

    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Send ``text`` and append the assistant's reply.

        Returns:
            The assistant message, or None when ``text`` is blank
        """
        text = (text or "").strip()
        if not text:
            return None

        self.messages.append(ChatMessage(text=text, sender="user"))
        self.debug_bus.emit(CHAT_MESSAGE, SOURCE_USER, SOURCE_ASSISTANT, {"message": text})
        self.typing = True
        try:
            response = await self.backend.send_chat_message(
                text=text,
                user_id=f"{CHAT_USER_PREFIX}{int(time.time() * 1000)}",
                channel=CHAT_DEFAULT_CHANNEL,
                timestamp=datetime.now(timezone.utc).isoformat(),
            )
            reply_text = response.text or CHAT_EMPTY_REPLY_TEXT
        except Exception as e:
            logger.error(f"Error sending chat message: {e}")
            reply_text = CHAT_UNAVAILABLE_TEXT
        finally:
            self.typing = False

        reply = ChatMessage(text=reply_text, sender="assistant")
        self.messages.append(reply)
        return reply

    def clear(self) -> None:
        self.messages.clear()

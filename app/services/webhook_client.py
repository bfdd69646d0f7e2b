"""
Client for the external workflow webhook that answers chat messages.

The webhook runs the language model and speech synthesis on its side and
answers with ``{text, status, audio_url}``. This client only forwards the
message and normalises the answer; deciding what to show the user when the
webhook fails is left to the chat handler.
"""

import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from app.config.constants import (
    CHAT_DEFAULT_CHANNEL,
    CHAT_DEFAULT_REPLY,
    CHAT_SESSION_PREFIX,
    LOGGER_NAME,
    WEBHOOK_TIMEOUT,
)
from app.models.api_schemas import ChatMessageRequest, ChatMessageResponse, WebhookPayload
from app.services.errors import WebhookError

logger = logging.getLogger(LOGGER_NAME)


class WebhookClient:
    """Forwards chat messages to the workflow webhook."""

    def __init__(
        self,
        url: str,
        timeout: float = WEBHOOK_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def build_payload(message: ChatMessageRequest) -> WebhookPayload:
        """Fill in channel and session defaults for the webhook payload."""
        return WebhookPayload(
            text=message.text,
            user_id=message.user_id,
            channel=message.channel or CHAT_DEFAULT_CHANNEL,
            timestamp=message.timestamp,
            session_id=message.session_id or f"{CHAT_SESSION_PREFIX}{int(time.time() * 1000)}",
        )

    async def relay(self, message: ChatMessageRequest) -> ChatMessageResponse:
        """
        Send a chat message to the webhook and return its answer.

        Args:
            message: The chat message received from the client

        Returns:
            ChatMessageResponse: The webhook answer with defaults applied

        Raises:
            WebhookError: If the webhook is unconfigured, unreachable, times out,
                answers non-2xx, or answers with something other than a JSON object
                whose fields are strings
        """
        if not self.url:
            raise WebhookError("Webhook URL is not configured")

        payload = self.build_payload(message)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload.model_dump())
        except httpx.HTTPError as e:
            raise WebhookError(f"Webhook request failed: {e!r}") from e

        if not response.is_success:
            raise WebhookError(
                f"Webhook responded with status {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise WebhookError("Webhook returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise WebhookError("Webhook returned an unexpected body")

        logger.debug(f"Webhook response: {data}")
        try:
            return ChatMessageResponse(
                text=data.get("text") or CHAT_DEFAULT_REPLY,
                status=data.get("status") or "success",
                audio_url=data.get("audio_url") or None,
            )
        except ValidationError as e:
            raise WebhookError("Webhook returned an invalid body") from e

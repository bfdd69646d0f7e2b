"""
Handles chat messages typed by the user.

Messages are relayed to the workflow webhook. When the webhook cannot answer
(unconfigured, unreachable, timed out, non-2xx or malformed) the user still gets
a 200 reply with fallback text so the conversation keeps going; only an
unexpected internal exception produces a 500.
"""

import json
import logging
from typing import Any, Dict

from fastapi.responses import JSONResponse

from app.config.constants import (
    CHAT_FALLBACK_TEMPLATE,
    CHAT_INTERNAL_ERROR_TEXT,
    LOGGER_NAME,
)
from app.models.api_schemas import ChatMessageRequest, ChatMessageResponse
from app.services.errors import WebhookError
from app.services.webhook_client import WebhookClient

logger = logging.getLogger(LOGGER_NAME)


def fallback_reply(text: str) -> ChatMessageResponse:
    """Canned reply used when the webhook cannot answer."""
    return ChatMessageResponse(
        text=CHAT_FALLBACK_TEMPLATE.format(text=text),
        status="success",
        audio_url=None,
    )


async def handle_chat_message(
    request: ChatMessageRequest, webhook_client: WebhookClient
) -> ChatMessageResponse | JSONResponse:
    """
    Handle POST /chat-message.

    Args:
        request: The chat message from the client
        webhook_client: Client for the workflow webhook

    Returns:
        The webhook's answer, a fallback answer, or a 500 JSON body on an
        unexpected internal error
    """
    logger.info(f"Chat message received from {request.user_id}: {request.text!r}")
    try:
        reply = await webhook_client.relay(request)
    except WebhookError as e:
        logger.error(f"Webhook unavailable, using fallback reply: {e}")
        return fallback_reply(request.text)
    except Exception as e:
        logger.error(f"Error relaying chat message: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"text": CHAT_INTERNAL_ERROR_TEXT, "status": "error"},
        )
    logger.info(f"Webhook replied: {reply.text!r}")
    return reply


async def handle_test_webhook(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle POST /test-webhook.

    Logs what the webhook would receive and answers with a canned reply in the
    shape the webhook is expected to return.
    """
    logger.info(f"Test webhook body: {json.dumps(body, indent=2)}")
    return ChatMessageResponse(
        text="This is a test response from the webhook",
        status="success",
        audio_url=None,
    ).model_dump()

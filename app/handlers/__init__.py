"""
Handlers module for the HTTP endpoints of the voice agent relay.

Each handler receives a validated request model plus the service it needs and
returns either a response model or a JSONResponse carrying an error status.
Routing lives in app.main; the handlers hold the endpoint logic.

Key components:
- token_handlers: POST /generate-token, issuing channel join credentials.
- agent_handlers: POST /start-agent and POST /stop-agent, driving the remote
  AI agent lifecycle.
- chat_handlers: POST /chat-message, relaying chat text to the workflow webhook
  with a fallback reply, and the POST /test-webhook diagnostic.

Usage examples:
```python
from app.handlers.chat_handlers import handle_chat_message
from app.models.api_schemas import ChatMessageRequest
from app.services.webhook_client import WebhookClient

reply = await handle_chat_message(
    ChatMessageRequest(text="Hello", user_id="chat_user_1"),
    WebhookClient("https://workflows.example.com/webhook/chat"),
)
```
"""

# Handlers module initialization

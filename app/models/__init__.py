"""
Models module for data structures and state in the voice agent relay.

This module provides structured data models for the application, defining the
schemas exchanged with the browser client, the payload sent to the conversational
AI agent API, and the in-memory voice session.

Key components:
- api_schemas: Pydantic models for the backend's HTTP surface (/generate-token,
  /start-agent, /stop-agent, /chat-message) and the webhook payload.
- agent_schemas: Pydantic models for the vendor agent "join" request.
- session: SessionState enum, the Session record and channel-name generation.

Usage examples:
```python
from app.models.api_schemas import GenerateTokenRequest, ChatMessageResponse
from app.models.session import Session, SessionState, new_channel_name

request = GenerateTokenRequest(channelName="support_session_1700000000000")
session = Session(channel_name=new_channel_name())
assert session.holds_resources is False
```
"""

from app.models.agent_schemas import AgentJoinRequest, AgentProperties, LLMConfig
from app.models.api_schemas import (
    ChatMessageRequest,
    ChatMessageResponse,
    ErrorResponse,
    GenerateTokenRequest,
    StartAgentRequest,
    StartAgentResponse,
    StopAgentRequest,
    StopAgentResponse,
    TokenResponse,
    WebhookPayload,
)
from app.models.session import Session, SessionState, new_channel_name

"""
Pydantic models for the HTTP surface exposed by the relay backend.

These models describe the request and response bodies exchanged between the
browser voice/chat client and the backend, and the payload forwarded to the
workflow webhook. Field names follow the wire format used by the client.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Token
class GenerateTokenRequest(BaseModel):
    """Body of POST /generate-token."""

    channelName: str = Field(..., description="Channel the credential is scoped to")
    uid: Optional[int] = Field(None, description="Ignored; tokens are issued for uid 0")

    @field_validator("channelName")
    def validate_channel_name(cls, v):
        """Validate that the channel name is not empty."""
        if not v.strip():
            raise ValueError("Channel name cannot be empty")
        return v


class TokenResponse(BaseModel):
    """Successful reply of POST /generate-token."""

    token: str


# Agent lifecycle
class StartAgentRequest(BaseModel):
    """Body of POST /start-agent."""

    channelName: str = Field(..., description="Channel the agent should join")
    token: str = Field(..., description="Join credential for the channel")


class StartAgentResponse(BaseModel):
    """Vendor agent-start payload, passed through to the caller."""

    model_config = ConfigDict(extra="allow")

    agent_id: Optional[str] = None
    status: Optional[str] = None
    create_ts: Optional[int] = None


class StopAgentRequest(BaseModel):
    """Body of POST /stop-agent."""

    agentId: str = Field(..., description="Identifier returned by /start-agent")


class StopAgentResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every 500 reply except the chat relay's."""

    error: str


# Chat relay
class ChatMessageRequest(BaseModel):
    """Body of POST /chat-message."""

    text: str = Field(..., description="User message")
    user_id: Optional[str] = Field(None, description="Opaque user identifier")
    channel: Optional[str] = Field(None, description="Chat channel, defaults to chat_channel")
    timestamp: Optional[str] = Field(None, description="ISO-8601 time the message was sent")
    session_id: Optional[str] = Field(None, description="Conversation identifier")


class WebhookPayload(BaseModel):
    """Payload posted to the workflow webhook."""

    text: str
    user_id: Optional[str] = None
    channel: str
    timestamp: Optional[str] = None
    session_id: str


class ChatMessageResponse(BaseModel):
    """Reply of POST /chat-message (also the webhook's reply shape)."""

    text: str
    status: str = "success"
    audio_url: Optional[str] = None

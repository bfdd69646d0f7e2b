"""
FastAPI server for the voice agent relay.

This module initializes and configures the FastAPI application that the browser
voice/chat client talks to. It mints short-lived channel join tokens, starts and
stops the remote conversational AI agent attached to a channel, and relays chat
text to the external workflow webhook, returning its answer to the caller.

Services are provided through FastAPI dependencies so they can be swapped out
(tests override them with clients backed by mock transports).
"""

from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config.logging_config import configure_logging
from app.config.settings import Settings, load_settings
from app.handlers.agent_handlers import handle_start_agent, handle_stop_agent
from app.handlers.chat_handlers import handle_chat_message, handle_test_webhook
from app.handlers.token_handlers import handle_generate_token
from app.models.api_schemas import (
    ChatMessageRequest,
    GenerateTokenRequest,
    StartAgentRequest,
    StopAgentRequest,
)
from app.services.agent_service import AgentService
from app.services.token_service import TokenService
from app.services.webhook_client import WebhookClient

# Load environment variables and configure logging
settings = load_settings()
logger = configure_logging(settings.log_level)

app = FastAPI(
    title="Voice Agent Relay",
    description="Token, agent lifecycle and chat relay backend for a browser voice agent client",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=bool(settings.frontend_url),
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_settings() -> Settings:
    return settings


def get_token_service(config: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(config.app_id, config.app_certificate)


def get_agent_service(config: Settings = Depends(get_settings)) -> AgentService:
    return AgentService(
        app_id=config.app_id,
        customer_id=config.customer_id,
        customer_secret=config.customer_secret,
        webhook_url=config.webhook_url,
        tts_api_key=config.tts_api_key,
        tts_voice_id=config.tts_voice_id,
        system_message=config.system_message,
        greeting_message=config.greeting_message,
    )


def get_webhook_client(config: Settings = Depends(get_settings)) -> WebhookClient:
    return WebhookClient(config.webhook_url)


@app.post("/generate-token")
async def generate_token(
    request: GenerateTokenRequest,
    token_service: TokenService = Depends(get_token_service),
):
    """Issue a join token for the requested channel."""
    return await handle_generate_token(request, token_service)


@app.post("/start-agent")
async def start_agent(
    request: StartAgentRequest,
    agent_service: AgentService = Depends(get_agent_service),
):
    """Start the conversational AI agent in the requested channel."""
    return await handle_start_agent(request, agent_service)


@app.post("/stop-agent")
async def stop_agent(
    request: StopAgentRequest,
    agent_service: AgentService = Depends(get_agent_service),
):
    """Remove a running agent from its channel."""
    return await handle_stop_agent(request, agent_service)


@app.post("/chat-message")
async def chat_message(
    request: ChatMessageRequest,
    webhook_client: WebhookClient = Depends(get_webhook_client),
):
    """Relay a chat message to the workflow webhook."""
    return await handle_chat_message(request, webhook_client)


@app.post("/test-webhook")
async def test_webhook(body: Optional[Dict[str, Any]] = Body(None)):
    """Echo the webhook contract without calling the webhook."""
    return await handle_test_webhook(body or {})


@app.get("/health")
async def health_check(config: Settings = Depends(get_settings)):
    """Health check endpoint for monitoring system status.

    Returns:
        dict: Status information and which integrations are configured.
    """
    return {
        "status": "healthy",
        "app_id_configured": bool(config.app_id),
        "certificate_configured": config.certificate_configured,
        "agent_api_configured": config.agent_api_configured,
        "webhook_configured": config.webhook_configured,
        "tts_configured": bool(config.tts_api_key and config.tts_voice_id),
    }


@app.get("/")
async def root():
    """Root endpoint to display basic information about the API."""
    return {
        "name": "Voice Agent Relay",
        "description": "Token, agent lifecycle and chat relay backend for a browser voice agent client",
        "version": "1.0.0",
        "endpoints": {
            "/generate-token": "Issue a channel join token",
            "/start-agent": "Start the AI agent in a channel",
            "/stop-agent": "Stop a running AI agent",
            "/chat-message": "Relay a chat message to the workflow webhook",
            "/test-webhook": "Echo the webhook response format",
            "/health": "Health check endpoint",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)

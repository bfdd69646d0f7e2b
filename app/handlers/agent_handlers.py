"""
Handles AI agent start/stop requests from the voice client.

Both handlers are thin: the vendor call lives in AgentService and any failure
of it (non-2xx answer or network error) is reported to the caller as a 500
with an `{error}` body.
"""

import logging

from fastapi.responses import JSONResponse

from app.config.constants import LOGGER_NAME
from app.models.api_schemas import (
    ErrorResponse,
    StartAgentRequest,
    StopAgentRequest,
    StopAgentResponse,
)
from app.services.agent_service import AgentService
from app.services.errors import AgentServiceError

logger = logging.getLogger(LOGGER_NAME)


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=message).model_dump())


async def handle_start_agent(
    request: StartAgentRequest, agent_service: AgentService
) -> JSONResponse:
    """
    Handle POST /start-agent.

    The vendor's payload (including ``agent_id`` and ``status``) is returned
    unchanged with the vendor's status code.
    """
    logger.info(f"Agent start requested for channel: {request.channelName}")
    try:
        status_code, payload = await agent_service.start_agent(request.channelName, request.token)
    except AgentServiceError as e:
        logger.error(f"Failed to start agent: {e}")
        return _error(str(e))
    return JSONResponse(status_code=status_code, content=payload)


async def handle_stop_agent(
    request: StopAgentRequest, agent_service: AgentService
) -> StopAgentResponse | JSONResponse:
    """Handle POST /stop-agent."""
    try:
        await agent_service.stop_agent(request.agentId)
    except AgentServiceError as e:
        logger.error(f"Failed to stop agent {request.agentId}: {e}")
        return _error(str(e))
    return StopAgentResponse(success=True)

"""
Handles join-credential requests from the voice client.

The client asks for a token right after choosing a fresh channel name; the
token is needed before it can join the channel and before the agent can be
started in it.
"""

import logging

from fastapi.responses import JSONResponse

from app.config.constants import LOGGER_NAME
from app.models.api_schemas import ErrorResponse, GenerateTokenRequest, TokenResponse
from app.services.errors import ServiceError
from app.services.token_service import TokenService

logger = logging.getLogger(LOGGER_NAME)


async def handle_generate_token(
    request: GenerateTokenRequest, token_service: TokenService
) -> TokenResponse | JSONResponse:
    """
    Handle POST /generate-token.

    Args:
        request: Body carrying the channel name
        token_service: Service signing the token

    Returns:
        A TokenResponse, or a 500 JSON error when signing material is missing
        or the token library fails
    """
    try:
        token = token_service.generate(request.channelName)
    except ServiceError as e:
        logger.error(f"Token request for channel {request.channelName} failed: {e}")
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())
    return TokenResponse(token=token)

"""
HTTP client for the relay backend, used by the voice and chat sessions.

All traffic goes through httpx event hooks that publish API_CALL and
API_RESPONSE debug events, so request logging stays out of the session
controller's control flow. Failures surface as UpstreamRequestError.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from app.client.debug_events import (
    API_CALL,
    API_ERROR,
    API_RESPONSE,
    SOURCE_BACKEND,
    SOURCE_FRONTEND,
    DebugEventBus,
)
from app.client.errors import UpstreamRequestError
from app.config.constants import BACKEND_TIMEOUT, LOGGER_NAME
from app.models.api_schemas import ChatMessageResponse, StartAgentResponse

logger = logging.getLogger(LOGGER_NAME)


class BackendClient:
    """
    Calls the relay backend's token, agent and chat endpoints.

    Args:
        base_url: Root URL of the backend
        debug_bus: Sink for request/response debug events
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        debug_bus: Optional[DebugEventBus] = None,
        timeout: float = BACKEND_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.debug_bus = debug_bus or DebugEventBus()
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            event_hooks={"request": [self._on_request], "response": [self._on_response]},
        )

    async def _on_request(self, request: httpx.Request) -> None:
        body = None
        if request.content:
            try:
                body = json.loads(request.content)
            except ValueError:
                body = None
        self.debug_bus.emit(
            API_CALL,
            SOURCE_FRONTEND,
            SOURCE_BACKEND,
            {"url": str(request.url), "method": request.method, "body": body},
        )

    async def _on_response(self, response: httpx.Response) -> None:
        await response.aread()
        try:
            data = response.json()
        except ValueError:
            data = response.text
        self.debug_bus.emit(
            API_RESPONSE,
            SOURCE_BACKEND,
            SOURCE_FRONTEND,
            {"url": str(response.request.url), "status": response.status_code, "data": data},
        )

    async def _post(self, path: str, payload: Dict[str, Any], failure: str) -> Any:
        try:
            async with self._client() as client:
                response = await client.post(path, json=payload)
        except httpx.HTTPError as e:
            self.debug_bus.emit(
                API_ERROR,
                SOURCE_BACKEND,
                SOURCE_FRONTEND,
                {"url": f"{self.base_url}{path}", "error": str(e)},
            )
            raise UpstreamRequestError(f"{failure} ({e.__class__.__name__}: {e})") from e

        if not response.is_success:
            detail = _error_detail(response)
            raise UpstreamRequestError(
                f"{failure} (HTTP {response.status_code}{': ' + detail if detail else ''})",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamRequestError(f"{failure} (invalid JSON response)") from e

    async def generate_token(self, channel_name: str) -> str:
        """Request a join token for ``channel_name``."""
        data = await self._post(
            "/generate-token",
            {"channelName": channel_name, "uid": None},
            "Failed to fetch token from backend.",
        )
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise UpstreamRequestError("Failed to fetch token from backend. (no token in response)")
        return token

    async def start_agent(self, channel_name: str, token: str) -> StartAgentResponse:
        """Ask the backend to start the AI agent in ``channel_name``."""
        data = await self._post(
            "/start-agent",
            {"channelName": channel_name, "token": token},
            "Failed to start AI agent.",
        )
        agent = StartAgentResponse.model_validate(data)
        if not agent.agent_id:
            raise UpstreamRequestError("Failed to start AI agent. (no agent_id in response)")
        return agent

    async def stop_agent(self, agent_id: str) -> None:
        """Ask the backend to stop the agent ``agent_id``."""
        await self._post("/stop-agent", {"agentId": agent_id}, "Failed to stop AI agent.")

    async def send_chat_message(
        self,
        text: str,
        user_id: str,
        channel: str,
        timestamp: str,
    ) -> ChatMessageResponse:
        """Relay a chat message through the backend."""
        data = await self._post(
            "/chat-message",
            {"text": text, "user_id": user_id, "channel": channel, "timestamp": timestamp},
            "Failed to get a chat response.",
        )
        return ChatMessageResponse.model_validate(data)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or "")
    return ""

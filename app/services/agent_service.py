"""
Client for the vendor conversational AI agent REST API.

Starting an agent asks the vendor to attach an AI participant to a channel; the
agent listens to the user, forwards recognised speech to our workflow webhook
(used as its LLM endpoint), and speaks the webhook's answers through the
configured speech-synthesis voice. Stopping an agent removes it from the channel.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from app.config.constants import (
    AGENT_API_BASE_URL,
    AGENT_API_TIMEOUT,
    AGENT_TTS_VENDOR,
    DEFAULT_GREETING_MESSAGE,
    DEFAULT_SYSTEM_MESSAGE,
    LOGGER_NAME,
)
from app.config.logging_config import mask_secret
from app.models.agent_schemas import (
    AgentJoinRequest,
    AgentProperties,
    LLMConfig,
    SystemMessage,
    TTSConfig,
    TTSParams,
)
from app.services.errors import AgentServiceError

logger = logging.getLogger(LOGGER_NAME)


class AgentService:
    """
    Starts and stops remote AI agents through the vendor REST API.

    Requests are authenticated with HTTP basic auth built from the customer
    id/secret pair and scoped to the project identified by ``app_id``.
    """

    def __init__(
        self,
        app_id: str,
        customer_id: str,
        customer_secret: str,
        webhook_url: str = "",
        tts_api_key: str = "",
        tts_voice_id: str = "",
        system_message: str = DEFAULT_SYSTEM_MESSAGE,
        greeting_message: str = DEFAULT_GREETING_MESSAGE,
        base_url: str = AGENT_API_BASE_URL,
        timeout: float = AGENT_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id
        self.webhook_url = webhook_url
        self.tts_api_key = tts_api_key
        self.tts_voice_id = tts_voice_id
        self.system_message = system_message
        self.greeting_message = greeting_message
        self.project_url = f"{base_url.rstrip('/')}/{app_id}"
        self.timeout = timeout
        self._auth = httpx.BasicAuth(customer_id, customer_secret)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=self._auth,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    def build_join_request(self, channel_name: str, token: str) -> AgentJoinRequest:
        """
        Build the vendor payload that attaches an agent to ``channel_name``.

        Args:
            channel_name: Channel the agent joins
            token: Join credential the agent uses

        Returns:
            AgentJoinRequest: The validated request body
        """
        return AgentJoinRequest(
            name=f"agent_{AGENT_TTS_VENDOR}_{int(time.time() * 1000)}",
            properties=AgentProperties(
                channel=channel_name,
                token=token,
                llm=LLMConfig(
                    url=self.webhook_url,
                    system_messages=[SystemMessage(content=self.system_message)],
                    greeting_message=self.greeting_message,
                ),
                tts=TTSConfig(
                    params=TTSParams(key=self.tts_api_key, voice_id=self.tts_voice_id)
                ),
            ),
        )

    async def start_agent(self, channel_name: str, token: str) -> Tuple[int, Dict[str, Any]]:
        """
        Ask the vendor to start an agent in ``channel_name``.

        Returns:
            Tuple of the vendor status code and its JSON payload (which carries
            ``agent_id`` and ``status``)

        Raises:
            AgentServiceError: On a non-2xx answer or a transport failure
        """
        join_request = self.build_join_request(channel_name, token)
        logger.info(
            f"Starting AI agent {join_request.name} for channel {channel_name} "
            f"(token: {mask_secret(token, 20)}, tts key: {mask_secret(self.tts_api_key)})"
        )
        url = f"{self.project_url}/join"
        try:
            async with self._client() as client:
                response = await client.post(url, json=join_request.model_dump())
        except httpx.HTTPError as e:
            logger.error(f"Agent API request failed: {e}")
            raise AgentServiceError(f"Agent API request failed: {e}") from e

        payload = _json_or_empty(response)
        if not response.is_success:
            message = payload.get("message") or "Unknown error"
            logger.error(f"Agent API error: status {response.status_code}, response: {payload}")
            raise AgentServiceError(
                f"Agent API responded with status {response.status_code}: {message}",
                status_code=response.status_code,
                payload=payload,
            )

        logger.info(
            f"Agent started: id={payload.get('agent_id')} status={payload.get('status')}"
        )
        return response.status_code, payload

    async def stop_agent(self, agent_id: str) -> None:
        """
        Remove the agent ``agent_id`` from its channel.

        Raises:
            AgentServiceError: On a non-2xx answer or a transport failure
        """
        logger.info(f"Stopping agent with ID: {agent_id}")
        url = f"{self.project_url}/agents/{agent_id}/leave"
        try:
            async with self._client() as client:
                response = await client.post(url)
        except httpx.HTTPError as e:
            logger.error(f"Agent API request failed: {e}")
            raise AgentServiceError(f"Agent API request failed: {e}") from e

        if not response.is_success:
            payload = _json_or_empty(response)
            logger.error(f"Error stopping agent: status {response.status_code}, response: {payload}")
            raise AgentServiceError(
                f"Agent API responded with status {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        logger.info(f"Agent stopped: {agent_id}")


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {"data": payload}

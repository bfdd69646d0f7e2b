"""
Pydantic models for the conversational AI agent "join" request.

The vendor API expects a named agent plus a properties block describing the
channel to join, which remote users to listen to, the LLM endpoint (our
workflow webhook), speech recognition and speech synthesis settings.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from app.config.constants import (
    AGENT_ASR_LANGUAGE,
    AGENT_IDLE_TIMEOUT,
    AGENT_LLM_API_KEY,
    AGENT_LLM_MAX_HISTORY,
    AGENT_LLM_MODEL,
    AGENT_REMOTE_RTC_UIDS,
    AGENT_RTC_UID,
    AGENT_TTS_VENDOR,
    DEFAULT_FAILURE_MESSAGE,
    DEFAULT_GREETING_MESSAGE,
)


class SystemMessage(BaseModel):
    role: str = "system"
    content: str


class LLMConfig(BaseModel):
    """LLM section; the url points at the workflow webhook."""

    url: str
    api_key: str = AGENT_LLM_API_KEY
    system_messages: List[SystemMessage] = Field(default_factory=list)
    greeting_message: str = DEFAULT_GREETING_MESSAGE
    failure_message: str = DEFAULT_FAILURE_MESSAGE
    max_history: int = AGENT_LLM_MAX_HISTORY
    params: Dict[str, str] = Field(default_factory=lambda: {"model": AGENT_LLM_MODEL})


class ASRConfig(BaseModel):
    language: str = AGENT_ASR_LANGUAGE


class TTSParams(BaseModel):
    key: str
    voice_id: str


class TTSConfig(BaseModel):
    vendor: str = AGENT_TTS_VENDOR
    params: TTSParams


class AgentProperties(BaseModel):
    channel: str
    token: str
    agent_rtc_uid: str = AGENT_RTC_UID
    remote_rtc_uids: List[str] = Field(default_factory=lambda: list(AGENT_REMOTE_RTC_UIDS))
    enable_string_uid: bool = False
    idle_timeout: int = AGENT_IDLE_TIMEOUT
    mute_agent: bool = False
    llm: LLMConfig
    asr: ASRConfig = Field(default_factory=ASRConfig)
    tts: TTSConfig


class AgentJoinRequest(BaseModel):
    """Body of POST .../projects/{app_id}/join."""

    name: str
    properties: AgentProperties

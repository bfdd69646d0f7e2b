"""
Environment-based settings for the relay backend.

Values are read from the process environment after loading ``.env.local`` and
``.env`` (when present) with python-dotenv. Variables already set in the
environment always win over file values.
"""

import os
from pathlib import Path
from typing import Optional

import dotenv
from pydantic import BaseModel, Field

from app.config.constants import (
    DEFAULT_GREETING_MESSAGE,
    DEFAULT_SYSTEM_MESSAGE,
    PLACEHOLDER_CERTIFICATE,
)

ENV_FILES = (Path(".") / ".env.local", Path(".") / ".env")


class Settings(BaseModel):
    """Backend configuration resolved from the environment."""

    app_id: str = Field("", description="Real-time platform application identity")
    app_certificate: str = Field("", description="Signing certificate for join tokens")
    customer_id: str = Field("", description="Customer id for the agent REST API")
    customer_secret: str = Field("", description="Customer secret for the agent REST API")
    webhook_url: str = Field("", description="Workflow webhook answering chat and agent LLM calls")
    tts_api_key: str = Field("", description="Speech-synthesis API key")
    tts_voice_id: str = Field("", description="Speech-synthesis voice identifier")
    frontend_url: Optional[str] = Field(None, description="Origin allowed by the CORS policy")
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    system_message: str = DEFAULT_SYSTEM_MESSAGE
    greeting_message: str = DEFAULT_GREETING_MESSAGE

    @property
    def certificate_configured(self) -> bool:
        return bool(self.app_certificate) and self.app_certificate != PLACEHOLDER_CERTIFICATE

    @property
    def agent_api_configured(self) -> bool:
        return bool(self.app_id and self.customer_id and self.customer_secret)

    @property
    def webhook_configured(self) -> bool:
        return bool(self.webhook_url)

    @property
    def tts_key_looks_valid(self) -> bool:
        # Diagnostic only; keys are issued with an "sk_" prefix.
        key = self.tts_api_key
        return len(key) > 10 and key.startswith("sk_")

    @property
    def cors_origins(self) -> list:
        return [self.frontend_url] if self.frontend_url else ["*"]


def load_env_files() -> None:
    """Load environment files into ``os.environ`` without overriding."""
    for env_path in ENV_FILES:
        if env_path.exists():
            dotenv.load_dotenv(env_path, override=False)


def load_settings() -> Settings:
    """
    Build a Settings instance from environment variables.

    Returns:
        Settings: The resolved configuration
    """
    load_env_files()
    values = {
        "app_id": os.getenv("AGORA_APP_ID", ""),
        "app_certificate": os.getenv("AGORA_APP_CERTIFICATE", ""),
        "customer_id": os.getenv("AGORA_CUSTOMER_ID", ""),
        "customer_secret": os.getenv("AGORA_CUSTOMER_SECRET", ""),
        "webhook_url": os.getenv("WEBHOOK_URL") or os.getenv("N8N_WEBHOOK_URL", ""),
        "tts_api_key": os.getenv("ELEVENLABS_API_KEY", ""),
        "tts_voice_id": os.getenv("ELEVENLABS_VOICE_ID", ""),
        "frontend_url": os.getenv("FRONTEND_URL") or None,
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "3000")),
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
    }
    if os.getenv("AGENT_SYSTEM_MESSAGE"):
        values["system_message"] = os.getenv("AGENT_SYSTEM_MESSAGE")
    if os.getenv("AGENT_GREETING"):
        values["greeting_message"] = os.getenv("AGENT_GREETING")
    return Settings(**values)

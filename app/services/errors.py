"""Exceptions raised by the outbound service integrations."""

from typing import Any, Optional


class ServiceError(Exception):
    """Base class for failures talking to an external collaborator."""


class TokenConfigurationError(ServiceError):
    """Signing material is missing or still set to a placeholder."""


class TokenGenerationError(ServiceError):
    """The token library failed to build a credential."""


class AgentServiceError(ServiceError):
    """The agent lifecycle API answered non-2xx or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class WebhookError(ServiceError):
    """The workflow webhook is unconfigured, unreachable or answered badly."""

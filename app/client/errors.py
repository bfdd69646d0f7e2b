"""Exceptions raised on the voice client side."""

from typing import Optional


class SessionError(Exception):
    """Base class for voice session bring-up failures."""


class ConfigurationError(SessionError):
    """Static client configuration is missing or still a placeholder."""


class UpstreamRequestError(SessionError):
    """A backend call answered non-2xx or could not be completed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AgentJoinTimeoutError(SessionError):
    """The agent never published audio in the channel."""

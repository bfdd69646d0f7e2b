"""
Join-credential issuing for the real-time communication platform.

Tokens are built by the vendor's token library; this module only decides the
scope (channel, uid, publisher role) and the validity window.
"""

import logging
import time

from agora_token_builder import RtcTokenBuilder

from app.config.constants import (
    LOGGER_NAME,
    PLACEHOLDER_CERTIFICATE,
    ROLE_PUBLISHER,
    TOKEN_EXPIRATION_SECONDS,
    TOKEN_UID,
)
from app.services.errors import TokenConfigurationError, TokenGenerationError

logger = logging.getLogger(LOGGER_NAME)


class TokenService:
    """Issues time-boxed channel join tokens."""

    def __init__(
        self,
        app_id: str,
        app_certificate: str,
        expiration_seconds: int = TOKEN_EXPIRATION_SECONDS,
    ):
        self.app_id = app_id
        self.app_certificate = app_certificate
        self.expiration_seconds = expiration_seconds

    @property
    def configured(self) -> bool:
        return bool(self.app_certificate) and self.app_certificate != PLACEHOLDER_CERTIFICATE

    def generate(self, channel_name: str, uid: int = TOKEN_UID) -> str:
        """
        Build a publisher token for ``channel_name``.

        Args:
            channel_name: Channel the token grants access to
            uid: User id the token is bound to; 0 lets any uid join

        Returns:
            The signed token string

        Raises:
            TokenConfigurationError: If the app certificate is not configured
            TokenGenerationError: If the token library fails
        """
        if not self.configured:
            raise TokenConfigurationError("App Certificate is not configured on the server.")

        privilege_expired_ts = int(time.time()) + self.expiration_seconds
        logger.info(f"Generating token for channel: {channel_name}")
        try:
            token = RtcTokenBuilder.buildTokenWithUid(
                self.app_id,
                self.app_certificate,
                channel_name,
                uid,
                ROLE_PUBLISHER,
                privilege_expired_ts,
            )
        except Exception as e:
            logger.error(f"Token generation failed: {e}", exc_info=True)
            raise TokenGenerationError("Failed to generate RTC token.") from e

        if not token:
            raise TokenGenerationError("Failed to generate RTC token.")
        logger.info("Token generated successfully")
        return token

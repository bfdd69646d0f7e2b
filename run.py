"""
Run script for starting the Voice Agent Relay backend.

Loads the environment (including .env.local / .env), reports which integrations
are configured, and starts the FastAPI server with uvicorn.

Usage:
    python run.py [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

sys.path.append(str(Path(__file__).parent))

from app.config.logging_config import configure_logging, mask_secret
from app.config.settings import load_settings

settings = load_settings()
logger = configure_logging(settings.log_level)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Start the Voice Agent Relay server")
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port to run the server on (default: 3000 or PORT env var)",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Host to bind the server to (default: 0.0.0.0 or HOST env var)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args(argv)


def report_configuration():
    """Log the configuration summary; missing pieces are warnings, not errors."""
    logger.info(f"App ID: {mask_secret(settings.app_id)}")
    logger.info(f"Customer ID: {mask_secret(settings.customer_id)}")
    logger.info(f"Webhook URL: {settings.webhook_url or 'Missing'}")
    logger.info(f"TTS API key: {mask_secret(settings.tts_api_key)}")

    if not settings.certificate_configured:
        logger.warning("AGORA_APP_CERTIFICATE is not set; /generate-token will fail")
    if not settings.agent_api_configured:
        logger.warning("Agent API credentials are incomplete; /start-agent will fail")
    if not settings.webhook_configured:
        logger.warning("WEBHOOK_URL is not set; chat will answer with the fallback reply")
    if settings.tts_api_key and not settings.tts_key_looks_valid:
        logger.warning("ELEVENLABS_API_KEY does not look like a valid key (expected 'sk_' prefix)")


def main(argv=None):
    """Main entry point for starting the server."""
    args = parse_args(argv)
    report_configuration()

    logger.info(f"Starting server on http://{args.host}:{args.port}")
    logger.info(f"Log level: {args.log_level}")

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        access_log=False,
        # Reload on code changes during development
        reload=os.getenv("ENV", "production").lower() == "development",
    )


if __name__ == "__main__":
    main()

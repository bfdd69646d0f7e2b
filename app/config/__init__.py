"""
Configuration module for the voice agent relay.

This module provides centralized configuration management for the entire application,
including constants, environment settings, and logging setup.

Key components:
- constants: Application-wide constants such as vendor endpoints, agent defaults,
  chat fallback texts and the session status strings.
- settings: Environment-backed Settings model (loaded through python-dotenv) with
  helpers telling whether signing material, agent credentials and the webhook are set.
- logging_config: Console and rotating-file logging plus secret masking for log lines.

Usage examples:
```python
from app.config.constants import LOGGER_NAME, TOKEN_EXPIRATION_SECONDS
from app.config.logging_config import configure_logging
from app.config.settings import load_settings

logger = configure_logging()
settings = load_settings()
logger.info(f"Webhook configured: {settings.webhook_configured}")
```
"""

# Config module initialization

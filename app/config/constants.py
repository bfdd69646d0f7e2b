"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for vendor endpoints, agent defaults, chat fallback
texts and the status strings shown while a voice session is brought up or torn down.
"""

# Logger name used throughout the application
LOGGER_NAME = "voice_agent_relay"

# Token signing
TOKEN_EXPIRATION_SECONDS = 3600
TOKEN_UID = 0
ROLE_PUBLISHER = 1

# Conversational AI agent REST API
AGENT_API_BASE_URL = "https://api.agora.io/api/conversational-ai-agent/v2/projects"
AGENT_API_TIMEOUT = 15.0  # seconds
AGENT_RTC_UID = "1"
AGENT_REMOTE_RTC_UIDS = ["0"]
AGENT_IDLE_TIMEOUT = 300
AGENT_LLM_API_KEY = "dummy_key"  # The vendor requires a key, the webhook ignores it
AGENT_LLM_MODEL = "gpt-4"
AGENT_LLM_MAX_HISTORY = 10
AGENT_ASR_LANGUAGE = "en-US"
AGENT_TTS_VENDOR = "elevenlabs"
DEFAULT_SYSTEM_MESSAGE = "You are a helpful and friendly support assistant."
DEFAULT_GREETING_MESSAGE = "Hi, I am your AI assistant. How can I help you today?"
DEFAULT_FAILURE_MESSAGE = (
    "I'm sorry, I'm having a little trouble right now. Could you please repeat that?"
)

# Chat relay
WEBHOOK_TIMEOUT = 20.0  # seconds
CHAT_DEFAULT_CHANNEL = "chat_channel"
CHAT_SESSION_PREFIX = "chat_session_"
CHAT_DEFAULT_REPLY = "I received your message."
CHAT_FALLBACK_TEMPLATE = (
    'I understand you said: "{text}". '
    "I'm your AI assistant and I'm here to help you!"
)
CHAT_INTERNAL_ERROR_TEXT = "Sorry, I encountered an error while processing your message."
CHAT_EMPTY_REPLY_TEXT = "Sorry, I could not process your message."
CHAT_UNAVAILABLE_TEXT = "Sorry, I'm having trouble connecting right now. Please try again."
CHAT_USER_PREFIX = "chat_user_"

# Values shipped in sample configs that mean "not configured yet"
PLACEHOLDER_CERTIFICATE = "your_agora_app_certificate_here"
PLACEHOLDER_BACKEND_URL = "https://your-backend-server.com"

# Voice session client
CHANNEL_PREFIX = "support_session_"
AGENT_JOIN_TIMEOUT_SECONDS = 30.0
BACKEND_TIMEOUT = 30.0  # seconds
DEBUG_HISTORY_SIZE = 50

# Signaling / capture event names
EVENT_USER_PUBLISHED = "user-published"
EVENT_USER_UNPUBLISHED = "user-unpublished"
EVENT_VOLUME_INDICATOR = "volume-indicator"

# Status texts
STATUS_DISCONNECTED = "Status: Disconnected"
STATUS_INITIALIZING = "Status: Initializing..."
STATUS_GETTING_TOKEN = "Status: Getting token..."
STATUS_JOINING = "Status: Joining channel..."
STATUS_STARTING_MIC = "Status: Starting microphone..."
STATUS_STARTING_AGENT = "Status: Starting AI agent..."
STATUS_WAITING_FOR_AGENT = "Status: Waiting for AI Agent to join..."
STATUS_AGENT_CONNECTED = "Status: AI Agent connected"
STATUS_DISCONNECTING = "Status: Disconnecting..."
ERROR_PREFIX = "Error: "

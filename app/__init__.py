"""
Voice Agent Relay - backend and session controller for browser voice agents

This application lets a user hold a spoken conversation with an AI voice agent
running on a third-party real-time communication platform. The backend signs
channel join tokens, starts and stops the conversational agent through the
vendor REST API, and relays text chat to a workflow webhook. The client side
drives one voice session at a time through a strict bring-up and teardown
sequence.

Architecture Overview:
- FastAPI server exposing the token, agent and chat endpoints
- Vendor agent REST API integration authenticated with customer credentials
- Webhook relay for text chat with a canned fallback reply
- Session controller state machine coordinating backend, channel and microphone

Key Components:
- client: Session controller, state machine, backend HTTP client, chat session
  and debug event bus
- config: Application-wide constants, environment settings, and logging setup
- handlers: Endpoint logic for tokens, agents and chat
- models: Request/response schemas, the vendor agent payload and the session model
- services: Token signing, agent lifecycle and webhook clients

Getting Started:
1. Set up environment variables (or a .env / .env.local file):
   - AGORA_APP_ID, AGORA_APP_CERTIFICATE: channel and signing material
   - AGORA_CUSTOMER_ID, AGORA_CUSTOMER_SECRET: agent REST API credentials
   - WEBHOOK_URL: workflow webhook used as the agent LLM and for chat
   - ELEVENLABS_API_KEY, ELEVENLABS_VOICE_ID: speech synthesis for the agent
   - PORT, HOST, LOG_LEVEL: server options (default 3000, 0.0.0.0, INFO)

2. Start the server:
   ```bash
   python run.py
   ```
"""

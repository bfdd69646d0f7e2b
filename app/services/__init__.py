"""
Services module for external integrations of the voice agent relay.

This module provides the clients the backend uses to reach its external
collaborators. Each service owns the request format of its collaborator and
raises a typed ServiceError subclass when the collaborator fails.

Key components:
- token_service: Builds time-boxed channel join tokens with the vendor token library.
- agent_service: Starts and stops conversational AI agents through the vendor REST
  API, authenticated with the customer id/secret pair.
- webhook_client: Forwards chat messages to the workflow webhook and normalises
  its `{text, status, audio_url}` answer.
- errors: The ServiceError hierarchy shared by the services and the handlers.

Usage examples:
```python
from app.services.agent_service import AgentService
from app.services.token_service import TokenService

tokens = TokenService(app_id="my-app-id", app_certificate="my-certificate")
token = tokens.generate("support_session_1700000000000")

agents = AgentService("my-app-id", "customer-id", "customer-secret",
                      webhook_url="https://workflows.example.com/webhook/agent")
status_code, payload = await agents.start_agent("support_session_1700000000000", token)
await agents.stop_agent(payload["agent_id"])
```
"""

# Services module initialization

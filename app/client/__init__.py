"""
Voice client module for the voice agent relay.

This module drives one voice conversation from the user's side: it asks the
backend for a join token, joins the channel, publishes the microphone, starts
the AI agent, and waits for the agent's audio. Tearing down runs the same
steps in reverse.

Key components:
- session_controller: The SessionController and its ClientConfig. Owns the
  bring-up sequence, the single-flight teardown and the stale-event guard.
- state_machine: Legal session state transitions, status text and history.
- backend_client: httpx client for the backend endpoints; publishes API debug events.
- chat_session: Text chat history relayed through the backend.
- debug_events: Bounded, newest-first debug event history with text export.
- interfaces: Protocols for the signaling client, audio tracks and media engine.

Usage examples:
```python
from app.client.session_controller import ClientConfig, SessionController

config = ClientConfig(app_id="my-app-id", backend_url="http://localhost:3000")
async with SessionController(config, media_engine) as controller:
    if await controller.start():
        ...
    await controller.stop()
```
"""

# Client module initialization

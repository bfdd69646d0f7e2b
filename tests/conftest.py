import asyncio
import inspect
import json
import logging

import httpx
import pytest

from app.client.backend_client import BackendClient
from app.client.debug_events import DebugEventBus
from app.client.session_controller import ClientConfig, SessionController

BACKEND_URL = "http://backend.test"
TEST_TOKEN = "007eJxTYPBqmzDDtnM4DwAA0123456789"


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


class FakeRemoteAudioTrack:
    def __init__(self):
        self.playing = False

    def play(self):
        self.playing = True


class FakeRemoteUser:
    def __init__(self, uid="1"):
        self.uid = uid
        self.audio_track = FakeRemoteAudioTrack()


class FakeLocalTrack:
    """Microphone double recording its lifecycle into the shared call log."""

    def __init__(self, calls):
        self.calls = calls
        self.handlers = {}
        self.stopped = False
        self.closed = False

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def off(self, event, handler):
        if handler in self.handlers.get(event, []):
            self.handlers[event].remove(handler)

    def stop(self):
        self.calls.append("track.stop")
        self.stopped = True

    def close(self):
        self.calls.append("track.close")
        self.closed = True

    def emit_volume(self, level):
        for handler in list(self.handlers.get("volume-indicator", [])):
            handler(level)


class FakeSignalingClient:
    """Channel client double; ``emit`` plays the platform's role for events."""

    def __init__(self, engine):
        self.engine = engine
        self.calls = engine.calls
        self.handlers = {}
        self.joined = None
        self.published = []
        self.subscribed = []
        self.left = False

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def off(self, event, handler):
        if handler in self.handlers.get(event, []):
            self.handlers[event].remove(handler)

    async def join(self, app_id, channel, token, uid):
        self.calls.append("join")
        if self.engine.join_error:
            raise self.engine.join_error
        self.joined = (app_id, channel, token, uid)

    async def publish(self, tracks):
        self.calls.append("publish")
        self.published.extend(tracks)

    async def subscribe(self, user, media_type):
        self.calls.append("subscribe")
        if self.engine.subscribe_error:
            raise self.engine.subscribe_error
        self.subscribed.append((user.uid, media_type))

    async def leave(self):
        self.calls.append("leave")
        self.left = True
        if self.engine.leave_error:
            raise self.engine.leave_error

    async def emit(self, event, *args):
        for handler in list(self.handlers.get(event, [])):
            result = handler(*args)
            if inspect.isawaitable(result):
                await result


class FakeMediaEngine:
    def __init__(self, calls):
        self.calls = calls
        self.clients = []
        self.tracks = []
        self.tasks = []
        self.join_error = None
        self.mic_error = None
        self.subscribe_error = None
        self.leave_error = None

    def create_client(self):
        self.calls.append("create_client")
        client = FakeSignalingClient(self)
        self.clients.append(client)
        return client

    async def create_microphone_audio_track(self):
        self.calls.append("create_microphone")
        if self.mic_error:
            raise self.mic_error
        track = FakeLocalTrack(self.calls)
        self.tracks.append(track)
        return track

    @property
    def client(self):
        return self.clients[-1] if self.clients else None

    @property
    def track(self):
        return self.tracks[-1] if self.tracks else None

    def publish_agent_soon(self, uid="1", media_type="audio"):
        """Have the agent publish its audio on the latest client."""
        client = self.client
        self.tasks.append(
            asyncio.ensure_future(client.emit("user-published", FakeRemoteUser(uid), media_type))
        )


class FakeBackend:
    """Routes for the relay backend served through httpx.MockTransport."""

    def __init__(self, calls):
        self.calls = calls
        self.requests = []
        self.responses = {
            "/generate-token": (200, {"token": TEST_TOKEN}),
            "/start-agent": (200, {"agent_id": "agent-123", "status": "RUNNING", "create_ts": 1700000000}),
            "/stop-agent": (200, {"success": True}),
            "/chat-message": (200, {"text": "Hi there!", "status": "success", "audio_url": None}),
        }
        self.errors = {}
        self.gates = {}
        self.callbacks = {}

    async def handler(self, request):
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((path, body))
        self.calls.append(path)
        if path in self.gates:
            await self.gates[path].wait()
        if path in self.callbacks:
            self.callbacks[path](body)
        if path in self.errors:
            raise self.errors[path]
        status, payload = self.responses[path]
        return httpx.Response(status, json=payload)

    def count(self, path):
        return sum(1 for p, _ in self.requests if p == path)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def backend(calls):
    return FakeBackend(calls)


@pytest.fixture
def media_engine(calls):
    return FakeMediaEngine(calls)


@pytest.fixture
def debug_bus():
    return DebugEventBus()


@pytest.fixture
def backend_client(backend, debug_bus):
    return BackendClient(BACKEND_URL, debug_bus=debug_bus, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def client_config():
    return ClientConfig(app_id="test-app-id", backend_url=BACKEND_URL, agent_join_timeout=1.0)


@pytest.fixture
def controller(client_config, media_engine, backend, backend_client, debug_bus):
    """Controller whose agent publishes audio as soon as it is started."""
    backend.callbacks["/start-agent"] = lambda body: media_engine.publish_agent_soon()
    return SessionController(client_config, media_engine, backend=backend_client, debug_bus=debug_bus)

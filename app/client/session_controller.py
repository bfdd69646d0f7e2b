"""
Voice session controller.

Coordinates one voice interaction across three collaborators: the relay
backend (join token and agent lifecycle), the real-time signaling client, and
the local microphone. Bring-up is a strict sequence, each step awaited before
the next:

1. validate the static configuration (fail fast, no resources touched)
2. pick a fresh channel name
3. fetch a join token for it
4. create the signaling client, register remote-publish handlers, join
5. create the microphone track, observe its volume, publish it
6. start the AI agent and keep its handle
7. wait, bounded, for the agent to publish audio, then report CONNECTED

Any failure aborts bring-up, shows "Error: <cause>", and runs the same
teardown used by stop(). Teardown releases in reverse order (agent, microphone,
channel), guards every release independently, and is safe to run however much
of bring-up completed. Only one bring-up or teardown is in flight at a time.
"""

import asyncio
import inspect
import logging
import time
from functools import partial
from typing import Any, Callable, Optional

from pydantic import BaseModel

from app.client.backend_client import BackendClient
from app.client.debug_events import (
    AGENT_START_REQUEST,
    AGENT_STARTED,
    AGENT_STOP_REQUEST,
    AUDIO_CONNECTED,
    SOURCE_BACKEND,
    SOURCE_FRONTEND,
    SOURCE_PLATFORM,
    SOURCE_USER,
    TOKEN_REQUEST,
    USER_ACTION,
    DebugEventBus,
)
from app.client.errors import AgentJoinTimeoutError, ConfigurationError, SessionError
from app.client.interfaces import MediaEngine
from app.client.state_machine import SessionStateMachine, TransitionListener
from app.config.constants import (
    AGENT_JOIN_TIMEOUT_SECONDS,
    ERROR_PREFIX,
    EVENT_USER_PUBLISHED,
    EVENT_USER_UNPUBLISHED,
    EVENT_VOLUME_INDICATOR,
    LOGGER_NAME,
    PLACEHOLDER_BACKEND_URL,
    STATUS_AGENT_CONNECTED,
    STATUS_DISCONNECTED,
    STATUS_DISCONNECTING,
    STATUS_GETTING_TOKEN,
    STATUS_INITIALIZING,
    STATUS_JOINING,
    STATUS_STARTING_AGENT,
    STATUS_STARTING_MIC,
    STATUS_WAITING_FOR_AGENT,
)
from app.config.logging_config import mask_secret
from app.models.session import Session, SessionState, new_channel_name

logger = logging.getLogger(LOGGER_NAME)


class ClientConfig(BaseModel):
    """Static configuration of the voice client."""

    app_id: str = ""
    backend_url: str = ""
    agent_join_timeout: float = AGENT_JOIN_TIMEOUT_SECONDS

    def validate_for_bring_up(self) -> None:
        """
        Raises:
            ConfigurationError: If the app id or backend URL is not configured
        """
        if not self.app_id.strip():
            raise ConfigurationError("App ID is not configured.")
        if not self.backend_url.strip() or self.backend_url.rstrip("/") == PLACEHOLDER_BACKEND_URL:
            raise ConfigurationError("Backend URL is not configured.")


class _BringUpAborted(Exception):
    """The session was torn down while bring-up was still running."""


class SessionController:
    """
    Single-flight voice session state machine for one client instance.

    Args:
        config: App id, backend URL and agent join timeout
        media_engine: Factory for signaling clients and microphone tracks
        backend: Relay backend client; built from ``config`` when omitted
        debug_bus: Sink for debug events; shared with the backend client
        on_transition: UI listener called with (previous state, state, status text)
        on_muted_change: UI listener called with the new muted flag
    """

    def __init__(
        self,
        config: ClientConfig,
        media_engine: MediaEngine,
        backend: Optional[BackendClient] = None,
        debug_bus: Optional[DebugEventBus] = None,
        on_transition: Optional[TransitionListener] = None,
        on_muted_change: Optional[Callable[[bool], None]] = None,
    ):
        self.config = config
        self.media_engine = media_engine
        self.debug_bus = debug_bus or (backend.debug_bus if backend else DebugEventBus())
        self.backend = backend or BackendClient(config.backend_url, debug_bus=self.debug_bus)
        self._machine = SessionStateMachine(on_transition=on_transition)
        self._on_muted_change = on_muted_change
        self._session: Optional[Session] = None
        self._last_channel: Optional[str] = None
        self._teardown_task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "SessionController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._machine.state

    @property
    def status_text(self) -> str:
        return self._machine.status_text

    @property
    def muted(self) -> bool:
        return self._session.muted if self._session else True

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def agent_handle(self) -> Optional[str]:
        return self._session.agent_handle if self._session else None

    @property
    def controls_enabled(self) -> bool:
        """False while a bring-up or teardown is running."""
        return self.state not in (SessionState.CONNECTING, SessionState.DISCONNECTING)

    @property
    def transition_history(self):
        return self._machine.history

    # ------------------------------------------------------------------
    # Bring-up
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """
        Bring up a voice session.

        Returns:
            True once the agent's audio is connected; False if the request was
            rejected (a session is already active), bring-up failed (the state
            is then ERROR), or the session was stopped before it connected
        """
        if self.state not in (SessionState.IDLE, SessionState.ERROR):
            logger.warning(f"Start rejected: session is {self.state.value}")
            return False

        self.debug_bus.emit(
            USER_ACTION, SOURCE_USER, SOURCE_PLATFORM, {"action": "START_CONVERSATION"}
        )
        self._machine.transition(SessionState.CONNECTING, STATUS_INITIALIZING)

        try:
            self.config.validate_for_bring_up()
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            self._machine.transition(SessionState.ERROR, f"{ERROR_PREFIX}{e}")
            return False

        session = Session(channel_name=new_channel_name(self._last_channel))
        self._last_channel = session.channel_name
        self._session = session
        logger.info(f"Starting voice session on channel {session.channel_name}")

        try:
            await self._bring_up(session)
        except _BringUpAborted:
            logger.info(f"Bring-up of {session.channel_name} aborted by teardown")
            await self._release_resources(session)
            return False
        except asyncio.CancelledError:
            if self._is_stale(session):
                await self._release_resources(session)
            else:
                await self._teardown(session=session)
            raise
        except Exception as e:
            await self._fail(session, e)
            return False

        self._machine.transition(SessionState.CONNECTED, STATUS_AGENT_CONNECTED)
        logger.info(f"Voice session connected on channel {session.channel_name}")
        return True

    async def _bring_up(self, session: Session) -> None:
        self._machine.set_status(STATUS_GETTING_TOKEN)
        self.debug_bus.emit(
            TOKEN_REQUEST, SOURCE_FRONTEND, SOURCE_BACKEND, {"channelName": session.channel_name}
        )
        token = await self.backend.generate_token(session.channel_name)
        self._ensure_active(session)
        session.credential = token

        client = self.media_engine.create_client()
        session.client = client
        session.listeners[EVENT_USER_PUBLISHED] = partial(self._handle_user_published, session)
        session.listeners[EVENT_USER_UNPUBLISHED] = partial(self._handle_user_unpublished, session)
        client.on(EVENT_USER_PUBLISHED, session.listeners[EVENT_USER_PUBLISHED])
        client.on(EVENT_USER_UNPUBLISHED, session.listeners[EVENT_USER_UNPUBLISHED])

        self._machine.set_status(STATUS_JOINING)
        await client.join(self.config.app_id, session.channel_name, token, None)
        self._ensure_active(session)

        self._machine.set_status(STATUS_STARTING_MIC)
        track = await self.media_engine.create_microphone_audio_track()
        session.audio_track = track
        self._ensure_active(session)
        session.listeners[EVENT_VOLUME_INDICATOR] = partial(self._handle_volume, session)
        track.on(EVENT_VOLUME_INDICATOR, session.listeners[EVENT_VOLUME_INDICATOR])
        await client.publish([track])
        self._ensure_active(session)
        self._set_muted(session, False)

        self._machine.set_status(STATUS_STARTING_AGENT)
        self.debug_bus.emit(
            AGENT_START_REQUEST,
            SOURCE_FRONTEND,
            SOURCE_BACKEND,
            {"channelName": session.channel_name, "token": mask_secret(token, 20)},
        )
        agent = await self.backend.start_agent(session.channel_name, token)
        session.agent_handle = agent.agent_id
        logger.info(f"AI Agent started with ID: {agent.agent_id}")
        self.debug_bus.emit(
            AGENT_STARTED,
            SOURCE_BACKEND,
            SOURCE_PLATFORM,
            {"agentId": agent.agent_id, "status": agent.status},
        )
        self._ensure_active(session)

        self._machine.set_status(STATUS_WAITING_FOR_AGENT)
        timeout = self.config.agent_join_timeout
        try:
            await asyncio.wait_for(session.remote_audio_ready.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            raise AgentJoinTimeoutError(f"AI Agent did not join within {timeout:g} seconds")
        self._ensure_active(session)
        if session.connect_error:
            raise SessionError(session.connect_error)

    def _ensure_active(self, session: Session) -> None:
        if self._is_stale(session):
            raise _BringUpAborted()

    async def _fail(self, session: Session, error: Exception) -> None:
        message = f"{ERROR_PREFIX}{error}"
        logger.error(f"Error during connection process: {error}")
        session.failure = message
        if self._is_stale(session):
            # A stop already tore this session down; only leftovers remain.
            await self._release_resources(session)
            return
        self._machine.set_status(message)
        await self._teardown(failure=message, session=session)

    # ------------------------------------------------------------------
    # Event handlers (bound to the session that registered them)
    # ------------------------------------------------------------------

    def _is_stale(self, session: Session) -> bool:
        return session.closing or session is not self._session

    async def _handle_user_published(self, session: Session, user: Any, media_type: str) -> None:
        if self._is_stale(session) or session.client is None:
            logger.debug(f"Ignoring stale user-published event for {session.channel_name}")
            return
        try:
            await session.client.subscribe(user, media_type)
        except Exception as e:
            logger.error(f"Failed to subscribe to remote user {getattr(user, 'uid', None)}: {e}")
            if not session.remote_audio_ready.is_set():
                session.connect_error = "Could not connect to agent"
                session.remote_audio_ready.set()
            return

        if self._is_stale(session) or media_type != "audio":
            return
        audio_track = getattr(user, "audio_track", None)
        if audio_track is not None:
            audio_track.play()
        logger.info(f"Subscribed to and playing AI agent audio: {getattr(user, 'uid', None)}")
        self.debug_bus.emit(
            AUDIO_CONNECTED,
            SOURCE_PLATFORM,
            SOURCE_FRONTEND,
            {"userId": getattr(user, "uid", None), "mediaType": "audio", "state": "CONNECTED"},
        )
        session.remote_audio_ready.set()

    async def _handle_user_unpublished(self, session: Session, user: Any, media_type: str) -> None:
        if self._is_stale(session):
            return
        logger.info(f"Remote user {getattr(user, 'uid', None)} unpublished {media_type}")

    def _handle_volume(self, session: Session, result: Any) -> None:
        if self._is_stale(session):
            return
        level = result.get("level") if isinstance(result, dict) else getattr(result, "level", result)
        self._set_muted(session, level == 0)

    def _set_muted(self, session: Session, muted: bool) -> None:
        if session.muted == muted:
            return
        session.muted = muted
        if self._on_muted_change and session is self._session:
            try:
                self._on_muted_change(muted)
            except Exception as e:
                logger.error(f"Muted listener error: {e}")

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """End the conversation; accepted while connecting or connected."""
        self.debug_bus.emit(
            USER_ACTION, SOURCE_USER, SOURCE_PLATFORM, {"action": "END_CONVERSATION"}
        )
        await self._teardown()

    async def dispose(self) -> None:
        """Release everything when the owning component goes away."""
        if self._session is None and self.state == SessionState.IDLE:
            return
        await self._teardown()

    async def _teardown(self, failure: Optional[str] = None, session: Optional[Session] = None) -> None:
        if self._teardown_task is not None and not self._teardown_task.done():
            await asyncio.shield(self._teardown_task)
            return
        target = session if session is not None else self._session
        self._teardown_task = asyncio.ensure_future(self._run_teardown(target, failure))
        await asyncio.shield(self._teardown_task)

    async def _run_teardown(self, session: Optional[Session], failure: Optional[str]) -> None:
        self._machine.transition(
            SessionState.DISCONNECTING, None if failure else STATUS_DISCONNECTING
        )
        if session is not None:
            self._begin_closing(session)
            await self._release_resources(session)
            if self._session is session:
                self._session = None
            logger.info(
                f"Session {session.channel_name} closed after "
                f"{time.time() - session.created_at:.1f}s"
            )

        if failure:
            self._machine.transition(SessionState.ERROR, failure)
        else:
            self._machine.transition(SessionState.IDLE, STATUS_DISCONNECTED)
            logger.info("Successfully disconnected")

    def _begin_closing(self, session: Session) -> None:
        """Stop reacting to remote events and wake a bring-up waiting for the agent."""
        session.closing = True
        client = session.client
        if client is not None:
            for event in (EVENT_USER_PUBLISHED, EVENT_USER_UNPUBLISHED):
                handler = session.listeners.pop(event, None)
                if handler is None:
                    continue
                try:
                    client.off(event, handler)
                except Exception as e:
                    logger.warning(f"Failed to deregister {event} handler: {e}")
        session.remote_audio_ready.set()

    async def _release_resources(self, session: Session) -> None:
        """
        Release whatever ``session`` still holds: agent, then microphone, then channel.

        Every field is cleared before its release is attempted, so running this
        twice (or concurrently) never releases anything twice.
        """
        if not session.holds_resources:
            return

        agent_id, session.agent_handle = session.agent_handle, None
        if agent_id:
            self.debug_bus.emit(
                AGENT_STOP_REQUEST, SOURCE_FRONTEND, SOURCE_BACKEND, {"agentId": agent_id}
            )
            try:
                await self.backend.stop_agent(agent_id)
                logger.info("AI Agent stopped")
            except Exception as e:
                logger.error(f"Error stopping agent {agent_id}: {e}", exc_info=True)

        track, session.audio_track = session.audio_track, None
        if track is not None:
            handler = session.listeners.pop(EVENT_VOLUME_INDICATOR, None)
            if handler is not None:
                try:
                    track.off(EVENT_VOLUME_INDICATOR, handler)
                except Exception as e:
                    logger.warning(f"Failed to deregister volume handler: {e}")
            try:
                await _maybe_await(track.stop())
            except Exception as e:
                logger.error(f"Error stopping microphone: {e}")
            try:
                await _maybe_await(track.close())
            except Exception as e:
                logger.error(f"Error closing microphone: {e}")
        self._set_muted(session, True)

        client, session.client = session.client, None
        if client is not None:
            for event in (EVENT_USER_PUBLISHED, EVENT_USER_UNPUBLISHED):
                handler = session.listeners.pop(event, None)
                if handler is not None:
                    try:
                        client.off(event, handler)
                    except Exception as e:
                        logger.warning(f"Failed to deregister {event} handler: {e}")
            try:
                await client.leave()
            except Exception as e:
                logger.error(f"Error leaving channel {session.channel_name}: {e}")


async def _maybe_await(result: Any) -> None:
    if inspect.isawaitable(result):
        await result

"""
Voice session state machine.

Enforces the lifecycle IDLE → CONNECTING → CONNECTED → DISCONNECTING → IDLE,
with ERROR as the terminal state of a failed bring-up. All state changes go
through this module so illegal states cannot be reached and every transition
is logged and reported to the UI listener.
"""

import logging
import time
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Set

from app.config.constants import LOGGER_NAME, STATUS_DISCONNECTED
from app.models.session import SessionState

logger = logging.getLogger(f"{LOGGER_NAME}.state")

# Legal state transitions
TRANSITIONS: Dict[SessionState, Set[SessionState]] = {
    SessionState.IDLE: {SessionState.CONNECTING, SessionState.DISCONNECTING},
    SessionState.ERROR: {SessionState.CONNECTING, SessionState.DISCONNECTING},
    SessionState.CONNECTING: {
        SessionState.CONNECTED,
        SessionState.DISCONNECTING,
        SessionState.ERROR,
    },
    SessionState.CONNECTED: {SessionState.DISCONNECTING},
    SessionState.DISCONNECTING: {SessionState.IDLE, SessionState.ERROR},
}

MAX_HISTORY = 100

# Listener receives (previous state, new state, status text)
TransitionListener = Callable[[SessionState, SessionState, str], None]


class InvalidTransitionError(ValueError):
    """Raised when a transition is not in the table."""


class SessionStateMachine:
    """
    Holds the current state and status text of the voice session.

    Usage:
        sm = SessionStateMachine(on_transition=render)
        sm.transition(SessionState.CONNECTING, "Status: Initializing...")
        sm.transition(SessionState.CONNECTED, "Status: AI Agent connected")
        sm.transition(SessionState.IDLE)  # illegal from CONNECTED, raises
    """

    def __init__(self, on_transition: Optional[TransitionListener] = None) -> None:
        self._state = SessionState.IDLE
        self._status_text = STATUS_DISCONNECTED
        self._on_transition = on_transition
        self._history: Deque[Dict] = deque(maxlen=MAX_HISTORY)
        self._entered_at = time.time()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status_text(self) -> str:
        return self._status_text

    @property
    def history(self) -> List[Dict]:
        return list(self._history)

    def can_transition(self, target: SessionState) -> bool:
        return target == self._state or target in TRANSITIONS[self._state]

    def transition(self, target: SessionState, status_text: Optional[str] = None) -> None:
        """
        Move to ``target``, optionally replacing the status text.

        A transition to the current state only updates the status text.

        Raises:
            InvalidTransitionError: If the move is not allowed from the current state
        """
        if target == self._state:
            if status_text is not None:
                self.set_status(status_text)
            return

        if not self.can_transition(target):
            raise InvalidTransitionError(
                f"Illegal state transition: {self._state.value} → {target.value}. "
                f"Allowed: {sorted(s.value for s in TRANSITIONS[self._state])}"
            )

        prev = self._state
        now = time.time()
        self._history.append({
            "from": prev.value,
            "to": target.value,
            "status": status_text,
            "timestamp": now,
            "duration_in_prev_ms": round((now - self._entered_at) * 1000, 1),
        })
        self._state = target
        self._entered_at = now
        if status_text is not None:
            self._status_text = status_text

        logger.info(f"STATE: {prev.value} → {target.value} ({self._status_text})")
        self._notify(prev)

    def set_status(self, status_text: str) -> None:
        """Update the status text without changing state."""
        if status_text == self._status_text:
            return
        self._status_text = status_text
        logger.debug(f"STATUS: {status_text}")
        self._notify(self._state)

    def _notify(self, prev: SessionState) -> None:
        if not self._on_transition:
            return
        try:
            self._on_transition(prev, self._state, self._status_text)
        except Exception as e:
            logger.error(f"State listener error: {e}")

import pytest

from app.client.state_machine import (
    TRANSITIONS,
    InvalidTransitionError,
    SessionStateMachine,
)
from app.models.session import SessionState


def test_initial_state():
    sm = SessionStateMachine()
    assert sm.state == SessionState.IDLE
    assert sm.status_text == "Status: Disconnected"
    assert sm.history == []


def test_every_state_has_an_entry():
    assert set(TRANSITIONS) == set(SessionState)


@pytest.mark.parametrize(
    "path",
    [
        [SessionState.CONNECTING, SessionState.CONNECTED, SessionState.DISCONNECTING, SessionState.IDLE],
        [SessionState.CONNECTING, SessionState.DISCONNECTING, SessionState.ERROR, SessionState.CONNECTING],
        [SessionState.CONNECTING, SessionState.ERROR, SessionState.DISCONNECTING, SessionState.IDLE],
        [SessionState.DISCONNECTING, SessionState.IDLE],
    ],
)
def test_legal_paths(path):
    sm = SessionStateMachine()
    for target in path:
        sm.transition(target)
    assert sm.state == path[-1]
    assert [entry["to"] for entry in sm.history] == [s.value for s in path]


@pytest.mark.parametrize(
    "prefix, target",
    [
        ([], SessionState.CONNECTED),
        ([], SessionState.ERROR),
        ([SessionState.CONNECTING, SessionState.CONNECTED], SessionState.IDLE),
        ([SessionState.CONNECTING, SessionState.CONNECTED], SessionState.CONNECTING),
        ([SessionState.CONNECTING, SessionState.DISCONNECTING], SessionState.CONNECTED),
    ],
)
def test_illegal_transitions_raise(prefix, target):
    sm = SessionStateMachine()
    for state in prefix:
        sm.transition(state)
    before = sm.state

    with pytest.raises(InvalidTransitionError):
        sm.transition(target)
    assert sm.state == before


def test_same_state_only_updates_status():
    seen = []
    sm = SessionStateMachine(on_transition=lambda prev, state, status: seen.append((prev, state, status)))
    sm.transition(SessionState.CONNECTING, "Status: Initializing...")
    sm.transition(SessionState.CONNECTING, "Status: Getting token...")

    assert len(sm.history) == 1
    assert sm.status_text == "Status: Getting token..."
    assert seen[-1] == (SessionState.CONNECTING, SessionState.CONNECTING, "Status: Getting token...")


def test_transition_without_status_keeps_text():
    sm = SessionStateMachine()
    sm.transition(SessionState.CONNECTING, "Error: boom")
    sm.transition(SessionState.DISCONNECTING)
    assert sm.status_text == "Error: boom"


def test_set_status_skips_duplicates():
    seen = []
    sm = SessionStateMachine(on_transition=lambda *args: seen.append(args))
    sm.set_status("Status: Disconnected")
    assert seen == []
    sm.set_status("Status: Joining channel...")
    assert len(seen) == 1


def test_listener_errors_are_swallowed():
    def broken(prev, state, status):
        raise RuntimeError("render failed")

    sm = SessionStateMachine(on_transition=broken)
    sm.transition(SessionState.CONNECTING)
    assert sm.state == SessionState.CONNECTING


def test_history_records_durations():
    sm = SessionStateMachine()
    sm.transition(SessionState.CONNECTING, "Status: Initializing...")
    entry = sm.history[0]
    assert entry["from"] == "IDLE"
    assert entry["to"] == "CONNECTING"
    assert entry["status"] == "Status: Initializing..."
    assert entry["duration_in_prev_ms"] >= 0


def test_can_transition():
    sm = SessionStateMachine()
    assert sm.can_transition(SessionState.CONNECTING)
    assert sm.can_transition(SessionState.IDLE)
    assert not sm.can_transition(SessionState.CONNECTED)

"""
Voice session data model.

A Session is the unit of work for one voice interaction. It is created fresh for
every bring-up attempt, filled in step by step while connecting, and emptied by
teardown. Sessions live only in memory; nothing here is persisted.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from app.config.constants import CHANNEL_PREFIX


class SessionState(str, Enum):
    """Lifecycle states of the voice session."""

    IDLE = "IDLE"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    DISCONNECTING = "DISCONNECTING"
    ERROR = "ERROR"


def new_channel_name(previous: Optional[str] = None) -> str:
    """
    Generate a timestamp-derived channel name.

    The result never equals ``previous``, even when two attempts start within
    the same millisecond.
    """
    stamp = int(time.time() * 1000)
    if previous and previous.startswith(CHANNEL_PREFIX):
        try:
            last = int(previous[len(CHANNEL_PREFIX):])
        except ValueError:
            last = None
        if last is not None and stamp <= last:
            stamp = last + 1
    return f"{CHANNEL_PREFIX}{stamp}"


@dataclass(eq=False)
class Session:
    """Resources and identity owned by one bring-up attempt."""

    channel_name: str
    credential: Optional[str] = None
    agent_handle: Optional[str] = None
    client: Any = None
    audio_track: Any = None
    muted: bool = True
    failure: Optional[str] = None
    closing: bool = False
    connect_error: Optional[str] = None
    listeners: Dict[str, Callable] = field(default_factory=dict)
    remote_audio_ready: asyncio.Event = field(default_factory=asyncio.Event)
    created_at: float = field(default_factory=time.time)

    @property
    def holds_resources(self) -> bool:
        return any(
            resource is not None
            for resource in (self.agent_handle, self.audio_track, self.client)
        )

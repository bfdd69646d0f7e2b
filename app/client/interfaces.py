"""
Protocols for the media collaborators driven by the session controller.

The real-time transport engine (joining channels, publishing and subscribing
to tracks, audio capture and playback) is provided by the platform SDK. The
controller depends only on the small surface described here, so any SDK
binding, or a test double, can be plugged in.
"""

from typing import Any, Awaitable, Callable, List, Optional, Protocol, Union

EventHandler = Callable[..., Union[None, Awaitable[None]]]


class RemoteAudioTrack(Protocol):
    def play(self) -> None:
        ...


class RemoteUser(Protocol):
    uid: Any
    audio_track: Optional[RemoteAudioTrack]


class LocalAudioTrack(Protocol):
    """Microphone capture. Emits ``volume-indicator`` events with a level."""

    def on(self, event: str, handler: EventHandler) -> None:
        ...

    def off(self, event: str, handler: EventHandler) -> None:
        ...

    def stop(self) -> None:
        ...

    def close(self) -> None:
        ...


class SignalingClient(Protocol):
    """Channel membership. Emits ``user-published`` / ``user-unpublished``."""

    def on(self, event: str, handler: EventHandler) -> None:
        ...

    def off(self, event: str, handler: EventHandler) -> None:
        ...

    async def join(self, app_id: str, channel: str, token: str, uid: Optional[int]) -> Any:
        ...

    async def publish(self, tracks: List[LocalAudioTrack]) -> None:
        ...

    async def subscribe(self, user: RemoteUser, media_type: str) -> Any:
        ...

    async def leave(self) -> None:
        ...


class MediaEngine(Protocol):
    """Factory for signaling clients and microphone tracks."""

    def create_client(self) -> SignalingClient:
        ...

    async def create_microphone_audio_track(self) -> LocalAudioTrack:
        ...

"""
Abstract bidirectional voice channel.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from pydantic import BaseModel, ConfigDict

from neurosync.core.live.audio import AudioFrame


class VoiceEvent(BaseModel):
    """Inbound server message reduced to what the bridge needs."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    is_from_user: bool = False
    has_audio: bool = False


class VoiceChannel(ABC):
    """
    Remote real-time voice service.

    ``open`` may raise any transport error; ``events`` raises when the
    connection drops. The bridge converts both into a TransportFault.
    """

    @abstractmethod
    async def open(self) -> None:
        """Establish the connection."""

    @abstractmethod
    async def send_audio(self, frame: AudioFrame) -> None:
        """Send one PCM frame."""

    @abstractmethod
    def events(self) -> AsyncIterator[VoiceEvent]:
        """Iterate inbound events until the connection ends."""

    @abstractmethod
    async def close(self) -> None:
        """Tear the connection down. Must be safe to call if never opened."""

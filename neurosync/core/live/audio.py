"""
PCM framing for the live voice channel.

Outbound audio is 16-bit signed little-endian mono PCM, cut into fixed-size
frames and base64 wrapped. Inputs deliver float samples in [-1.0, 1.0].
"""

import asyncio
import base64
from abc import ABC, abstractmethod

import numpy as np
from pydantic import BaseModel, ConfigDict

PCM_MIME_TEMPLATE = "audio/pcm;rate={rate}"


class AudioFrame(BaseModel):
    """One outbound frame as sent on the wire."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    data: str  # base64 of int16-le samples

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_wire(self) -> dict[str, str]:
        return {"mimeType": self.mime_type, "data": self.data}


def encode_pcm_frame(samples: np.ndarray, sample_rate: int = 16000) -> AudioFrame:
    """Convert float samples to a base64 int16-le frame. Out-of-range input is clipped."""
    clipped = np.clip(np.asarray(samples, dtype=np.float32), -1.0, 1.0)
    pcm = (clipped * 32767.0).astype("<i2")
    return AudioFrame(
        mime_type=PCM_MIME_TEMPLATE.format(rate=sample_rate),
        data=base64.b64encode(pcm.tobytes()).decode("ascii"),
    )


class PCMFramer:
    """Accumulates arbitrary-length sample chunks and emits fixed-size frames."""

    def __init__(self, frame_size: int = 4096):
        if frame_size <= 0:
            raise ValueError("frame_size must be positive")
        self.frame_size = frame_size
        self._buffer = np.zeros(0, dtype=np.float32)

    def push(self, samples: np.ndarray) -> list[np.ndarray]:
        self._buffer = np.concatenate([self._buffer, np.asarray(samples, dtype=np.float32)])
        frames = []
        while len(self._buffer) >= self.frame_size:
            frames.append(self._buffer[: self.frame_size])
            self._buffer = self._buffer[self.frame_size :]
        return frames

    @property
    def pending(self) -> int:
        return len(self._buffer)


class AudioInput(ABC):
    """Microphone-equivalent source of float samples."""

    @abstractmethod
    async def open(self) -> None:
        """Acquire the input stream."""

    @abstractmethod
    async def read(self) -> np.ndarray | None:
        """Next chunk of samples, or None once the input is closed."""

    @abstractmethod
    async def close(self) -> None:
        """Release the input stream. Must be idempotent."""


class QueueAudioInput(AudioInput):
    """
    Push-driven audio input.

    Platform capture code (or a test) calls ``push`` with sample chunks; the
    bridge consumes them with ``read``.
    """

    def __init__(self):
        self._queue: asyncio.Queue[np.ndarray | None] = asyncio.Queue()
        self.is_open = False

    async def open(self) -> None:
        self.is_open = True

    def push(self, samples: np.ndarray) -> None:
        if self.is_open:
            self._queue.put_nowait(np.asarray(samples, dtype=np.float32))

    async def read(self) -> np.ndarray | None:
        if not self.is_open and self._queue.empty():
            return None
        return await self._queue.get()

    async def close(self) -> None:
        if self.is_open:
            self.is_open = False
            self._queue.put_nowait(None)

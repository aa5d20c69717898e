"""Live voice channel and PCM audio framing."""
from neurosync.core.live.audio import (
    AudioFrame,
    AudioInput,
    PCMFramer,
    QueueAudioInput,
    encode_pcm_frame,
)
from neurosync.core.live.base import VoiceChannel, VoiceEvent
from neurosync.core.live.gemini import GeminiLiveChannel

__all__ = [
    "AudioFrame",
    "AudioInput",
    "PCMFramer",
    "QueueAudioInput",
    "encode_pcm_frame",
    "VoiceChannel",
    "VoiceEvent",
    "GeminiLiveChannel",
]

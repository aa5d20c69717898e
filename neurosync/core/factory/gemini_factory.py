"""
Factories for Gemini-backed collaborators: media analysis and live voice.
"""

from neurosync.config import GeminiConfig
from neurosync.core.live.base import VoiceChannel
from neurosync.core.live.gemini import GeminiLiveChannel
from neurosync.core.media.base import MediaAnalyzer
from neurosync.core.media.gemini import GeminiMediaAnalyzer
from neurosync.utils.exceptions import ConfigurationError


class MediaAnalyzerFactory:
    """Factory for media analyzers."""

    @staticmethod
    def create(config: GeminiConfig) -> MediaAnalyzer:
        if not config.api_key:
            raise ConfigurationError("Gemini API key is required for media analysis")
        return GeminiMediaAnalyzer(
            api_key=config.api_key,
            audio_model=config.media_model,
            video_model=config.video_model,
        )


class VoiceChannelFactory:
    """Factory for live voice channels. Each live session gets a fresh channel."""

    @staticmethod
    def create(config: GeminiConfig) -> VoiceChannel:
        if not config.api_key:
            raise ConfigurationError("Gemini API key is required for live voice")
        return GeminiLiveChannel(
            api_key=config.api_key,
            model=config.live_model,
            voice_name=config.voice_name,
        )

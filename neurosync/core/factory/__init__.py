"""Factories for creating providers from configuration."""

from neurosync.core.factory.gemini_factory import MediaAnalyzerFactory, VoiceChannelFactory
from neurosync.core.factory.llm_factory import LLMFactory

__all__ = [
    "LLMFactory",
    "MediaAnalyzerFactory",
    "VoiceChannelFactory",
]

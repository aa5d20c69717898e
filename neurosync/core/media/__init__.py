"""Media analysis providers (transcription, video analysis)."""
from neurosync.core.media.base import MediaAnalyzer
from neurosync.core.media.gemini import GeminiMediaAnalyzer

__all__ = [
    "MediaAnalyzer",
    "GeminiMediaAnalyzer",
]

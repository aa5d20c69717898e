"""
Abstract base class for media analyzers (audio transcription, video analysis).
"""

from abc import ABC, abstractmethod


class MediaAnalyzer(ABC):
    """Turns binary media into plain text."""

    @abstractmethod
    async def transcribe(self, data: bytes, mime_type: str) -> str:
        """
        Transcribe audio verbatim.

        Raises:
            LLMError: If the remote call fails
        """

    @abstractmethod
    async def analyze_video(self, data: bytes, mime_type: str, prompt: str) -> str:
        """
        Describe a video according to an instruction prompt.

        Raises:
            LLMError: If the remote call fails
        """

    async def close(self):
        """Release client resources. Optional."""

"""
Gemini media analyzer using the google-genai SDK.
"""

from google import genai
from google.genai import types

from neurosync.core.media.base import MediaAnalyzer
from neurosync.utils.exceptions import LLMError
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)

TRANSCRIBE_PROMPT = "Transcribe this audio verbatim."


class GeminiMediaAnalyzer(MediaAnalyzer):
    """Sends inline media parts to Gemini and returns the text reply."""

    def __init__(
        self,
        api_key: str,
        audio_model: str = "gemini-2.5-flash",
        video_model: str = "gemini-2.5-pro",
    ):
        self.audio_model = audio_model
        self.video_model = video_model
        self.client = genai.Client(api_key=api_key)

    async def transcribe(self, data: bytes, mime_type: str) -> str:
        return await self._generate(self.audio_model, data, mime_type, TRANSCRIBE_PROMPT)

    async def analyze_video(self, data: bytes, mime_type: str, prompt: str) -> str:
        return await self._generate(self.video_model, data, mime_type, prompt)

    async def _generate(self, model: str, data: bytes, mime_type: str, prompt: str) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=[types.Part.from_bytes(data=data, mime_type=mime_type), prompt],
            )
        except Exception as e:
            logger.error(
                "Gemini media call failed: {}",
                e,
                model=model,
                mime_type=mime_type,
                error_type=type(e).__name__,
            )
            raise LLMError(f"Gemini media call failed: {e}") from e

        return response.text or ""

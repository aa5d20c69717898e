"""
Gemini Live voice channel using the google-genai SDK.
"""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack

from google import genai
from google.genai import types

from neurosync.core.live.audio import AudioFrame
from neurosync.core.live.base import VoiceChannel, VoiceEvent
from neurosync.utils.exceptions import TransportFault
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)


class GeminiLiveChannel(VoiceChannel):
    """Audio-in / audio-out Gemini Live session with transcription enabled."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash-native-audio-preview-09-2025",
        voice_name: str = "Kore",
    ):
        self.model = model
        self.voice_name = voice_name
        self.client = genai.Client(api_key=api_key)
        self._stack: AsyncExitStack | None = None
        self._session = None

    def _connect_config(self) -> types.LiveConnectConfig:
        return types.LiveConnectConfig(
            response_modalities=[types.Modality.AUDIO],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self.voice_name)
                )
            ),
            input_audio_transcription=types.AudioTranscriptionConfig(),
            output_audio_transcription=types.AudioTranscriptionConfig(),
        )

    async def open(self) -> None:
        stack = AsyncExitStack()
        try:
            self._session = await stack.enter_async_context(
                self.client.aio.live.connect(model=self.model, config=self._connect_config())
            )
        except BaseException:
            await stack.aclose()
            raise
        self._stack = stack
        logger.info(f"Gemini live session opened: {self.model}")

    async def send_audio(self, frame: AudioFrame) -> None:
        if self._session is None:
            raise TransportFault("Live session is not open")
        await self._session.send_realtime_input(
            audio=types.Blob(data=frame.to_bytes(), mime_type=frame.mime_type)
        )

    async def events(self) -> AsyncIterator[VoiceEvent]:
        if self._session is None:
            raise TransportFault("Live session is not open")
        while True:
            received = 0
            # receive() ends after each model turn
            async for message in self._session.receive():
                received += 1
                for event in self._to_events(message):
                    yield event
            if received == 0:
                raise TransportFault("Live session closed by server")

    @staticmethod
    def _to_events(message: types.LiveServerMessage) -> list[VoiceEvent]:
        content = message.server_content
        if content is None:
            return []

        events = []
        if content.input_transcription and content.input_transcription.text:
            events.append(VoiceEvent(text=content.input_transcription.text, is_from_user=True))
        if content.output_transcription and content.output_transcription.text:
            events.append(VoiceEvent(text=content.output_transcription.text, is_from_user=False))

        parts = content.model_turn.parts if content.model_turn and content.model_turn.parts else []
        texts = [part.text for part in parts if part.text]
        has_audio = any(part.inline_data and part.inline_data.data for part in parts)
        if texts:
            events.append(VoiceEvent(text=" ".join(texts), is_from_user=False, has_audio=has_audio))
        elif has_audio and not events:
            events.append(VoiceEvent(text=None, is_from_user=False, has_audio=True))
        return events

    async def close(self) -> None:
        stack, self._stack, self._session = self._stack, None, None
        if stack is not None:
            await stack.aclose()
            logger.info("Gemini live session closed")

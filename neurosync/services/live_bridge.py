"""
Live Voice Bridge: lifecycle of a real-time voice session.

DISCONNECTED -> CONNECTING -> ACTIVE -> DISCONNECTED, with any transport
fault in CONNECTING or ACTIVE dropping straight back to DISCONNECTED. There
is no automatic reconnect. Callers see two callbacks only: discrete
``(text, is_from_user)`` messages and an ``active`` status flag.
"""

import asyncio
from collections.abc import Callable
from enum import Enum

from neurosync.core.live.audio import AudioInput, PCMFramer, encode_pcm_frame
from neurosync.core.live.base import VoiceChannel
from neurosync.utils.exceptions import TransportFault
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)

VOICE_RESPONSE_PLACEHOLDER = "(Voice Response Received)"

MessageCallback = Callable[[str, bool], None]
StatusCallback = Callable[[bool], None]


class LiveState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    ACTIVE = "active"


class LiveVoiceBridge:
    """
    Streams microphone frames to a voice channel and surfaces inbound events.

    A fresh channel and audio input are created for every ``connect``.
    """

    def __init__(
        self,
        channel_factory: Callable[[], VoiceChannel],
        audio_factory: Callable[[], AudioInput],
        on_message: MessageCallback,
        on_status: StatusCallback,
        sample_rate: int = 16000,
        frame_size: int = 4096,
    ):
        self.channel_factory = channel_factory
        self.audio_factory = audio_factory
        self.on_message = on_message
        self.on_status = on_status
        self.sample_rate = sample_rate
        self.frame_size = frame_size

        self._state = LiveState.DISCONNECTED
        self._channel: VoiceChannel | None = None
        self._audio: AudioInput | None = None
        self._tasks: list[asyncio.Task] = []
        self.last_fault: TransportFault | None = None

    @property
    def state(self) -> LiveState:
        return self._state

    @property
    def audio_input(self) -> AudioInput | None:
        return self._audio

    async def connect(self) -> bool:
        """
        Open the audio input and the channel, then start streaming.

        Returns:
            True if the bridge is ACTIVE afterwards, False on a connect fault
        """
        if self._state is not LiveState.DISCONNECTED:
            logger.warning(f"connect() ignored in state {self._state.value}")
            return self._state is LiveState.ACTIVE

        self._set_state(LiveState.CONNECTING)
        self.last_fault = None
        audio = self._audio = self.audio_factory()
        channel = self._channel = self.channel_factory()

        try:
            await audio.open()
            await channel.open()
        except Exception as e:
            if self._channel is channel:
                await self._fault(TransportFault(f"Live connect failed: {e}"))
            else:
                await self._close_resources(channel, audio)
            return False

        if self._state is not LiveState.CONNECTING or self._channel is not channel:
            # disconnect() ran while we were opening
            await self._close_resources(channel, audio)
            return False

        self._set_state(LiveState.ACTIVE)
        self._tasks = [
            asyncio.create_task(self._guard(self._send_loop(audio, channel)), name="live-send"),
            asyncio.create_task(
                self._guard(self._receive_loop(channel)), name="live-receive"
            ),
        ]
        self._notify_status(True)
        logger.info("Live voice bridge active")
        return True

    async def disconnect(self) -> None:
        """Release input and channel. Safe to call in any state, any number of times."""
        await self._teardown()
        logger.info("Live voice bridge disconnected")

    async def _send_loop(self, audio: AudioInput, channel: VoiceChannel) -> None:
        framer = PCMFramer(self.frame_size)
        while True:
            chunk = await audio.read()
            if chunk is None:
                logger.info("Audio input closed; outbound stream stopped")
                return
            for samples in framer.push(chunk):
                await channel.send_audio(encode_pcm_frame(samples, self.sample_rate))

    async def _receive_loop(self, channel: VoiceChannel) -> None:
        async for event in channel.events():
            if event.text:
                text = event.text
            elif event.has_audio:
                text = VOICE_RESPONSE_PLACEHOLDER
            else:
                continue
            try:
                self.on_message(text, event.is_from_user)
            except Exception as e:
                logger.error("Live message callback failed: {}", e)
        raise TransportFault("Live channel closed by remote")

    async def _guard(self, loop) -> None:
        try:
            await loop
        except asyncio.CancelledError:
            raise
        except TransportFault as e:
            await self._fault(e)
        except Exception as e:
            await self._fault(TransportFault(f"Live transport error: {e}"))

    async def _fault(self, fault: TransportFault) -> None:
        if self._state is LiveState.DISCONNECTED:
            return
        self.last_fault = fault
        logger.error("Live voice transport fault: {}", fault.message)
        await self._teardown()

    async def _teardown(self) -> None:
        channel, audio = self._channel, self._audio
        tasks, self._tasks = self._tasks, []
        self._channel = self._audio = None
        self._set_state(LiveState.DISCONNECTED)

        current = asyncio.current_task()
        others = [task for task in tasks if task is not current]
        for task in others:
            task.cancel()
        if others:
            await asyncio.gather(*others, return_exceptions=True)

        await self._close_resources(channel, audio)
        self._notify_status(False)

    async def _close_resources(self, channel: VoiceChannel | None, audio: AudioInput | None):
        if audio is not None:
            try:
                await audio.close()
            except Exception as e:
                logger.warning("Closing audio input failed: {}", e)
        if channel is not None:
            try:
                await channel.close()
            except Exception as e:
                logger.warning("Closing live channel failed: {}", e)

    def _set_state(self, state: LiveState) -> None:
        if state is not self._state:
            logger.debug(f"Live bridge {self._state.value} -> {state.value}")
            self._state = state

    def _notify_status(self, active: bool) -> None:
        try:
            self.on_status(active)
        except Exception as e:
            logger.error("Live status callback failed: {}", e)

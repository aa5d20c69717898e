"""In-memory provider fakes and payload builders for NeuroSync tests.

Providers are replaced with in-memory fakes so every test runs without
network access. Fakes record their calls and can be gated on an
asyncio.Event to hold an external call open.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from neurosync.core.live.audio import AudioFrame
from neurosync.core.live.base import VoiceChannel
from neurosync.core.llm.base import LLMProvider
from neurosync.core.media.base import MediaAnalyzer
from neurosync.models import (
    ExtractedEntity,
    ExtractedRelation,
    ExtractionAnalysis,
    ExtractionPayload,
)


def entity(
    name: str, stream: str = "dorsal", category: str = "concept", description: str | None = None
) -> ExtractedEntity:
    return ExtractedEntity(name=name, stream=stream, category=category, description=description)


def make_payload(
    *entities: ExtractedEntity,
    rigidity: float = 0.0,
    chaos: float = 0.0,
    relations: tuple[ExtractedRelation, ...] = (),
) -> ExtractionPayload:
    return ExtractionPayload(
        entities=list(entities),
        relations=list(relations),
        analysis=ExtractionAnalysis(rigidity=rigidity, chaos=chaos),
    )


class ScriptedLLM(LLMProvider):
    """LLM fake driven by a handler(prompt) callable."""

    def __init__(
        self,
        handler: Callable[[str], Any] | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.handler = handler
        self.error = error
        self.gate = gate
        self.calls: list[str] = []
        self.closed = False

    async def complete(
        self,
        prompt,
        response_format=None,
        system_prompt=None,
        max_tokens=2000,
        temperature=0.0,
        **kwargs,
    ):
        self.calls.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.handler is None:
            return response_format() if response_format else "ok"
        return self.handler(prompt)

    async def close(self):
        self.closed = True


class FakeMediaAnalyzer(MediaAnalyzer):
    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    async def transcribe(self, data, mime_type):
        self.calls.append((mime_type, None))
        if self.error:
            raise self.error
        return self.text

    async def analyze_video(self, data, mime_type, prompt):
        self.calls.append((mime_type, prompt))
        if self.error:
            raise self.error
        return self.text


class FakeVoiceChannel(VoiceChannel):
    """Voice channel fed through an inbound queue.

    Queue items: a VoiceEvent is delivered, an Exception is raised from
    events(), None ends the stream (remote close).
    """

    def __init__(self, open_error: Exception | None = None):
        self.open_error = open_error
        self.inbound: asyncio.Queue = asyncio.Queue()
        self.sent: list[AudioFrame] = []
        self.opened = False
        self.closed = False

    async def open(self):
        if self.open_error:
            raise self.open_error
        self.opened = True

    async def send_audio(self, frame):
        self.sent.append(frame)

    async def events(self):
        while True:
            item = await self.inbound.get()
            if item is None:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    async def close(self):
        self.closed = True


async def wait_for(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Yield to the loop until predicate() holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.001)



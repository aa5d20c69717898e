"""Shared fixtures for NeuroSync tests.

Every provider is an in-memory fake from tests.fakes, so no test needs
network access or API keys.
"""

import numpy as np
import pytest

from neurosync.config import EngineConfig
from neurosync.services.extraction_gateway import DeepResponder, ExtractionGateway, MediaGateway
from neurosync.services.sync_engine import SyncEngine
from tests.fakes import FakeMediaAnalyzer, ScriptedLLM


@pytest.fixture
def extraction_llm() -> ScriptedLLM:
    return ScriptedLLM()


@pytest.fixture
def thinking_llm() -> ScriptedLLM:
    return ScriptedLLM(handler=lambda prompt: "deep reply")


@pytest.fixture
def media_analyzer() -> FakeMediaAnalyzer:
    return FakeMediaAnalyzer(text="we talked about the launch")


@pytest.fixture
def engine(extraction_llm, thinking_llm, media_analyzer) -> SyncEngine:
    return SyncEngine(
        gateway=ExtractionGateway(extraction_llm),
        deep_responder=DeepResponder(thinking_llm),
        media_gateway=MediaGateway(media_analyzer, video_prompt="Extract key concepts."),
        config=EngineConfig(),
        rng=np.random.default_rng(7),
    )


"""
Tests for SyncEngine: the ingestion pipeline end to end with fake providers.
"""

import asyncio

import pytest

from neurosync.models import DEGRADED_ENTITY_NAME, SourceKind, StreamType
from neurosync.services.entity_resolver import DEGRADED_CONFIDENCE
from neurosync.utils.exceptions import LLMError, NotFoundError, ValidationError
from tests.fakes import entity, make_payload


@pytest.mark.unit
@pytest.mark.asyncio
class TestIngestion:
    """Text ingestion through extract, score, merge and deep pass."""

    async def test_ingest_records_artifact_before_extraction(self, engine, extraction_llm):
        extraction_llm.gate = asyncio.Event()

        task = engine.ingest("Plan the launch")

        sources = engine.sources.list_all()
        assert len(sources) == 1
        assert sources[0].kind == SourceKind.TEXT
        assert sources[0].mime_type == "text/plain"
        assert engine.state.processing_queue == 1

        extraction_llm.gate.set()
        artifact = await task
        assert artifact.id == sources[0].id
        assert engine.state.processing_queue == 0

    async def test_rigid_and_chaotic_input_triggers_deep_pass(
        self, engine, extraction_llm, thinking_llm
    ):
        extraction_llm.handler = lambda prompt: make_payload(
            entity("Deadline", "dorsal"), entity("Chaos", "ventral"), rigidity=90, chaos=90
        )
        thinking_flags = []
        engine.container.subscribe(lambda snap: thinking_flags.append(snap.state.is_thinking))

        await engine.process("The deadline is rigid and I feel chaotic")

        assert engine.state.dorsal_score == 55
        assert engine.state.ventral_score == 55
        assert True in thinking_flags
        assert thinking_flags[-1] is False
        assert engine.state.is_thinking is False
        assert thinking_llm.calls == ["The deadline is rigid and I feel chaotic"]

    async def test_long_content_triggers_deep_pass(self, engine, thinking_llm):
        await engine.process("x" * 101)

        assert len(thinking_llm.calls) == 1

    async def test_short_calm_content_skips_deep_pass(self, engine, extraction_llm, thinking_llm):
        extraction_llm.handler = lambda prompt: make_payload(entity("Tea"), rigidity=80)

        await engine.process("x" * 100)

        assert thinking_llm.calls == []

    async def test_same_entity_in_sequential_ingestions(self, engine, extraction_llm):
        replies = iter(
            [
                make_payload(entity("Deadline", "dorsal")),
                make_payload(entity("Deadline", "ventral")),
            ]
        )
        extraction_llm.handler = lambda prompt: next(replies)

        first = await engine.process("The deadline is Friday")
        second = await engine.process("The deadline scares me")

        deadlines = [n for n in engine.nodes if n.label.lower() == "deadline"]
        assert len(deadlines) == 1
        assert deadlines[0].stream_dominance == StreamType.VENTRAL
        assert deadlines[0].source_ids == (first.id, second.id)

    async def test_overlapping_ingestions_duplicate_new_entity(self, engine, extraction_llm):
        """Two in-flight ingestions naming the same new entity both create a node."""
        extraction_llm.gate = asyncio.Event()
        extraction_llm.handler = lambda prompt: make_payload(entity("Deadline"))

        engine.ingest("Deadline one")
        engine.ingest("Deadline two")
        extraction_llm.gate.set()
        await engine.drain()

        deadlines = [n for n in engine.nodes if n.label == "Deadline"]
        assert len(deadlines) == 2
        assert deadlines[0].id != deadlines[1].id
        assert engine.state.processing_queue == 0

    async def test_overlapping_ingestions_reinforce_existing_node(self, engine, extraction_llm):
        extraction_llm.handler = lambda prompt: make_payload(entity("Deadline"))
        first = await engine.process("Deadline")

        extraction_llm.gate = asyncio.Event()
        second, _ = engine.submit("Deadline again")
        third, _ = engine.submit("Deadline once more")
        extraction_llm.gate.set()
        await engine.drain()

        deadlines = [n for n in engine.nodes if n.label == "Deadline"]
        assert len(deadlines) == 1
        assert set(deadlines[0].source_ids) == {first.id, second.id, third.id}

    async def test_gateway_failure_degrades(self, engine, extraction_llm):
        extraction_llm.error = LLMError("service down")
        content = "Something went wrong while I was thinking about my quarterly plan"

        await engine.process(content)

        assert len(engine.nodes) == 1
        node = engine.nodes[0]
        assert node.label == DEGRADED_ENTITY_NAME
        assert node.description == content[:50]
        assert node.confidence == DEGRADED_CONFIDENCE
        assert engine.state.processing_queue == 0
        assert engine.state.dorsal_score == 48
        assert engine.state.ventral_score == 48

    @pytest.mark.parametrize(
        "reply",
        [
            {"entities": [{"name": "X"}]},
            '{"entities": [ {"name": ',
            LLMError("bad reply {'entities': []}"),
        ],
        ids=["missing-stream", "truncated-json", "braced-error"],
    )
    async def test_malformed_replies_with_braces_degrade(self, engine, extraction_llm, reply):
        def handler(prompt):
            if isinstance(reply, Exception):
                raise reply
            return reply

        extraction_llm.handler = handler

        await engine.process("hello there")

        assert [n.label for n in engine.nodes] == [DEGRADED_ENTITY_NAME]
        assert engine.nodes[0].description == "hello there"
        assert engine.state.dorsal_score == 48
        assert engine.state.processing_queue == 0

    async def test_deep_pass_failure_is_absorbed(self, engine, thinking_llm):
        thinking_llm.error = LLMError("thinking model down")

        await engine.process("y" * 150)

        assert engine.state.is_thinking is False
        assert engine.state.processing_queue == 0

    async def test_queue_balances_after_mixed_ingestions(self, engine, extraction_llm):
        def handler(prompt):
            if "fail" in prompt:
                raise LLMError("boom")
            return make_payload(entity("Topic"), rigidity=60)

        extraction_llm.handler = handler
        for i in range(10):
            engine.ingest(f"fail {i}" if i % 3 == 0 else f"topic {i}")

        assert engine.state.processing_queue == 10
        await engine.drain()
        assert engine.state.processing_queue == 0

    async def test_queue_ends_when_merge_raises(self, engine, monkeypatch):
        def broken_merge(*args, **kwargs):
            raise RuntimeError("merge failed {node}")

        monkeypatch.setattr(engine.resolver, "merge", broken_merge)

        _, task = engine.submit("Plan the launch")
        assert engine.state.processing_queue == 1
        await engine.drain()

        assert isinstance(task.exception(), RuntimeError)
        assert engine.state.processing_queue == 0
        assert engine.nodes == ()

    async def test_invalid_mime_is_rejected_synchronously(self, engine):
        with pytest.raises(ValidationError):
            engine.ingest("hello", mime_type="audio/wav")

        assert engine.sources.list_all() == []
        assert engine.state.processing_queue == 0

    async def test_new_nodes_are_placed_around_anchor(self, engine, extraction_llm):
        engine.set_anchor(1000, -500)
        extraction_llm.handler = lambda prompt: make_payload(entity("A"), entity("B"), entity("C"))

        await engine.process("A B C")

        for node in engine.nodes:
            assert (node.position.x - 1000) ** 2 + (node.position.y + 500) ** 2 <= 300**2 + 1e-6

    async def test_relations_produce_no_edges(self, engine, extraction_llm):
        from neurosync.models import ExtractedRelation

        extraction_llm.handler = lambda prompt: make_payload(
            entity("Deadline"),
            entity("Stress"),
            relations=(ExtractedRelation(source="Deadline", target="Stress", relation="CAUSES"),),
        )

        await engine.process("The deadline causes stress")

        assert len(engine.nodes) == 2
        assert engine.edges == ()


@pytest.mark.unit
@pytest.mark.asyncio
class TestMediaIngestion:
    """Audio/video ingestion through the media gateway."""

    async def test_audio_is_transcribed_and_ingested(self, engine, media_analyzer):
        await engine.ingest_media(b"\x00\x01", "audio/wav", "audio")
        await engine.drain()

        sources = engine.sources.list_all()
        assert len(sources) == 1
        assert sources[0].kind == SourceKind.AUDIO
        assert sources[0].content == "[AUDIO ANALYSIS]: we talked about the launch"
        assert media_analyzer.calls == [("audio/wav", None)]
        assert engine.state.processing_queue == 0

    async def test_video_uses_configured_prompt(self, engine, media_analyzer):
        await engine.ingest_media(b"\x00", "video/mp4", "video")
        await engine.drain()

        assert media_analyzer.calls == [("video/mp4", "Extract key concepts.")]
        assert engine.sources.list_all()[0].content.startswith("[VIDEO ANALYSIS]: ")

    async def test_failed_transcription_records_nothing(self, engine, media_analyzer):
        media_analyzer.error = RuntimeError("quota")

        result = await engine.ingest_media(b"\x00", "audio/mpeg", "audio")
        await engine.drain()

        assert result is None
        assert engine.sources.list_all() == []
        assert engine.state.processing_queue == 0

    async def test_text_kind_rejected(self, engine):
        with pytest.raises(ValidationError):
            engine.ingest_media(b"hello", "text/plain", "text")

    async def test_mismatched_mime_rejected(self, engine):
        with pytest.raises(ValidationError):
            engine.ingest_media(b"\x00", "video/mp4", "audio")


@pytest.mark.unit
@pytest.mark.asyncio
class TestManualEdits:
    """Manual node creation, moving and selection."""

    async def test_add_node(self, engine):
        node = engine.add_node("Me", "user")

        assert node.category.value == "user"
        assert node.stream_dominance == StreamType.VENTRAL
        assert node.source_ids == ()
        assert engine.nodes == (node,)

    async def test_add_node_returns_existing_label(self, engine):
        first = engine.add_node("Focus", "concept")
        second = engine.add_node("FOCUS", "concept")

        assert first.id == second.id
        assert len(engine.nodes) == 1

    async def test_add_node_rejects_unknown_category(self, engine):
        with pytest.raises(ValidationError):
            engine.add_node("Mars", "planet")

    async def test_move_and_select(self, engine):
        node = engine.add_node("Focus", "concept")

        moved = engine.move_node(node.id, 10, 20)
        assert (moved.position.x, moved.position.y) == (10, 20)

        selected = engine.select_node(node.id)
        assert selected.is_selected is True

        assert engine.select_node(None) is None
        assert engine.get_node(node.id).is_selected is False

    async def test_unknown_node(self, engine):
        with pytest.raises(NotFoundError):
            engine.move_node("node_missing", 0, 0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestLifecycle:
    async def test_close_closes_providers(self, engine, extraction_llm, thinking_llm):
        await engine.close()

        assert extraction_llm.closed is True
        assert thinking_llm.closed is True

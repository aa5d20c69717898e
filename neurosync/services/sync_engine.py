"""
Incremental Knowledge Graph Synchronization Engine.

Brings together:
- Source Artifact Store
- Extraction Gateway, Deep Responder, Media Gateway
- Cognitive State Scorer
- Entity Resolver/Merger
- Spatial Placement Assigner
- Processing Activity Tracker
- Live Voice Bridge wiring

All work runs on one asyncio event loop. The only suspension points are the
remote calls behind the gateways and the live channel.
"""

import asyncio
from collections.abc import Callable

import numpy as np

from neurosync.config import Config, EngineConfig
from neurosync.core.factory import LLMFactory, MediaAnalyzerFactory
from neurosync.core.live.audio import AudioInput
from neurosync.core.live.base import VoiceChannel
from neurosync.models.edge import KnowledgeEdge
from neurosync.models.node import (
    KnowledgeNode,
    NodeCategory,
    Position,
    StreamType,
    normalize_label,
)
from neurosync.models.source import SourceArtifact, SourceKind, SourceMetadata
from neurosync.models.state import GraphSnapshot, SystemState
from neurosync.services.activity_tracker import ProcessingActivityTracker
from neurosync.services.cognitive_scorer import CognitiveStateScorer
from neurosync.services.entity_resolver import EntityResolver, resolve_relations
from neurosync.services.extraction_gateway import DeepResponder, ExtractionGateway, MediaGateway
from neurosync.services.live_bridge import LiveVoiceBridge, MessageCallback
from neurosync.services.placement import PlacementAssigner
from neurosync.services.source_store import SourceArtifactStore, validate_artifact
from neurosync.services.state_container import StateContainer
from neurosync.utils.exceptions import ConfigurationError, NotFoundError, ValidationError
from neurosync.utils.id_generator import generate_node_id
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)

MEDIA_KINDS = (SourceKind.AUDIO, SourceKind.VIDEO)


class SyncEngine:
    """
    Ingestion entry point and owner of the shared graph state.

    Features:
    - Fire-and-forget text ingestion with traceable source artifacts
    - Media ingestion through transcription / video analysis
    - Dual-stream scoring and deep-pass triggering
    - Live voice events ingested as text
    """

    def __init__(
        self,
        gateway: ExtractionGateway,
        deep_responder: DeepResponder,
        media_gateway: MediaGateway | None = None,
        config: EngineConfig | None = None,
        container: StateContainer | None = None,
        rng: np.random.Generator | None = None,
    ):
        """
        Initialize the engine.

        Args:
            gateway: Extraction gateway (total, never raises)
            deep_responder: Secondary thinking-model pass
            media_gateway: Transcription/video analysis (optional)
            config: Engine tuning
            container: Shared state container (a fresh one by default)
            rng: Random generator used for node placement
        """
        self.config = config or EngineConfig()
        self.gateway = gateway
        self.deep_responder = deep_responder
        self.media_gateway = media_gateway or MediaGateway(analyzer=None, video_prompt="")

        self.container = container or StateContainer()
        self.sources = SourceArtifactStore(self.container)
        self.scorer = CognitiveStateScorer(self.container)
        self.resolver = EntityResolver(self.container)
        self.tracker = ProcessingActivityTracker(
            self.container,
            rigidity_threshold=self.config.deep_rigidity_threshold,
            length_threshold=self.config.deep_length_threshold,
        )
        self.placer = PlacementAssigner(
            anchor=Position(x=self.config.canvas_center_x, y=self.config.canvas_center_y),
            max_radius=self.config.placement_radius,
            rng=rng,
        )

        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: Config) -> "SyncEngine":
        """Build an engine with providers created from configuration."""
        extraction_llm = LLMFactory.create(config.llm)
        thinking_llm = LLMFactory.create(config.thinking_llm)

        try:
            analyzer = MediaAnalyzerFactory.create(config.gemini)
        except ConfigurationError as e:
            logger.warning("Media analysis disabled: {}", e.message)
            analyzer = None

        return cls(
            gateway=ExtractionGateway(
                extraction_llm,
                degraded_label_chars=config.engine.degraded_label_chars,
                max_tokens=config.llm.max_tokens,
                temperature=config.llm.temperature,
            ),
            deep_responder=DeepResponder(
                thinking_llm,
                max_tokens=config.thinking_llm.max_tokens,
                temperature=config.thinking_llm.temperature,
            ),
            media_gateway=MediaGateway(analyzer, video_prompt=config.gemini.video_prompt),
            config=config.engine,
        )

    async def close(self) -> None:
        """Wait for in-flight ingestions, then close provider clients."""
        await self.drain()
        await self.gateway.llm.close()
        if self.deep_responder.llm is not self.gateway.llm:
            await self.deep_responder.llm.close()
        if self.media_gateway.analyzer is not None:
            await self.media_gateway.analyzer.close()

    # Snapshots

    @property
    def snapshot(self) -> GraphSnapshot:
        return self.container.snapshot

    @property
    def state(self) -> SystemState:
        return self.container.state

    @property
    def nodes(self) -> tuple[KnowledgeNode, ...]:
        return self.container.snapshot.nodes

    @property
    def edges(self) -> tuple[KnowledgeEdge, ...]:
        return self.container.snapshot.edges

    def set_anchor(self, x: float, y: float) -> None:
        """Move the point new nodes are placed around (e.g. the viewport center)."""
        self.placer.anchor = Position(x=x, y=y)

    # Ingestion

    def ingest(
        self,
        content: str,
        kind: SourceKind | str = SourceKind.TEXT,
        mime_type: str = "text/plain",
        metadata: SourceMetadata | None = None,
    ) -> asyncio.Task:
        """
        Record ``content`` and schedule its extraction and merge.

        Fire-and-forget: callers may ignore the returned task and observe the
        results through the snapshots. Must be called with a running loop.

        Raises:
            ValidationError: If kind or mime type is invalid (nothing is recorded)
        """
        _, task = self.submit(content, kind, mime_type, metadata)
        return task

    def submit(
        self,
        content: str,
        kind: SourceKind | str = SourceKind.TEXT,
        mime_type: str = "text/plain",
        metadata: SourceMetadata | None = None,
    ) -> tuple[SourceArtifact, asyncio.Task]:
        """Like ``ingest`` but also returns the recorded artifact."""
        artifact = self.sources.record(kind, mime_type, content, metadata)
        self.tracker.begin()
        base_nodes = self.container.snapshot.nodes

        task = asyncio.get_running_loop().create_task(
            self._run_ingestion(artifact, base_nodes), name=f"ingest-{artifact.id}"
        )
        self._track_task(task)
        return artifact, task

    async def process(
        self,
        content: str,
        kind: SourceKind | str = SourceKind.TEXT,
        mime_type: str = "text/plain",
        metadata: SourceMetadata | None = None,
    ) -> SourceArtifact:
        """Ingest and wait for the ingestion (including any deep pass) to settle."""
        return await self.ingest(content, kind, mime_type, metadata)

    async def _run_ingestion(
        self, artifact: SourceArtifact, base_nodes: tuple[KnowledgeNode, ...]
    ) -> SourceArtifact:
        try:
            extraction = await self.gateway.extract(artifact.content)
            self.scorer.apply(extraction.analysis)
            self.resolver.merge(
                artifact.id,
                extraction,
                next_position=self.placer.next_position,
                base_nodes=base_nodes,
            )
            resolve_relations(self.container.snapshot.nodes, extraction.relations)
        finally:
            self.tracker.end()

        if self.tracker.should_deepen(extraction.analysis, artifact.content):
            with self.tracker.deep():
                reply = await self.deep_responder.respond(artifact.content)
            # Deep replies are not merged into the graph
            logger.debug(
                "Deep pass finished for {}", artifact.id, reply_length=len(reply)
            )
        return artifact

    def ingest_media(
        self,
        data: bytes,
        mime_type: str,
        kind: SourceKind | str,
        metadata: SourceMetadata | None = None,
    ) -> asyncio.Task:
        """
        Transcribe audio or analyze video, then ingest the resulting text.

        The media call counts as one in-flight ingestion. Empty media results
        record nothing.

        Raises:
            ValidationError: If kind is not audio/video or the mime type does not match
        """
        source_kind = validate_artifact(kind, mime_type)
        if source_kind not in MEDIA_KINDS:
            raise ValidationError(
                f"Media ingestion requires audio or video, got {source_kind.value!r}",
                context={"kind": source_kind.value},
            )

        self.tracker.begin()
        task = asyncio.get_running_loop().create_task(
            self._run_media(data, mime_type, source_kind, metadata), name="ingest-media"
        )
        self._track_task(task)
        return task

    async def _run_media(
        self,
        data: bytes,
        mime_type: str,
        kind: SourceKind,
        metadata: SourceMetadata | None,
    ) -> SourceArtifact | None:
        try:
            if kind is SourceKind.AUDIO:
                text = await self.media_gateway.transcribe(data, mime_type)
            else:
                text = await self.media_gateway.analyze_video(data, mime_type)

            if not text:
                logger.info(f"No text recovered from {kind.value} input")
                return None

            content = f"[{kind.value.upper()} ANALYSIS]: {text}"
            return await self.ingest(content, kind=kind, mime_type=mime_type, metadata=metadata)
        finally:
            self.tracker.end()

    async def drain(self) -> None:
        """Wait until every scheduled ingestion has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _track_task(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            error = task.exception()
            logger.error(
                "Ingestion task {} failed: {}",
                task.get_name(),
                error,
                error_type=type(error).__name__,
            )

    # Manual graph edits

    def add_node(self, label: str, category: NodeCategory | str) -> KnowledgeNode:
        """
        Add a node without a source (live-controls behaviour).

        Returns the existing node if the label is already present.
        """
        if not label or not label.strip():
            raise ValidationError("Node label cannot be empty")
        try:
            category = NodeCategory(category)
        except ValueError as e:
            raise ValidationError(f"Unknown node category: {category!r}") from e

        key = normalize_label(label)
        for node in self.container.snapshot.nodes:
            if node.label_key == key:
                return node

        node = KnowledgeNode(
            id=generate_node_id(),
            label=label,
            category=category,
            stream_dominance=StreamType.VENTRAL,
            source_ids=(),
            confidence=1.0,
            position=self.placer.next_position(),
        )
        self.container.update(lambda snap: snap.model_copy(update={"nodes": (*snap.nodes, node)}))
        return node

    def move_node(self, node_id: str, x: float, y: float) -> KnowledgeNode:
        return self._replace_node(node_id, position=Position(x=x, y=y))

    def select_node(self, node_id: str | None) -> KnowledgeNode | None:
        """Select one node (or clear the selection with None)."""
        if node_id is not None:
            self.get_node(node_id)

        def select(snap: GraphSnapshot) -> GraphSnapshot:
            nodes = tuple(
                node.model_copy(update={"is_selected": node.id == node_id})
                if node.is_selected != (node.id == node_id)
                else node
                for node in snap.nodes
            )
            return snap.model_copy(update={"nodes": nodes})

        self.container.update(select)
        return self.get_node(node_id) if node_id is not None else None

    def get_node(self, node_id: str) -> KnowledgeNode:
        for node in self.container.snapshot.nodes:
            if node.id == node_id:
                return node
        raise NotFoundError(f"Node not found: {node_id}")

    def _replace_node(self, node_id: str, **update) -> KnowledgeNode:
        self.get_node(node_id)

        def replace(snap: GraphSnapshot) -> GraphSnapshot:
            nodes = tuple(
                node.model_copy(update=update) if node.id == node_id else node
                for node in snap.nodes
            )
            return snap.model_copy(update={"nodes": nodes})

        self.container.update(replace)
        return self.get_node(node_id)

    # Live voice

    def set_live_active(self, active: bool) -> None:
        self.container.update_state(lambda s: s.model_copy(update={"is_live_active": active}))

    def create_live_bridge(
        self,
        channel_factory: Callable[[], VoiceChannel],
        audio_factory: Callable[[], AudioInput],
        on_message: MessageCallback | None = None,
        sample_rate: int = 16000,
        frame_size: int = 4096,
    ) -> LiveVoiceBridge:
        """
        Create a bridge whose inbound events are ingested as text artifacts.

        Args:
            channel_factory: Creates a fresh VoiceChannel per session
            audio_factory: Creates a fresh AudioInput per session
            on_message: Optional extra listener for (text, is_from_user)
        """

        def handle_message(text: str, is_from_user: bool) -> None:
            if on_message is not None:
                on_message(text, is_from_user)
            self.ingest(
                text,
                metadata=SourceMetadata(author="user" if is_from_user else "assistant"),
            )

        return LiveVoiceBridge(
            channel_factory=channel_factory,
            audio_factory=audio_factory,
            on_message=handle_message,
            on_status=self.set_live_active,
            sample_rate=sample_rate,
            frame_size=frame_size,
        )

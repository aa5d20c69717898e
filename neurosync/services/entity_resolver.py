"""
Entity Resolver/Merger: reconciles extracted entities with existing knowledge nodes.

Merging is split into two pure steps:
1. ``plan_merge`` decides, against a base snapshot of the nodes, which
   existing nodes are reinforced and which new nodes are created.
2. ``apply_merge_plan`` applies that plan to the *current* nodes by id.

The engine takes the base snapshot when an ingestion starts and applies the
plan after the extraction call returns. Two overlapping ingestions that both
introduce the same label each plan a creation, so both nodes are committed.
Sequential ingestions always see each other's nodes.
"""

from collections.abc import Callable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from neurosync.models.edge import KnowledgeEdge
from neurosync.models.extraction import ExtractedRelation, ExtractionResult
from neurosync.models.node import KnowledgeNode, Position, StreamType, normalize_label
from neurosync.services.state_container import StateContainer
from neurosync.utils.id_generator import generate_node_id
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)

CREATED_CONFIDENCE = 1.0
DEGRADED_CONFIDENCE = 0.1


class Reinforcement(BaseModel):
    """A later mention of an entity that already has a node."""

    model_config = ConfigDict(frozen=True)

    node_id: str
    source_id: str
    stream: StreamType
    description: str | None = None


class MergePlan(BaseModel):
    """Result of resolving one extraction against a node snapshot."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    reinforcements: tuple[Reinforcement, ...] = Field(default_factory=tuple)
    created: tuple[KnowledgeNode, ...] = Field(default_factory=tuple)


def reinforce(
    node: KnowledgeNode,
    source_id: str,
    stream: StreamType,
    description: str | None = None,
) -> KnowledgeNode:
    """
    Record another mention of ``node``.

    The source id is appended only if absent. Stream dominance is overwritten
    unconditionally (last writer wins). The description is refreshed only when
    the new mention carries one.
    """
    update: dict = {"stream_dominance": stream}
    if source_id not in node.source_ids:
        update["source_ids"] = (*node.source_ids, source_id)
    if description:
        update["description"] = description
    return node.model_copy(update=update)


def plan_merge(
    base_nodes: Sequence[KnowledgeNode],
    source_id: str,
    extraction: ExtractionResult,
    next_position: Callable[[], Position],
) -> MergePlan:
    """
    Resolve each extracted entity, in array order, against ``base_nodes``.

    Labels match case-insensitively and exactly. Entities in the same batch
    that share a label collapse into one node; later ones overwrite stream
    and description.
    """
    existing: dict[str, str] = {}
    for node in base_nodes:
        existing.setdefault(node.label_key, node.id)

    confidence = DEGRADED_CONFIDENCE if extraction.degraded else CREATED_CONFIDENCE
    created: dict[str, KnowledgeNode] = {}
    reinforcements: list[Reinforcement] = []

    for entity in extraction.entities:
        key = normalize_label(entity.name)
        if key in created:
            created[key] = reinforce(created[key], source_id, entity.stream, entity.description)
        elif key in existing:
            reinforcements.append(
                Reinforcement(
                    node_id=existing[key],
                    source_id=source_id,
                    stream=entity.stream,
                    description=entity.description,
                )
            )
        else:
            created[key] = KnowledgeNode(
                id=generate_node_id(),
                label=entity.name,
                category=entity.category,
                stream_dominance=entity.stream,
                source_ids=(source_id,),
                description=entity.description,
                confidence=confidence,
                position=next_position(),
            )

    return MergePlan(
        source_id=source_id,
        reinforcements=tuple(reinforcements),
        created=tuple(created.values()),
    )


def apply_merge_plan(
    nodes: Sequence[KnowledgeNode], plan: MergePlan
) -> tuple[KnowledgeNode, ...]:
    """Apply reinforcements by node id, then append created nodes."""
    updated = list(nodes)
    index = {node.id: i for i, node in enumerate(updated)}

    for item in plan.reinforcements:
        i = index.get(item.node_id)
        if i is None:
            logger.warning(f"Reinforced node vanished from snapshot: {item.node_id}")
            continue
        updated[i] = reinforce(updated[i], item.source_id, item.stream, item.description)

    return (*updated, *plan.created)


def resolve_relations(
    nodes: Sequence[KnowledgeNode], relations: Sequence[ExtractedRelation]
) -> list[KnowledgeEdge]:
    """
    Turn name-based relations into edges.

    Not implemented: matching strategy (exact name, fuzzy, id based) and the
    handling of relations to entities that have no node yet are undecided, so
    no edges are produced.
    """
    if relations:
        logger.debug("Leaving {} relations unresolved", len(relations), nodes=len(nodes))
    return []


class EntityResolver:
    """Runs merges against the shared snapshot."""

    def __init__(self, container: StateContainer):
        self.container = container

    def merge(
        self,
        source_id: str,
        extraction: ExtractionResult,
        next_position: Callable[[], Position],
        base_nodes: Sequence[KnowledgeNode] | None = None,
    ) -> MergePlan:
        """
        Merge an extraction into the graph.

        Args:
            source_id: Artifact the extraction came from
            extraction: Gateway result (possibly degraded)
            next_position: Placement for newly created nodes
            base_nodes: Snapshot to resolve against (default: current nodes)

        Returns:
            The applied plan
        """
        if base_nodes is None:
            base_nodes = self.container.snapshot.nodes

        plan = plan_merge(base_nodes, source_id, extraction, next_position)
        self.container.update(
            lambda snap: snap.model_copy(update={"nodes": apply_merge_plan(snap.nodes, plan)})
        )

        logger.info(
            "Merged source {}: {} created, {} reinforced",
            source_id,
            len(plan.created),
            len(plan.reinforcements),
            degraded=extraction.degraded,
        )
        return plan

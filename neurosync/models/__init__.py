"""
Data models for NeuroSync.

Three layers:
1. Raw data: SourceArtifact
2. Semantic graph: KnowledgeNode, KnowledgeEdge
3. System state: SystemState, GraphSnapshot

Extraction models describe the structured output of the external
semantic-extraction service.
"""

from neurosync.models.edge import KnowledgeEdge
from neurosync.models.extraction import (
    DEGRADED_ENTITY_NAME,
    ExtractedEntity,
    ExtractedRelation,
    ExtractionAnalysis,
    ExtractionPayload,
    ExtractionResult,
)
from neurosync.models.node import (
    KnowledgeNode,
    NodeCategory,
    Position,
    StreamType,
    normalize_label,
)
from neurosync.models.source import SourceArtifact, SourceKind, SourceMetadata
from neurosync.models.state import CognitiveLoad, GraphSnapshot, SystemState

__all__ = [
    # Raw data
    "SourceArtifact",
    "SourceKind",
    "SourceMetadata",
    # Graph
    "KnowledgeNode",
    "KnowledgeEdge",
    "NodeCategory",
    "StreamType",
    "Position",
    "normalize_label",
    # Extraction
    "ExtractedEntity",
    "ExtractedRelation",
    "ExtractionAnalysis",
    "ExtractionPayload",
    "ExtractionResult",
    "DEGRADED_ENTITY_NAME",
    # State
    "SystemState",
    "CognitiveLoad",
    "GraphSnapshot",
]

"""System-wide state and the graph snapshot that owns it."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from neurosync.models.edge import KnowledgeEdge
from neurosync.models.node import KnowledgeNode
from neurosync.models.source import SourceArtifact


class CognitiveLoad(str, Enum):
    """Display-only load indicator derived from the stream scores."""

    LOW = "LOW"
    OPTIMAL = "OPTIMAL"
    HIGH = "HIGH"
    OVERLOAD = "OVERLOAD"


class SystemState(BaseModel):
    """Process-wide scores and activity flags."""

    model_config = ConfigDict(frozen=True)

    dorsal_score: float = Field(default=50.0, ge=0.0, le=100.0)
    ventral_score: float = Field(default=50.0, ge=0.0, le=100.0)
    cognitive_load: CognitiveLoad = CognitiveLoad.OPTIMAL
    is_live_active: bool = False
    is_thinking: bool = False
    processing_queue: int = Field(default=0, ge=0)


class GraphSnapshot(BaseModel):
    """
    Immutable view of everything the engine owns.

    Replaced wholesale by StateContainer.update(); never edited in place.
    """

    model_config = ConfigDict(frozen=True)

    nodes: tuple[KnowledgeNode, ...] = Field(default_factory=tuple)
    edges: tuple[KnowledgeEdge, ...] = Field(default_factory=tuple)
    sources: tuple[SourceArtifact, ...] = Field(default_factory=tuple)
    state: SystemState = Field(default_factory=SystemState)

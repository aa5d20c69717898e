"""Knowledge graph node models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NodeCategory(str, Enum):
    """Categories of extracted or manually added entities."""

    CONCEPT = "concept"
    PERSON = "person"
    EVENT = "event"
    PROCESS = "process"

    # Live interaction nodes
    USER = "user"
    SYSTEM = "system"


class StreamType(str, Enum):
    """Cognitive stream an entity is associated with."""

    DORSAL = "dorsal"  # Structure, action, logic
    VENTRAL = "ventral"  # Meaning, perception, empathy


class Position(BaseModel):
    """Canvas coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class KnowledgeNode(BaseModel):
    """
    Deduplicated entity extracted from one or more source artifacts.

    The label is the dedup key (compared case-insensitively). ``source_ids``
    only ever grows. Nodes are replaced, never edited in place: every change
    goes through ``model_copy(update=...)`` on a fresh snapshot.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique node ID (node_xxx)")
    label: str
    category: NodeCategory = NodeCategory.CONCEPT
    stream_dominance: StreamType
    source_ids: tuple[str, ...] = Field(default_factory=tuple)
    description: str | None = None
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    # Presentation overlay
    position: Position = Field(default_factory=Position)
    is_selected: bool = False
    is_expanded: bool = False

    @property
    def label_key(self) -> str:
        """Normalized label used for deduplication."""
        return normalize_label(self.label)


def normalize_label(label: str) -> str:
    """Case-insensitive dedup key. No trimming, stemming or fuzzy matching."""
    return label.lower()

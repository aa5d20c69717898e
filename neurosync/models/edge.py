"""Knowledge graph edge model."""

from pydantic import BaseModel, ConfigDict, Field

from neurosync.utils.id_generator import generate_edge_id


class KnowledgeEdge(BaseModel):
    """Directed, labeled relation between two knowledge nodes."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_edge_id)
    source_node_id: str
    target_node_id: str
    relation: str  # e.g. "DEFINES", "CORRELATES_WITH"
    weight: float = 1.0

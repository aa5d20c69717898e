"""Source artifact model: the append-only raw input layer."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SourceKind(str, Enum):
    """Kind of raw input an artifact was recorded from."""

    TEXT = "text"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"


class SourceMetadata(BaseModel):
    """Optional descriptive metadata attached to an artifact."""

    model_config = ConfigDict(frozen=True)

    filename: str | None = None
    duration: float | None = None
    author: str | None = None


class SourceArtifact(BaseModel):
    """
    Immutable record of one raw input.

    Knowledge nodes reference artifacts by id for traceability. Artifacts are
    created exactly once per ingestion and never mutated or deleted.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique artifact ID (src_xxx)")
    kind: SourceKind
    mime_type: str
    content: str = Field(..., description="Raw text or transcript")
    summary: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: SourceMetadata = Field(default_factory=SourceMetadata)

"""
Source Artifact Store: append-only log of raw inputs.
"""

import re
from datetime import UTC, datetime

from neurosync.models.source import SourceArtifact, SourceKind, SourceMetadata
from neurosync.services.state_container import StateContainer
from neurosync.utils.exceptions import NotFoundError, ValidationError
from neurosync.utils.id_generator import generate_source_id
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)

_MIME_PATTERN = re.compile(r"^[\w.+-]+/[\w.+-]+(\s*;.*)?$")

# Kinds whose mime type must belong to a fixed top-level type
_KIND_MIME_PREFIX = {
    SourceKind.TEXT: "text/",
    SourceKind.AUDIO: "audio/",
    SourceKind.VIDEO: "video/",
}


def validate_artifact(kind: SourceKind | str, mime_type: str) -> SourceKind:
    """
    Check an artifact kind and mime type before anything enters the pipeline.

    Args:
        kind: Artifact kind (text, audio, video, file)
        mime_type: Mime type of the raw input

    Returns:
        The kind as a SourceKind

    Raises:
        ValidationError: If the kind is unknown, or the mime type is malformed
            or does not match the kind
    """
    try:
        source_kind = SourceKind(kind)
    except ValueError as e:
        raise ValidationError(
            f"Unknown artifact kind: {kind!r}", context={"kind": kind}
        ) from e

    if not mime_type or not _MIME_PATTERN.match(mime_type):
        raise ValidationError(
            f"Malformed mime type: {mime_type!r}", context={"mime_type": mime_type}
        )

    prefix = _KIND_MIME_PREFIX.get(source_kind)
    if prefix and not mime_type.lower().startswith(prefix):
        raise ValidationError(
            f"Mime type {mime_type!r} does not match artifact kind {source_kind.value!r}",
            context={"kind": source_kind.value, "mime_type": mime_type},
        )
    return source_kind


class SourceArtifactStore:
    """Records artifacts into the shared snapshot. Never mutates or deletes."""

    def __init__(self, container: StateContainer):
        self.container = container

    def record(
        self,
        kind: SourceKind | str,
        mime_type: str,
        content: str,
        metadata: SourceMetadata | None = None,
    ) -> SourceArtifact:
        """
        Append a new artifact with a fresh id and the current timestamp.

        Raises:
            ValidationError: If kind or mime type is invalid
        """
        source_kind = validate_artifact(kind, mime_type)
        artifact = SourceArtifact(
            id=generate_source_id(),
            kind=source_kind,
            mime_type=mime_type,
            content=content,
            timestamp=datetime.now(UTC),
            metadata=metadata or SourceMetadata(),
        )
        self.container.update(
            lambda snap: snap.model_copy(update={"sources": (*snap.sources, artifact)})
        )
        logger.debug(
            "Recorded source {}", artifact.id, kind=artifact.kind.value, length=len(content)
        )
        return artifact

    def get(self, source_id: str) -> SourceArtifact:
        for artifact in self.container.snapshot.sources:
            if artifact.id == source_id:
                return artifact
        raise NotFoundError(f"Source artifact not found: {source_id}")

    def list_all(self) -> list[SourceArtifact]:
        """All artifacts in creation order."""
        return list(self.container.snapshot.sources)

    def lookup(self, source_ids: tuple[str, ...] | list[str]) -> list[SourceArtifact]:
        """Resolve a node's source ids to artifacts, skipping unknown ids."""
        by_id = {artifact.id: artifact for artifact in self.container.snapshot.sources}
        return [by_id[source_id] for source_id in source_ids if source_id in by_id]

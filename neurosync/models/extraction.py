"""
Extraction models: the structured output of the semantic-extraction service.

``ExtractionPayload`` is the wire shape requested from the LLM.
``ExtractionResult`` is what the gateway hands to the engine, tagged with
whether it came from the service or is the degraded fallback.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from neurosync.models.node import NodeCategory, StreamType

DEGRADED_ENTITY_NAME = "Unknown"


class ExtractedEntity(BaseModel):
    """Entity named by the extraction service."""

    name: str = Field(..., min_length=1, description="Unique name of the concept/entity")
    category: NodeCategory = Field(
        default=NodeCategory.CONCEPT,
        validation_alias=AliasChoices("category", "type"),
        description="concept, person, event or process",
    )
    stream: StreamType = Field(
        ..., description="dorsal = structural/action, ventral = semantic/emotional"
    )
    description: str | None = Field(default=None, description="Brief definition based on context")

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            if value not in {c.value for c in NodeCategory}:
                return NodeCategory.CONCEPT
        return value

    @field_validator("stream", mode="before")
    @classmethod
    def _lower_stream(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class ExtractedRelation(BaseModel):
    """Relation between two entities, referenced by name."""

    source: str = Field(..., validation_alias=AliasChoices("from", "source"))
    target: str = Field(..., validation_alias=AliasChoices("to", "target"))
    relation: str = Field(
        ...,
        validation_alias=AliasChoices("relation", "type"),
        description="Relationship predicate (e.g. CAUSES, IS_A, FEELS)",
    )


class ExtractionAnalysis(BaseModel):
    """Psychological rigidity/chaos assessment of the input, 0-100."""

    rigidity: float = 0.0
    chaos: float = 0.0


class ExtractionPayload(BaseModel):
    """Structured response requested from the extraction service."""

    entities: list[ExtractedEntity] = Field(default_factory=list)
    relations: list[ExtractedRelation] = Field(default_factory=list)
    analysis: ExtractionAnalysis = Field(default_factory=ExtractionAnalysis)


class ExtractionResult(ExtractionPayload):
    """Extraction handed to the engine. ``degraded`` marks the fallback result."""

    degraded: bool = False

    @classmethod
    def from_payload(cls, payload: ExtractionPayload) -> "ExtractionResult":
        return cls(
            entities=payload.entities,
            relations=payload.relations,
            analysis=payload.analysis,
        )

    @classmethod
    def degraded_for(cls, text: str, label_chars: int = 50) -> "ExtractionResult":
        """
        Fallback used whenever the extraction service fails.

        Args:
            text: Input that failed to extract
            label_chars: How many leading characters to keep as the description

        Returns:
            Single-entity result with empty relations and zero analysis
        """
        return cls(
            entities=[
                ExtractedEntity(
                    name=DEGRADED_ENTITY_NAME,
                    category=NodeCategory.CONCEPT,
                    stream=StreamType.VENTRAL,
                    description=text[:label_chars],
                )
            ],
            relations=[],
            analysis=ExtractionAnalysis(rigidity=0.0, chaos=0.0),
            degraded=True,
        )

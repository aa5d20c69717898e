"""
Services for NeuroSync.

- SyncEngine: ingestion entry point and pipeline orchestration
- SourceArtifactStore: append-only raw input log
- ExtractionGateway / DeepResponder / MediaGateway: remote-call boundaries
- EntityResolver: dedup and merge of extracted entities
- CognitiveStateScorer: dorsal/ventral scores
- ProcessingActivityTracker: queue counter and deep-pass flag
- PlacementAssigner: initial node positions
- LiveVoiceBridge: real-time voice session lifecycle
"""

from neurosync.services.activity_tracker import ProcessingActivityTracker
from neurosync.services.cognitive_scorer import CognitiveStateScorer, apply_analysis
from neurosync.services.entity_resolver import EntityResolver, MergePlan, resolve_relations
from neurosync.services.extraction_gateway import DeepResponder, ExtractionGateway, MediaGateway
from neurosync.services.live_bridge import LiveState, LiveVoiceBridge
from neurosync.services.placement import PlacementAssigner, place
from neurosync.services.source_store import SourceArtifactStore
from neurosync.services.state_container import StateContainer
from neurosync.services.sync_engine import SyncEngine

__all__ = [
    "SyncEngine",
    "StateContainer",
    "SourceArtifactStore",
    "ExtractionGateway",
    "DeepResponder",
    "MediaGateway",
    "EntityResolver",
    "MergePlan",
    "resolve_relations",
    "CognitiveStateScorer",
    "apply_analysis",
    "ProcessingActivityTracker",
    "PlacementAssigner",
    "place",
    "LiveState",
    "LiveVoiceBridge",
]

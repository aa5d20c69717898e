"""
NeuroSync FastAPI Application

HTTP surface over the synchronization engine: the one ingestion entry point
shared by the canvas UI and the live voice bridge, plus snapshot reads.
"""

import base64
import binascii
from contextlib import asynccontextmanager
from typing import Any

import numpy as np
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from neurosync.config import Config
from neurosync.core.factory import VoiceChannelFactory
from neurosync.core.live.audio import QueueAudioInput
from neurosync.models import (
    KnowledgeEdge,
    KnowledgeNode,
    NodeCategory,
    SourceArtifact,
    SourceKind,
    SourceMetadata,
    SystemState,
)
from neurosync.services.live_bridge import LiveVoiceBridge
from neurosync.services.sync_engine import SyncEngine
from neurosync.utils.exceptions import NotFoundError, ValidationError
from neurosync.utils.logger import get_logger, setup_logging

# Global engine instance
engine: SyncEngine | None = None
config: Config | None = None
live_bridge: LiveVoiceBridge | None = None
logger = get_logger(__name__)


# Pydantic models for API
class IngestRequest(BaseModel):
    """Request model for text ingestion."""

    content: str = Field(..., description="Raw text to ingest")
    author: str | None = None


class IngestResponse(BaseModel):
    """Accepted ingestion."""

    source_id: str
    processing_queue: int


class MediaIngestRequest(BaseModel):
    """Request model for audio/video ingestion."""

    kind: SourceKind
    mime_type: str
    data: str = Field(..., description="Base64 encoded media bytes")
    filename: str | None = None


class AddNodeRequest(BaseModel):
    label: str
    category: NodeCategory = NodeCategory.CONCEPT


class MoveNodeRequest(BaseModel):
    x: float
    y: float


class AnchorRequest(BaseModel):
    x: float
    y: float


class LiveAudioRequest(BaseModel):
    """Float samples in [-1.0, 1.0] at the configured sample rate."""

    samples: list[float]


class LiveStatusResponse(BaseModel):
    state: str
    active: bool
    last_fault: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    engine_initialized: bool
    extraction_model: str
    thinking_model: str
    live_available: bool


def require_engine() -> SyncEngine:
    if not engine:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global engine, config, live_bridge

    config = Config.from_env()

    setup_logging(config.logging)

    logger.info("Starting NeuroSync server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
        f"Thinking={config.thinking_llm.provider}/{config.thinking_llm.model}"
    )

    engine = SyncEngine.from_config(config)
    logger.info("NeuroSync engine initialized")

    yield

    logger.info("Shutting down NeuroSync server")
    if live_bridge is not None:
        await live_bridge.disconnect()
    await engine.close()
    logger.info("Cleanup complete")


app = FastAPI(
    title="NeuroSync API",
    description="Incremental knowledge graph synchronization with dual-stream scoring",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if engine else "initializing",
        engine_initialized=engine is not None,
        extraction_model=f"{config.llm.provider}/{config.llm.model}" if config else "",
        thinking_model=(
            f"{config.thinking_llm.provider}/{config.thinking_llm.model}" if config else ""
        ),
        live_available=bool(config and config.gemini.api_key),
    )


# Ingestion endpoints
@app.post("/ingest", response_model=IngestResponse, status_code=202)
async def ingest(request: IngestRequest):
    """
    Record text as a source artifact and schedule extraction and merge.

    Returns immediately; results show up in /state and /nodes.
    """
    current = require_engine()
    metadata = SourceMetadata(author=request.author) if request.author else None
    try:
        source, _ = current.submit(request.content, metadata=metadata)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e

    return IngestResponse(source_id=source.id, processing_queue=current.state.processing_queue)


@app.post("/ingest/media", status_code=202)
async def ingest_media(request: MediaIngestRequest) -> dict[str, Any]:
    """Transcribe audio or analyze video, then ingest the text."""
    current = require_engine()
    try:
        data = base64.b64decode(request.data, validate=True)
    except binascii.Error as e:
        raise HTTPException(status_code=422, detail="data is not valid base64") from e

    metadata = SourceMetadata(filename=request.filename) if request.filename else None
    try:
        current.ingest_media(data, request.mime_type, request.kind, metadata=metadata)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    return {"accepted": True, "processing_queue": current.state.processing_queue}


# Snapshot endpoints
@app.get("/state", response_model=SystemState)
async def get_state():
    return require_engine().state


@app.get("/nodes", response_model=list[KnowledgeNode])
async def list_nodes():
    return list(require_engine().nodes)


@app.get("/edges", response_model=list[KnowledgeEdge])
async def list_edges():
    return list(require_engine().edges)


@app.get("/sources", response_model=list[SourceArtifact])
async def list_sources():
    return require_engine().sources.list_all()


@app.get("/sources/{source_id}", response_model=SourceArtifact)
async def get_source(source_id: str):
    try:
        return require_engine().sources.get(source_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e


@app.get("/nodes/{node_id}/sources", response_model=list[SourceArtifact])
async def get_node_sources(node_id: str):
    """Trace a node back to the artifacts that mentioned it."""
    current = require_engine()
    try:
        node = current.get_node(node_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return current.sources.lookup(node.source_ids)


# Manual graph edits
@app.post("/nodes", response_model=KnowledgeNode, status_code=201)
async def add_node(request: AddNodeRequest):
    try:
        return require_engine().add_node(request.label, request.category)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e


@app.patch("/nodes/{node_id}/position", response_model=KnowledgeNode)
async def move_node(node_id: str, request: MoveNodeRequest):
    try:
        return require_engine().move_node(node_id, request.x, request.y)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e


@app.put("/anchor")
async def set_anchor(request: AnchorRequest):
    """Set the point new nodes are placed around (viewport center)."""
    require_engine().set_anchor(request.x, request.y)
    return {"x": request.x, "y": request.y}


# Live voice
def _live_status() -> LiveStatusResponse:
    if live_bridge is None:
        return LiveStatusResponse(state="disconnected", active=False)
    fault = live_bridge.last_fault
    return LiveStatusResponse(
        state=live_bridge.state.value,
        active=live_bridge.state.value == "active",
        last_fault=fault.message if fault else None,
    )


@app.post("/live/connect", response_model=LiveStatusResponse)
async def live_connect():
    """Open a live voice session. Audio is pushed through /live/audio."""
    global live_bridge
    current = require_engine()

    if live_bridge is None:
        if not config.gemini.api_key:
            raise HTTPException(status_code=503, detail="Gemini API key is required for live voice")
        live_bridge = current.create_live_bridge(
            channel_factory=lambda: VoiceChannelFactory.create(config.gemini),
            audio_factory=QueueAudioInput,
            sample_rate=config.live.sample_rate,
            frame_size=config.live.frame_size,
        )

    await live_bridge.connect()
    return _live_status()


@app.post("/live/audio", status_code=202)
async def live_audio(request: LiveAudioRequest):
    audio = live_bridge.audio_input if live_bridge else None
    if not isinstance(audio, QueueAudioInput):
        raise HTTPException(status_code=409, detail="Live session is not active")
    audio.push(np.asarray(request.samples, dtype=np.float32))
    return {"queued": len(request.samples)}


@app.post("/live/disconnect", response_model=LiveStatusResponse)
async def live_disconnect():
    if live_bridge is not None:
        await live_bridge.disconnect()
    else:
        require_engine().set_live_active(False)
    return _live_status()


@app.get("/live", response_model=LiveStatusResponse)
async def live_status():
    return _live_status()


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "NeuroSync API",
        "version": "0.1.0",
        "description": "Incremental knowledge graph synchronization with dual-stream scoring",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")

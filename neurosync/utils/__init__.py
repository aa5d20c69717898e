"""Utility modules for NeuroSync."""

from neurosync.utils.exceptions import (
    ConfigurationError,
    GatewayDegraded,
    LLMError,
    NeuroSyncError,
    NotFoundError,
    TransportFault,
    ValidationError,
)
from neurosync.utils.id_generator import (
    generate_edge_id,
    generate_node_id,
    generate_source_id,
)
from neurosync.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_source_id",
    "generate_node_id",
    "generate_edge_id",
    # Exceptions
    "NeuroSyncError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "LLMError",
    "GatewayDegraded",
    "TransportFault",
]

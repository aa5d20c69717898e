"""
ID generation utilities for NeuroSync.

- Source artifacts: src_xxx (sorts by creation order)
- Knowledge nodes: node_xxx
- Knowledge edges: edge_xxx
"""

import threading
import time
from uuid import uuid4

_source_clock_lock = threading.Lock()
_last_source_ns = 0


def generate_source_id() -> str:
    """
    Generate unique SourceArtifact ID.

    The first 16 hex characters are a nanosecond timestamp that never repeats
    or goes backwards within a process, so ids sort in creation order.

    Returns:
        ID in format "src_xxx" where xxx is 16 timestamp + 6 random hex characters
    """
    global _last_source_ns
    with _source_clock_lock:
        _last_source_ns = max(time.time_ns(), _last_source_ns + 1)
        stamp = _last_source_ns
    return f"src_{stamp:016x}{uuid4().hex[:6]}"


def generate_node_id() -> str:
    """
    Generate unique KnowledgeNode ID.

    Returns:
        ID in format "node_xxx" where xxx is 12 hex characters
    """
    return f"node_{uuid4().hex[:12]}"


def generate_edge_id() -> str:
    """
    Generate unique KnowledgeEdge ID.

    Returns:
        ID in format "edge_xxx" where xxx is 12 hex characters
    """
    return f"edge_{uuid4().hex[:12]}"

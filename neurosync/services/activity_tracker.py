"""
Processing Activity Tracker: in-flight ingestion counter and deep-pass flag.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from neurosync.models.extraction import ExtractionAnalysis
from neurosync.services.state_container import StateContainer
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)


class ProcessingActivityTracker:
    """
    Drives ``processing_queue`` and ``is_thinking`` on the shared state.

    Every ``begin`` must be paired with exactly one ``end``; the queue never
    drops below zero. ``is_thinking`` stays true while any deep pass runs.
    """

    def __init__(
        self,
        container: StateContainer,
        rigidity_threshold: float = 80.0,
        length_threshold: int = 100,
    ):
        self.container = container
        self.rigidity_threshold = rigidity_threshold
        self.length_threshold = length_threshold
        self._deep_in_flight = 0

    def begin(self) -> int:
        state = self.container.update_state(
            lambda s: s.model_copy(update={"processing_queue": s.processing_queue + 1})
        )
        return state.processing_queue

    def end(self) -> int:
        def decrement(s):
            if s.processing_queue <= 0:
                logger.warning("Processing queue already empty on end()")
                return s
            return s.model_copy(update={"processing_queue": s.processing_queue - 1})

        return self.container.update_state(decrement).processing_queue

    def should_deepen(self, analysis: ExtractionAnalysis, content: str) -> bool:
        return analysis.rigidity > self.rigidity_threshold or len(content) > self.length_threshold

    @contextmanager
    def deep(self) -> Iterator[None]:
        """Mark a deep pass as running for the duration of the block."""
        self._deep_in_flight += 1
        self._set_thinking(True)
        try:
            yield
        finally:
            self._deep_in_flight -= 1
            if self._deep_in_flight == 0:
                self._set_thinking(False)

    def _set_thinking(self, thinking: bool) -> None:
        if self.container.state.is_thinking != thinking:
            self.container.update_state(lambda s: s.model_copy(update={"is_thinking": thinking}))

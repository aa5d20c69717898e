"""
Single-writer owner of the live GraphSnapshot.

Every mutation is a synchronous "replace with derived snapshot" step. Nothing
here awaits, so each update is atomic on the event loop; sequences of updates
separated by an await are not.
"""

from collections.abc import Callable

from neurosync.models.state import GraphSnapshot, SystemState
from neurosync.utils.logger import get_logger

logger = get_logger(__name__)

SnapshotListener = Callable[[GraphSnapshot], None]


class StateContainer:
    """Holds the current snapshot and notifies listeners on every replacement."""

    def __init__(self, snapshot: GraphSnapshot | None = None):
        self._snapshot = snapshot or GraphSnapshot()
        self._listeners: list[SnapshotListener] = []

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    @property
    def state(self) -> SystemState:
        return self._snapshot.state

    def update(self, fn: Callable[[GraphSnapshot], GraphSnapshot]) -> GraphSnapshot:
        """Replace the snapshot with ``fn(current)`` and notify listeners."""
        new_snapshot = fn(self._snapshot)
        self._snapshot = new_snapshot
        for listener in list(self._listeners):
            try:
                listener(new_snapshot)
            except Exception as e:
                logger.error("Snapshot listener failed: {}", e, error_type=type(e).__name__)
        return new_snapshot

    def update_state(self, fn: Callable[[SystemState], SystemState]) -> SystemState:
        """Replace only the SystemState part of the snapshot."""
        return self.update(lambda snap: snap.model_copy(update={"state": fn(snap.state)})).state

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

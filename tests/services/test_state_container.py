"""
Tests for the single-writer snapshot container.
"""

from neurosync.models import GraphSnapshot
from neurosync.services.state_container import StateContainer


def test_update_replaces_snapshot():
    container = StateContainer()
    before = container.snapshot

    after = container.update_state(lambda s: s.model_copy(update={"is_thinking": True}))

    assert after.is_thinking is True
    assert container.snapshot is not before
    assert before.state.is_thinking is False


def test_listeners_notified_and_unsubscribed():
    container = StateContainer()
    seen: list[GraphSnapshot] = []
    unsubscribe = container.subscribe(seen.append)

    container.update(lambda snap: snap)
    unsubscribe()
    container.update(lambda snap: snap)

    assert len(seen) == 1


def test_failing_listener_does_not_block_update():
    container = StateContainer()
    seen = []

    def broken(_):
        raise RuntimeError("listener failed")

    container.subscribe(broken)
    container.subscribe(seen.append)

    container.update_state(lambda s: s.model_copy(update={"processing_queue": 2}))

    assert container.state.processing_queue == 2
    assert len(seen) == 1


def test_listener_error_with_braces_is_logged():
    container = StateContainer()

    def broken(_):
        raise KeyError("{'nodes': ()}")

    container.subscribe(broken)

    container.update_state(lambda s: s.model_copy(update={"is_thinking": True}))

    assert container.state.is_thinking is True

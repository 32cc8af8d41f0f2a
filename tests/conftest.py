import pytest
from main import app_state, DEFAULT_SETTINGS
from logger import set_log_level
from algorithms.indexed_heap import IndexedMinHeap


def assert_heap_invariants(heap: IndexedMinHeap):
    """Check heap order, index consistency and size bookkeeping."""
    assert heap.size() == len(heap.heap) == len(heap.index)
    for i, element in enumerate(heap.heap):
        assert heap.index[element].position == i, f"index out of sync at position {i}"
        if i > 0:
            parent = heap.heap[(i - 1) // 2]
            assert heap.index[element].priority >= heap.index[parent].priority, (
                f"heap order violated at position {i}"
            )


@pytest.fixture
def check_invariants():
    return assert_heap_invariants


@pytest.fixture(autouse=True)
def reset_app_state():
    """Reset all shared state before each test to prevent cross-test contamination."""
    app_state["settings"] = dict(DEFAULT_SETTINGS)
    app_state["queues"] = {}
    set_log_level(DEFAULT_SETTINGS["log_level"])

    yield

    app_state["queues"] = {}

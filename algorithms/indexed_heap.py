import math
from numbers import Real
from typing import Dict, Generic, Hashable, List, Tuple, TypeVar
from dataclasses import dataclass

from .errors import DuplicateElementError, EmptyQueueError, InvalidPriorityError, NotFoundError

E = TypeVar("E", bound=Hashable)


@dataclass
class HeapEntry:
    position: int
    priority: float


def _check_priority(priority) -> float:
    if isinstance(priority, bool) or not isinstance(priority, Real):
        raise InvalidPriorityError(priority)
    priority = float(priority)
    if math.isnan(priority):
        raise InvalidPriorityError(priority)
    return priority


class IndexedMinHeap(Generic[E]):
    """Min-priority queue of unique elements with O(log n) priority updates.

    ``heap`` is the binary heap itself and ``index`` maps every element in it
    to its ``HeapEntry``. For each live position ``i``,
    ``index[heap[i]].position == i`` and the priority at ``i`` is never less
    than the priority at ``(i - 1) // 2``.
    """

    def __init__(self):
        self.heap: List[E] = []
        self.index: Dict[E, HeapEntry] = {}

    def _parent(self, i: int):
        return (i - 1) // 2

    def _left(self, i: int):
        return 2 * i + 1

    def _right(self, i: int):
        return 2 * i + 2

    def _priority_at(self, i: int) -> float:
        return self.index[self.heap[i]].priority

    def _swap(self, i: int, j: int):
        self.heap[i], self.heap[j] = self.heap[j], self.heap[i]
        self.index[self.heap[i]].position = i
        self.index[self.heap[j]].position = j

    def _smaller_child(self, i: int):
        left = self._left(i)
        right = self._right(i)
        if right >= len(self.heap):
            return left
        # Equal priorities keep the left child.
        if self._priority_at(left) <= self._priority_at(right):
            return left
        return right

    def _bubble_up(self, i: int):
        while i > 0:
            parent = self._parent(i)
            if self._priority_at(i) < self._priority_at(parent):
                self._swap(i, parent)
                i = parent
            else:
                break

    def _bubble_down(self, i: int):
        size = len(self.heap)
        while self._left(i) < size:
            child = self._smaller_child(i)
            if self._priority_at(i) > self._priority_at(child):
                self._swap(i, child)
                i = child
            else:
                break

    def insert(self, element: E, priority: float):
        """Add ``element`` with ``priority``.

        Raises DuplicateElementError if the element is already queued and
        InvalidPriorityError for NaN or non-numeric priorities. Neither
        failure changes the queue.
        """
        if element in self.index:
            raise DuplicateElementError(element)
        priority = _check_priority(priority)

        position = len(self.heap)
        self.index[element] = HeapEntry(position=position, priority=priority)
        self.heap.append(element)
        self._bubble_up(position)

    def peek_min(self) -> E:
        if not self.heap:
            raise EmptyQueueError()
        return self.heap[0]

    def peek_min_with_priority(self) -> Tuple[E, float]:
        element = self.peek_min()
        return element, self.index[element].priority

    def extract_min(self) -> E:
        """Remove and return the element with the lowest priority."""
        min_element = self.peek_min()
        del self.index[min_element]

        last = self.heap.pop()
        if self.heap:
            self.heap[0] = last
            self.index[last].position = 0
            self._bubble_down(0)

        return min_element

    def update_priority(self, element: E, priority: float):
        """Change the priority of a queued element, raising or lowering it."""
        entry = self.index.get(element)
        if entry is None:
            raise NotFoundError(element)
        priority = _check_priority(priority)

        old_priority = entry.priority
        entry.priority = priority
        if priority < old_priority:
            self._bubble_up(entry.position)
        else:
            self._bubble_down(entry.position)

    def priority_of(self, element: E) -> float:
        entry = self.index.get(element)
        if entry is None:
            raise NotFoundError(element)
        return entry.priority

    def size(self):
        return len(self.heap)

    def is_empty(self):
        return len(self.heap) == 0

    def __len__(self):
        return len(self.heap)

    def __contains__(self, element):
        return element in self.index

    def __repr__(self):
        return f"{type(self).__name__}(size={len(self.heap)})"

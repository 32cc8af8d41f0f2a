from .indexed_heap import HeapEntry, IndexedMinHeap
from .errors import (
    DuplicateElementError,
    EmptyQueueError,
    HeapError,
    InvalidPriorityError,
    NotFoundError,
)

__all__ = [
    'HeapEntry', 'IndexedMinHeap',
    'HeapError', 'DuplicateElementError', 'EmptyQueueError', 'NotFoundError', 'InvalidPriorityError',
]

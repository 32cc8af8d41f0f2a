class HeapError(Exception):
    """Base class for indexed heap failures."""


class DuplicateElementError(HeapError):
    def __init__(self, element):
        super().__init__(f"Cannot insert the same element twice: {element!r}")
        self.element = element


class EmptyQueueError(HeapError):
    def __init__(self):
        super().__init__("priority queue is empty")


class NotFoundError(HeapError):
    def __init__(self, element):
        super().__init__(f"No element found: {element!r}")
        self.element = element


class InvalidPriorityError(HeapError, ValueError):
    def __init__(self, priority):
        super().__init__(f"Priority must be a real, non-NaN number, got {priority!r}")
        self.priority = priority

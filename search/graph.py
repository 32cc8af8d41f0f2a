import math
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

from algorithms.indexed_heap import IndexedMinHeap
from logger import init_logger

logger = init_logger(__name__)


class GraphError(ValueError):
    pass


@dataclass
class PathResult:
    path: List[Hashable] = field(default_factory=list)
    distance: float = math.inf

    @property
    def reachable(self):
        return bool(self.path)


class Graph:
    """Undirected graph with non-negative edge weights."""

    def __init__(self):
        self._adjacency: Dict[Hashable, Dict[Hashable, float]] = {}

    def add_node(self, node: Hashable):
        self._adjacency.setdefault(node, {})

    def add_edge(self, a: Hashable, b: Hashable, weight: float = 1.0):
        weight = float(weight)
        if math.isnan(weight) or weight < 0:
            raise GraphError(f"edge weight must be non-negative, got {weight}")
        self.add_node(a)
        self.add_node(b)
        self._adjacency[a][b] = weight
        self._adjacency[b][a] = weight

    def neighbours(self, node: Hashable):
        if node not in self._adjacency:
            raise GraphError(f"unknown node {node!r}")
        return self._adjacency[node]

    def weight(self, a: Hashable, b: Hashable):
        return self.neighbours(a)[b]

    def nodes(self):
        return list(self._adjacency)

    def __contains__(self, node):
        return node in self._adjacency

    def __len__(self):
        return len(self._adjacency)


def _check_endpoints(graph: Graph, start, goal):
    for node in (start, goal):
        if node not in graph:
            raise GraphError(f"unknown node {node!r}")


def find_route(graph: Graph, start, goal) -> Optional[List[Hashable]]:
    """Route from ``start`` to ``goal`` with the fewest edges, or None."""
    _check_endpoints(graph, start, goal)
    parents = {start: None}
    frontier = deque([start])

    while frontier:
        node = frontier.popleft()
        if node == goal:
            route = []
            while node is not None:
                route.append(node)
                node = parents[node]
            return route[::-1]
        for neighbour in graph.neighbours(node):
            if neighbour not in parents:
                parents[neighbour] = node
                frontier.append(neighbour)

    return None


def shortest_path(graph: Graph, start, goal) -> PathResult:
    """Dijkstra's algorithm.

    Every node is queued once up front with an infinite distance (the start
    with zero) and lowered with ``update_priority`` as shorter routes are
    found, so nothing is ever re-inserted.
    """
    _check_endpoints(graph, start, goal)
    queue: IndexedMinHeap = IndexedMinHeap()
    for node in graph.nodes():
        queue.insert(node, 0.0 if node == start else math.inf)

    parents: Dict[Hashable, Hashable] = {}
    settled = 0
    while not queue.is_empty():
        node, distance = queue.peek_min_with_priority()
        queue.extract_min()
        settled += 1
        if math.isinf(distance):
            break
        if node == goal:
            path = [node]
            while path[-1] != start:
                path.append(parents[path[-1]])
            path.reverse()
            logger.debug(f"shortest path {start!r} -> {goal!r}: distance={distance} settled={settled}")
            return PathResult(path=path, distance=distance)

        for neighbour, weight in graph.neighbours(node).items():
            if neighbour not in queue:
                continue
            candidate = distance + weight
            if candidate < queue.priority_of(neighbour):
                queue.update_priority(neighbour, candidate)
                parents[neighbour] = node

    logger.debug(f"no path {start!r} -> {goal!r} after settling {settled} nodes")
    return PathResult()

"""
Fixed-grid maze traversal.

The same maze can be solved four ways: depth-first with an explicit stack,
breadth-first with a queue, recursive depth-first, and shortest path through
``IndexedMinHeap``. Each solver marks the cells it expands, captures the
marked grid, and restores the maze before returning.
"""
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence

from algorithms.indexed_heap import IndexedMinHeap
from logger import init_logger

logger = init_logger(__name__)

CLEAR = ' '
WALL = 'x'
START = 's'
END = 'e'
VISITED = '.'

CELLS = {CLEAR, WALL, START, END, VISITED}

DEFAULT_LAYOUT = (
    "xxxxxxxxxx",
    "xs       x",
    "x   x xx e",
    "x xxx xx x",
    "x    xxx x",
    "xxxx xxx x",
    "xxxx x   x",
    "xx x xx  x",
    "xx       x",
    "xxxxxx xxx",
)

STRATEGIES = ("stack", "queue", "recursive", "shortest")


class MazeError(ValueError):
    pass


class Pos(NamedTuple):
    row: int
    col: int

    def north(self):
        return Pos(self.row - 1, self.col)

    def south(self):
        return Pos(self.row + 1, self.col)

    def east(self):
        return Pos(self.row, self.col + 1)

    def west(self):
        return Pos(self.row, self.col - 1)


@dataclass
class MazeSolution:
    found: bool
    path: List[Pos] = field(default_factory=list)
    explored: int = 0
    grid: str = ""


def _trace_path(parents: Dict[Pos, Optional[Pos]], end: Pos) -> List[Pos]:
    path = []
    pos = end
    while pos is not None:
        path.append(pos)
        pos = parents[pos]
    path.reverse()
    return path


class Maze:
    def __init__(self, rows: Sequence[str] = DEFAULT_LAYOUT,
                 start: Optional[Pos] = None, end: Optional[Pos] = None):
        if not rows:
            raise MazeError("maze layout is empty")
        if any(len(row) != len(rows) for row in rows):
            raise MazeError("maze layout must be square")

        self.grid = [list(row) for row in rows]
        for row in self.grid:
            unknown = set(row) - CELLS
            if unknown:
                raise MazeError(f"unknown maze cells: {sorted(unknown)}")

        self.start = Pos(*start) if start is not None else self._find(START)
        self.end = Pos(*end) if end is not None else self._find(END)
        if self.start is None or self.end is None:
            raise MazeError("maze needs both a start and an exit")
        for pos in (self.start, self.end):
            if not self.in_maze(pos):
                raise MazeError(f"position {tuple(pos)} is outside the maze")

    def _find(self, cell: str) -> Optional[Pos]:
        for i, row in enumerate(self.grid):
            for j, value in enumerate(row):
                if value == cell:
                    return Pos(i, j)
        return None

    def size(self):
        return len(self.grid)

    def render(self):
        return "\n".join(" ".join(row) for row in self.grid)

    def in_maze(self, pos: Pos):
        return 0 <= pos.row < self.size() and 0 <= pos.col < self.size()

    def mark(self, pos: Pos, value: str):
        previous = self.grid[pos.row][pos.col]
        self.grid[pos.row][pos.col] = value
        return previous

    def is_marked(self, pos: Pos):
        return self.grid[pos.row][pos.col] == VISITED

    def is_clear(self, pos: Pos):
        return self.grid[pos.row][pos.col] not in (WALL, VISITED)

    def is_final(self, pos: Pos):
        return pos == self.end

    def snapshot(self):
        return [row[:] for row in self.grid]

    def restore(self, saved):
        self.grid = [row[:] for row in saved]

    def _open_neighbours(self, pos: Pos, order):
        for step in order:
            nxt = step(pos)
            if self.in_maze(nxt) and self.is_clear(nxt):
                yield nxt

    def _finish(self, strategy: str, saved, found: bool, path, explored: int):
        solution = MazeSolution(found=found, path=path if found else [],
                                explored=explored, grid=self.render())
        self.restore(saved)
        logger.debug(f"{strategy} solve: found={found} explored={explored} "
                     f"path_length={len(solution.path)}")
        return solution

    def solve_stack(self):
        """Depth-first search keeping candidate positions on a stack."""
        saved = self.snapshot()
        order = (Pos.north, Pos.east, Pos.west, Pos.south)
        candidates = [self.start]
        parents: Dict[Pos, Optional[Pos]] = {self.start: None}
        explored = 0
        found = False

        while candidates:
            current = candidates.pop()
            if self.is_final(current):
                found = True
                break
            if self.is_marked(current):
                continue
            self.mark(current, VISITED)
            explored += 1
            for nxt in self._open_neighbours(current, order):
                parents[nxt] = current
                candidates.append(nxt)

        path = _trace_path(parents, self.end) if found else []
        return self._finish("stack", saved, found, path, explored)

    def solve_queue(self):
        """Breadth-first search; the path found has the fewest steps."""
        saved = self.snapshot()
        order = (Pos.north, Pos.east, Pos.west, Pos.south)
        candidates = deque([self.start])
        parents: Dict[Pos, Optional[Pos]] = {self.start: None}
        explored = 0
        found = False

        while candidates:
            current = candidates.popleft()
            if self.is_final(current):
                found = True
                break
            if self.is_marked(current):
                continue
            self.mark(current, VISITED)
            explored += 1
            for nxt in self._open_neighbours(current, order):
                if nxt not in parents:
                    parents[nxt] = current
                    candidates.append(nxt)

        path = _trace_path(parents, self.end) if found else []
        return self._finish("queue", saved, found, path, explored)

    def solve_recursive(self):
        """Recursive depth-first search.

        Dead ends are unmarked on the way back, so the returned grid only
        shows the path itself.
        """
        saved = self.snapshot()
        path: List[Pos] = []
        counter = [0]
        found = self._solve_from(self.start, path, counter)
        return self._finish("recursive", saved, found, path, counter[0])

    def _solve_from(self, pos: Pos, path: List[Pos], counter) -> bool:
        if not self.in_maze(pos):
            return False
        if self.is_final(pos):
            path.append(pos)
            return True
        if not self.is_clear(pos):
            return False

        previous = self.mark(pos, VISITED)
        counter[0] += 1
        path.append(pos)
        for step in (Pos.south, Pos.west, Pos.north, Pos.east):
            if self._solve_from(step(pos), path, counter):
                return True

        path.pop()
        self.mark(pos, previous)
        return False

    def solve_shortest(self):
        """Shortest path with unit step cost, driven by an IndexedMinHeap."""
        saved = self.snapshot()
        order = (Pos.north, Pos.east, Pos.west, Pos.south)
        queue: IndexedMinHeap[Pos] = IndexedMinHeap()
        queue.insert(self.start, 0)
        parents: Dict[Pos, Optional[Pos]] = {self.start: None}
        explored = 0
        found = False

        while not queue.is_empty():
            current, distance = queue.peek_min_with_priority()
            queue.extract_min()
            if self.is_final(current):
                found = True
                break
            self.mark(current, VISITED)
            explored += 1
            for nxt in self._open_neighbours(current, order):
                candidate = distance + 1
                if nxt not in queue:
                    queue.insert(nxt, candidate)
                    parents[nxt] = current
                elif candidate < queue.priority_of(nxt):
                    queue.update_priority(nxt, candidate)
                    parents[nxt] = current

        path = _trace_path(parents, self.end) if found else []
        return self._finish("shortest", saved, found, path, explored)

    def solve(self, strategy: str = "queue"):
        solvers = {
            "stack": self.solve_stack,
            "queue": self.solve_queue,
            "recursive": self.solve_recursive,
            "shortest": self.solve_shortest,
        }
        if strategy not in solvers:
            raise MazeError(f"unknown strategy {strategy!r}, expected one of {STRATEGIES}")
        return solvers[strategy]()


def shortest_distance(solution: MazeSolution):
    """Number of steps along a solution path, ``inf`` when there is none."""
    if not solution.found:
        return math.inf
    return len(solution.path) - 1

from .maze import Maze, MazeError, MazeSolution, Pos
from .graph import Graph, GraphError, PathResult, find_route, shortest_path

__all__ = [
    'Maze', 'MazeError', 'MazeSolution', 'Pos',
    'Graph', 'GraphError', 'PathResult', 'find_route', 'shortest_path',
]

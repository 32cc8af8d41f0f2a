import math
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, StrictFloat, StrictInt
from typing import Annotated, Optional, List, Union
from contextlib import asynccontextmanager

from algorithms.indexed_heap import IndexedMinHeap
from algorithms.errors import DuplicateElementError, EmptyQueueError, InvalidPriorityError, NotFoundError
from search.maze import DEFAULT_LAYOUT, Maze, MazeError
from search.graph import Graph, GraphError, shortest_path
from logger import init_logger, set_log_level

logger = init_logger(__name__)

MAX_MAZE_SIZE = 25

DEFAULT_SETTINGS = {
    "max_queues": 1000,
    "log_level": "INFO",
}

# Finite numbers only; booleans are not priorities.
Priority = Union[StrictInt, Annotated[StrictFloat, Field(allow_inf_nan=False)]]


class ItemRequest(BaseModel):
    element: str
    priority: Priority


class PriorityRequest(BaseModel):
    priority: Priority


class ItemResponse(BaseModel):
    element: str
    priority: float


class InsertResponse(BaseModel):
    queue: str
    element: str
    priority: float
    size: int


class QueueStatusResponse(BaseModel):
    queue: str
    size: int
    empty: bool


class ServiceSettings(BaseModel):
    max_queues: int = Field(default=1000, ge=1)
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


class MazeRequest(BaseModel):
    rows: Optional[List[str]] = None
    strategy: str = "queue"


class MazeResponse(BaseModel):
    found: bool
    path: List[List[int]]
    explored: int
    grid: str


class Edge(BaseModel):
    source: str
    target: str
    weight: float = Field(default=1.0, ge=0)


class ShortestPathRequest(BaseModel):
    edges: List[Edge]
    start: str
    goal: str


class ShortestPathResponse(BaseModel):
    path: List[str]
    distance: Optional[float] = None


app_state = {
    "settings": dict(DEFAULT_SETTINGS),
    "queues": {},
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_state["settings"] = dict(DEFAULT_SETTINGS)
    set_log_level(app_state["settings"]["log_level"])
    logger.info("priority queue service started")

    yield

    app_state["queues"].clear()
    logger.info("priority queue service stopped")


app = FastAPI(title="Indexed Priority Queue Service", lifespan=lifespan)


def get_queue(name: str, create: bool = False) -> IndexedMinHeap:
    queues = app_state["queues"]
    if name not in queues:
        if not create:
            raise HTTPException(status_code=404, detail=f"queue '{name}' does not exist")
        if len(queues) >= app_state["settings"]["max_queues"]:
            logger.warning(f"refusing to create queue '{name}': limit of {len(queues)} queues reached")
            raise HTTPException(status_code=429, detail="too many queues")
        queues[name] = IndexedMinHeap()
        logger.info(f"created queue '{name}'")
    return queues[name]


@app.put("/v1/queues/{name}/items", response_model=InsertResponse, status_code=201)
async def insert_item(name: str, item: ItemRequest):
    queue = get_queue(name, create=True)
    try:
        queue.insert(item.element, item.priority)
    except DuplicateElementError as e:
        logger.warning(f"queue '{name}': {e}")
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidPriorityError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return InsertResponse(queue=name, element=item.element, priority=item.priority, size=queue.size())


@app.patch("/v1/queues/{name}/items/{element:path}", response_model=ItemResponse)
async def update_item(name: str, element: str, request: PriorityRequest):
    queue = get_queue(name)
    try:
        queue.update_priority(element, request.priority)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPriorityError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ItemResponse(element=element, priority=queue.priority_of(element))


@app.get("/v1/queues/{name}/items/{element:path}", response_model=ItemResponse)
async def get_item(name: str, element: str):
    queue = get_queue(name)
    try:
        priority = queue.priority_of(element)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ItemResponse(element=element, priority=priority)


@app.get("/v1/queues/{name}/min", response_model=ItemResponse)
async def peek_min(name: str):
    queue = get_queue(name)
    try:
        element, priority = queue.peek_min_with_priority()
    except EmptyQueueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ItemResponse(element=element, priority=priority)


@app.post("/v1/queues/{name}/pop", response_model=ItemResponse)
async def pop_min(name: str):
    queue = get_queue(name)
    try:
        element, priority = queue.peek_min_with_priority()
    except EmptyQueueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    queue.extract_min()

    return ItemResponse(element=element, priority=priority)


@app.get("/v1/queues/{name}/status", response_model=QueueStatusResponse)
async def get_queue_status(name: str):
    queue = app_state["queues"].get(name)
    size = queue.size() if queue is not None else 0

    return QueueStatusResponse(queue=name, size=size, empty=size == 0)


@app.delete("/v1/queues/{name}")
async def delete_queue(name: str):
    if app_state["queues"].pop(name, None) is None:
        raise HTTPException(status_code=404, detail=f"queue '{name}' does not exist")
    logger.info(f"deleted queue '{name}'")

    return {"status": "deleted", "queue": name}


@app.post("/v1/maze/solve", response_model=MazeResponse)
async def solve_maze(request: MazeRequest):
    rows = request.rows if request.rows is not None else DEFAULT_LAYOUT
    if len(rows) > MAX_MAZE_SIZE:
        raise HTTPException(status_code=422, detail=f"maze is larger than {MAX_MAZE_SIZE}x{MAX_MAZE_SIZE}")
    try:
        maze = Maze(rows)
        solution = maze.solve(request.strategy)
    except MazeError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return MazeResponse(
        found=solution.found,
        path=[list(pos) for pos in solution.path],
        explored=solution.explored,
        grid=solution.grid
    )


@app.post("/v1/graph/shortest-path", response_model=ShortestPathResponse)
async def find_shortest_path(request: ShortestPathRequest):
    graph = Graph()
    try:
        for edge in request.edges:
            graph.add_edge(edge.source, edge.target, edge.weight)
        result = shortest_path(graph, request.start, request.goal)
    except GraphError as e:
        raise HTTPException(status_code=422, detail=str(e))

    distance = None if math.isinf(result.distance) else result.distance
    return ShortestPathResponse(path=result.path, distance=distance)


@app.put("/v1/settings")
async def update_settings(settings: ServiceSettings):
    app_state["settings"] = settings.model_dump()
    set_log_level(settings.log_level)
    logger.info(f"settings updated: {app_state['settings']}")

    return {"status": "updated", "settings": app_state["settings"]}


@app.get("/health")
async def health():
    return {"status": "healthy", "queues": len(app_state["queues"])}

"""
HTTP tests for the priority queue service.
- Insert/peek/pop/update round trips through named queues
- Error mapping: duplicates 409, missing or empty 404, bad input 422
- Maze and shortest-path endpoints
"""
import pytest
import asyncio
from httpx import AsyncClient, ASGITransport
from main import app, app_state


@pytest.mark.asyncio
async def test_pop_returns_items_in_priority_order():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        for name, priority in [("five", 5), ("one", 1), ("four", 4), ("two", 2), ("three", 3)]:
            response = await client.put(
                "/v1/queues/jobs/items",
                json={"element": name, "priority": priority}
            )
            assert response.status_code == 201

        assert response.json()["size"] == 5

        popped = []
        for _ in range(5):
            response = await client.post("/v1/queues/jobs/pop")
            assert response.status_code == 200
            popped.append(response.json()["element"])

        assert popped == ["one", "two", "three", "four", "five"]


@pytest.mark.asyncio
async def test_duplicate_insert_conflict():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.put("/v1/queues/jobs/items", json={"element": "a", "priority": 1})
        response = await client.put("/v1/queues/jobs/items", json={"element": "a", "priority": 0})

        assert response.status_code == 409

        status = await client.get("/v1/queues/jobs/status")
        assert status.json() == {"queue": "jobs", "size": 1, "empty": False}


@pytest.mark.asyncio
async def test_update_priority_reorders_queue():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        for name, priority in [("A", 10), ("B", 20), ("C", 30)]:
            await client.put("/v1/queues/tasks/items", json={"element": name, "priority": priority})

        response = await client.patch("/v1/queues/tasks/items/C", json={"priority": 1})
        assert response.status_code == 200
        assert response.json() == {"element": "C", "priority": 1.0}

        peek = await client.get("/v1/queues/tasks/min")
        assert peek.json()["element"] == "C"
        assert (await client.post("/v1/queues/tasks/pop")).json()["element"] == "C"

        await client.patch("/v1/queues/tasks/items/A", json={"priority": 100})
        assert (await client.post("/v1/queues/tasks/pop")).json()["element"] == "B"

        item = await client.get("/v1/queues/tasks/items/A")
        assert item.json() == {"element": "A", "priority": 100.0}


@pytest.mark.asyncio
async def test_missing_items_and_queues():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        assert (await client.post("/v1/queues/nope/pop")).status_code == 404
        assert (await client.get("/v1/queues/nope/min")).status_code == 404

        await client.put("/v1/queues/jobs/items", json={"element": "a", "priority": 1})
        assert (await client.patch("/v1/queues/jobs/items/ghost", json={"priority": 0})).status_code == 404
        assert (await client.get("/v1/queues/jobs/items/ghost")).status_code == 404

        await client.post("/v1/queues/jobs/pop")
        empty_pop = await client.post("/v1/queues/jobs/pop")
        assert empty_pop.status_code == 404
        assert empty_pop.json()["detail"] == "priority queue is empty"


@pytest.mark.asyncio
async def test_invalid_priority_rejected():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.put(
            "/v1/queues/jobs/items",
            json={"element": "a", "priority": "urgent"}
        )
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_status_of_unknown_queue_is_empty():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/v1/queues/unknown/status")
        assert response.status_code == 200
        assert response.json() == {"queue": "unknown", "size": 0, "empty": True}
        assert "unknown" not in app_state["queues"]


@pytest.mark.asyncio
async def test_delete_queue():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.put("/v1/queues/temp/items", json={"element": "a", "priority": 1})
        assert (await client.delete("/v1/queues/temp")).status_code == 200
        assert "temp" not in app_state["queues"]
        assert (await client.delete("/v1/queues/temp")).status_code == 404


@pytest.mark.asyncio
async def test_queue_limit_from_settings():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.put("/v1/settings", json={"max_queues": 2, "log_level": "WARNING"})
        assert response.status_code == 200
        assert app_state["settings"]["max_queues"] == 2

        assert (await client.put("/v1/queues/q1/items", json={"element": "a", "priority": 1})).status_code == 201
        assert (await client.put("/v1/queues/q2/items", json={"element": "a", "priority": 1})).status_code == 201
        assert (await client.put("/v1/queues/q3/items", json={"element": "a", "priority": 1})).status_code == 429
        # Existing queues still accept items
        assert (await client.put("/v1/queues/q1/items", json={"element": "b", "priority": 1})).status_code == 201

        bad = await client.put("/v1/settings", json={"max_queues": 0})
        assert bad.status_code == 422


@pytest.mark.asyncio
async def test_concurrent_inserts_keep_queue_consistent(check_invariants):
    """Concurrent requests share one event loop, so every insert lands exactly once."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        tasks = [
            client.put("/v1/queues/busy/items", json={"element": f"item_{i}", "priority": (i * 37) % 101})
            for i in range(200)
        ]
        responses = await asyncio.gather(*tasks)
        assert all(r.status_code == 201 for r in responses)

        queue = app_state["queues"]["busy"]
        assert queue.size() == 200
        check_invariants(queue)

        previous = None
        for _ in range(200):
            priority = (await client.post("/v1/queues/busy/pop")).json()["priority"]
            if previous is not None:
                assert priority >= previous
            previous = priority


@pytest.mark.asyncio
@pytest.mark.parametrize("strategy", ["stack", "queue", "recursive", "shortest"])
async def test_solve_default_maze(strategy):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/v1/maze/solve", json={"strategy": strategy})
        assert response.status_code == 200
        data = response.json()
        assert data["found"]
        assert data["path"][0] == [1, 1]
        assert data["path"][-1] == [2, 9]


@pytest.mark.asyncio
async def test_solve_maze_rejects_bad_input():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/v1/maze/solve", json={"rows": ["xx", "x"], "strategy": "queue"})
        assert response.status_code == 422

        response = await client.post("/v1/maze/solve", json={"strategy": "teleport"})
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_shortest_path_endpoint():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        edges = [
            {"source": "A", "target": "B", "weight": 4},
            {"source": "A", "target": "C", "weight": 1},
            {"source": "C", "target": "B", "weight": 2},
            {"source": "X", "target": "Y"},
        ]
        response = await client.post(
            "/v1/graph/shortest-path",
            json={"edges": edges, "start": "A", "goal": "B"}
        )
        assert response.json() == {"path": ["A", "C", "B"], "distance": 3.0}

        unreachable = await client.post(
            "/v1/graph/shortest-path",
            json={"edges": edges, "start": "A", "goal": "Y"}
        )
        assert unreachable.json() == {"path": [], "distance": None}

        unknown = await client.post(
            "/v1/graph/shortest-path",
            json={"edges": edges, "start": "A", "goal": "Z"}
        )
        assert unknown.status_code == 422


@pytest.mark.asyncio
async def test_health():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")
        assert response.json() == {"status": "healthy", "queues": 0}


@pytest.mark.asyncio
async def test_element_with_slash_round_trips():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.put("/v1/queues/paths/items", json={"element": "a/b", "priority": 5})
        assert response.status_code == 201

        item = await client.get("/v1/queues/paths/items/a/b")
        assert item.status_code == 200
        assert item.json() == {"element": "a/b", "priority": 5.0}

        updated = await client.patch("/v1/queues/paths/items/a/b", json={"priority": 1})
        assert updated.status_code == 200
        assert updated.json() == {"element": "a/b", "priority": 1.0}

        assert (await client.post("/v1/queues/paths/pop")).json() == {"element": "a/b", "priority": 1.0}


@pytest.mark.asyncio
@pytest.mark.parametrize("priority", ["inf", "-inf", "5", True, None])
async def test_non_numeric_or_infinite_priority_rejected(priority):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.put("/v1/queues/strict/items", json={"element": "a", "priority": priority})
        assert response.status_code == 422
        assert app_state["queues"].get("strict") is None

        await client.put("/v1/queues/strict/items", json={"element": "a", "priority": 3})
        update = await client.patch("/v1/queues/strict/items/a", json={"priority": priority})
        assert update.status_code == 422

        item = await client.get("/v1/queues/strict/items/a")
        assert item.json() == {"element": "a", "priority": 3.0}


@pytest.mark.asyncio
async def test_infinity_literal_rejected():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.put(
            "/v1/queues/strict/items",
            content='{"element": "a", "priority": Infinity}',
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 422

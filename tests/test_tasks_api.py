"""
Tests for the task endpoints:
1. POST /tasks
2. GET /tasks/{email}
3. PUT /tasks/reorder-tasks
4. PUT /tasks/{id}
5. DELETE /tasks/{id}
6. POST /tasks/{email}/compact/{category}
"""
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from taskboard.core.errors import StorageError
from taskboard.services.task_repository import TaskRepository

OWNER = "sam@example.com"


async def create_task(client: AsyncClient, title: str, category: str = "todo", owner: str = OWNER) -> dict:
    response = await client.post(
        "/tasks",
        json={"owner_email": owner, "category": category, "title": title},
    )
    assert response.status_code == 201
    return response.json()


async def list_orders(client: AsyncClient, owner: str = OWNER) -> list[int]:
    response = await client.get(f"/tasks/{owner}")
    assert response.status_code == 200
    return [t["order"] for t in response.json()]


class TestCreateTaskEndpoint:
    """Tests for POST /tasks"""

    @pytest.mark.asyncio
    async def test_create_appends_to_category(self, client: AsyncClient):
        first = await create_task(client, "first")
        second = await create_task(client, "second")

        assert first["order"] == 0
        assert second["order"] == 1
        assert first["category"] == "todo"
        assert first["owner_email"] == OWNER
        assert uuid.UUID(first["id"])

    @pytest.mark.asyncio
    async def test_create_accepts_embedded_owner(self, client: AsyncClient):
        response = await client.post(
            "/tasks",
            json={"userData": {"email": OWNER}, "category": "todo", "title": "Embedded"},
        )

        assert response.status_code == 201
        assert response.json()["owner_email"] == OWNER

    @pytest.mark.asyncio
    async def test_create_without_category_is_400(self, client: AsyncClient):
        response = await client.post("/tasks", json={"owner_email": OWNER, "title": "No column"})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION"
        assert "category" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, client: AsyncClient):
        response = await client.post("/tasks", json={"owner_email": OWNER, "category": "todo", "due_date": "soon"})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION"

    @pytest.mark.asyncio
    async def test_storage_failure_is_500(self, client: AsyncClient):
        failure = StorageError("Failed to insert task", details={"operation": "insert task"})
        with patch.object(TaskRepository, "insert", AsyncMock(side_effect=failure)):
            response = await client.post(
                "/tasks",
                json={"owner_email": OWNER, "category": "todo", "title": "Lost"},
            )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "STORAGE"
        assert body["message"] == "Failed to insert task"
        assert body["details"] == {"operation": "insert task"}


class TestListTasksEndpoint:
    """Tests for GET /tasks/{email}"""

    @pytest.mark.asyncio
    async def test_unknown_owner_gets_empty_list(self, client: AsyncClient):
        response = await client.get("/tasks/nobody@example.com")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_is_sorted_by_order(self, client: AsyncClient):
        a = await create_task(client, "a")
        b = await create_task(client, "b")
        await create_task(client, "x", category="done")

        await client.put("/tasks/reorder-tasks", json={"tasks": [
            {"_id": b["id"], "order": 0, "category": "todo"},
            {"_id": a["id"], "order": 1, "category": "todo"},
        ]})

        orders = await list_orders(client)
        assert orders == sorted(orders)


class TestReorderEndpoint:
    """Tests for PUT /tasks/reorder-tasks"""

    @pytest.mark.asyncio
    async def test_reorder_moves_between_categories(self, client: AsyncClient):
        t1 = await create_task(client, "one", category="todo")
        t2 = await create_task(client, "two", category="doing")

        response = await client.put("/tasks/reorder-tasks", json={"tasks": [
            {"_id": t2["id"], "order": 0, "category": "todo"},
            {"_id": t1["id"], "order": 1, "category": "todo"},
        ]})

        assert response.status_code == 200
        assert response.json() == {
            "message": "Tasks reordered successfully",
            "matched_count": 2,
            "modified_count": 2,
        }
        tasks = (await client.get(f"/tasks/{OWNER}")).json()
        assert [(t["title"], t["category"], t["order"]) for t in tasks] == [
            ("two", "todo", 0),
            ("one", "todo", 1),
        ]

    @pytest.mark.asyncio
    async def test_reorder_reports_unmatched_ids(self, client: AsyncClient):
        t1 = await create_task(client, "one")

        response = await client.put("/tasks/reorder-tasks", json={"tasks": [
            {"_id": t1["id"], "order": 0, "category": "todo"},
            {"_id": str(uuid.uuid4()), "order": 1, "category": "todo"},
        ]})

        assert response.status_code == 200
        assert response.json()["matched_count"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"tasks": []}, {"tasks": None}])
    async def test_empty_batch_is_400(self, client: AsyncClient, body):
        response = await client.put("/tasks/reorder-tasks", json=body)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid tasks array"

    @pytest.mark.asyncio
    async def test_malformed_id_is_400_and_nothing_changes(self, client: AsyncClient):
        t1 = await create_task(client, "one")
        await create_task(client, "two")

        response = await client.put("/tasks/reorder-tasks", json={"tasks": [
            {"_id": t1["id"], "order": 1, "category": "todo"},
            {"_id": "not-an-id", "order": 0, "category": "todo"},
        ]})

        assert response.status_code == 400
        assert "not-an-id" in response.json()["message"]
        tasks = (await client.get(f"/tasks/{OWNER}")).json()
        assert [t["title"] for t in tasks] == ["one", "two"]

    @pytest.mark.asyncio
    async def test_storage_failure_is_500(self, client: AsyncClient):
        task = await create_task(client, "one")
        failure = StorageError("Failed to bulk write tasks")
        with patch.object(TaskRepository, "bulk_write", AsyncMock(side_effect=failure)):
            response = await client.put("/tasks/reorder-tasks", json={"tasks": [
                {"_id": task["id"], "order": 0, "category": "done"},
            ]})

        assert response.status_code == 500
        assert response.json()["error"] == "STORAGE"
        assert await list_orders(client) == [0]


class TestUpdateTaskEndpoint:
    """Tests for PUT /tasks/{id}"""

    @pytest.mark.asyncio
    async def test_partial_update(self, client: AsyncClient):
        await create_task(client, "zero")
        task = await create_task(client, "one")

        response = await client.put(f"/tasks/{task['id']}", json={"_id": task["id"], "category": "B"})

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == task["id"]
        assert data["category"] == "B"
        assert data["order"] == 1
        assert data["title"] == "one"

    @pytest.mark.asyncio
    async def test_invalid_id_is_400(self, client: AsyncClient):
        response = await client.put("/tasks/123", json={"category": "B"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid task ID"

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, client: AsyncClient):
        response = await client.put(f"/tasks/{uuid.uuid4()}", json={"category": "B"})

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_uppercase_id_updates_the_task(self, client: AsyncClient):
        task = await create_task(client, "one")

        response = await client.put(f"/tasks/{task['id'].upper()}", json={"category": "B"})

        assert response.status_code == 200
        assert response.json()["id"] == task["id"]
        assert response.json()["category"] == "B"


class TestDeleteTaskEndpoint:
    """Tests for DELETE /tasks/{id}"""

    @pytest.mark.asyncio
    async def test_delete_leaves_gap_until_reorder(self, client: AsyncClient):
        t0 = await create_task(client, "zero")
        t1 = await create_task(client, "one")
        t2 = await create_task(client, "two")

        response = await client.delete(f"/tasks/{t1['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted successfully"}
        assert await list_orders(client) == [0, 2]

        await client.put("/tasks/reorder-tasks", json={"tasks": [
            {"_id": t0["id"], "order": 0, "category": "todo"},
            {"_id": t2["id"], "order": 1, "category": "todo"},
        ]})
        assert await list_orders(client) == [0, 1]

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, client: AsyncClient):
        response = await client.delete(f"/tasks/{uuid.uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_id_is_400(self, client: AsyncClient):
        response = await client.delete("/tasks/abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_uppercase_id_deletes_the_task(self, client: AsyncClient):
        task = await create_task(client, "one")

        response = await client.delete(f"/tasks/{task['id'].upper()}")

        assert response.status_code == 200
        assert (await client.get(f"/tasks/{OWNER}")).json() == []


class TestCompactEndpoint:
    """Tests for POST /tasks/{email}/compact/{category}"""

    @pytest.mark.asyncio
    async def test_compact_closes_gap(self, client: AsyncClient):
        await create_task(client, "zero")
        middle = await create_task(client, "one")
        await create_task(client, "two")
        await client.delete(f"/tasks/{middle['id']}")

        response = await client.post(f"/tasks/{OWNER}/compact/todo")

        assert response.status_code == 200
        assert response.json()["modified_count"] == 1
        assert await list_orders(client) == [0, 1]


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Hello from Task Board Server."}

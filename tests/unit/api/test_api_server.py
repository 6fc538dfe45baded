"""Tests for the HTTP API."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from taskgraph.api.server import create_app
from taskgraph.core.config import StorageConfig, TaskGraphConfig
from taskgraph.core.exceptions import DataCorruptionError, StoreUnavailableError


@pytest.fixture
def client(service, config) -> TestClient:
    """Client for an app wired to a real service on a temporary database."""
    return TestClient(create_app(config=config, service=service))


class TestTaskEndpoints:
    """Tests for /tasks routes."""

    def test_list_empty(self, client) -> None:
        response = client.get("/tasks")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_returns_201(self, client) -> None:
        response = client.post("/tasks", json={"title": "Write docs", "completed": True})

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Write docs"
        assert body["completed"] is False
        assert body["parent_id"] is None
        assert body["id"]

    def test_create_with_parent(self, client) -> None:
        parent = client.post("/tasks", json={"title": "Parent"}).json()

        child = client.post("/tasks", json={"title": "Child", "parent_id": parent["id"]})

        assert child.status_code == 201
        fetched = client.get(f"/tasks/{child.json()['id']}").json()
        assert fetched["parent_id"] == parent["id"]

    def test_create_duplicate_id_is_400(self, client) -> None:
        client.post("/tasks", json={"id": "a", "title": "A"})

        response = client.post("/tasks", json={"id": "a", "title": "A again"})

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_input"

    def test_create_invalid_payload_is_400(self, client) -> None:
        response = client.post("/tasks", json={"title": 123})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request payload"

    def test_create_malformed_json_is_400(self, client) -> None:
        response = client.post(
            "/tasks", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400

    def test_get_missing_is_404(self, client) -> None:
        response = client.get("/tasks/missing")

        assert response.status_code == 404
        assert response.json() == {"detail": "Task not found", "kind": "not_found"}

    def test_update(self, client) -> None:
        client.post("/tasks", json={"id": "a", "title": "A"})

        response = client.put("/tasks/a", json={"title": "A2", "completed": True})

        assert response.status_code == 200
        assert response.json() == {"message": "Task updated successfully"}
        assert client.get("/tasks/a").json()["completed"] is True

    def test_update_requires_both_fields(self, client) -> None:
        client.post("/tasks", json={"id": "a", "title": "A"})

        response = client.put("/tasks/a", json={"title": "A2"})

        assert response.status_code == 400

    def test_update_missing_is_200(self, client) -> None:
        response = client.put("/tasks/missing", json={"title": "X", "completed": False})

        assert response.status_code == 200

    def test_delete(self, client) -> None:
        client.post("/tasks", json={"id": "a", "title": "A"})
        client.post("/tasks", json={"id": "b", "title": "B", "parent_id": "a"})

        response = client.delete("/tasks/a")

        assert response.status_code == 204
        assert client.get("/tasks").json() == []

    def test_delete_missing_is_204(self, client) -> None:
        assert client.delete("/tasks/missing").status_code == 204


class TestErrorMapping:
    """Tests for error kind to status mapping."""

    def test_store_failure_is_500(self, config) -> None:
        service = MagicMock()
        service.list_tasks.side_effect = StoreUnavailableError("down", operation="run")
        client = TestClient(create_app(config=config, service=service))

        response = client.get("/tasks")

        assert response.status_code == 500
        assert response.json()["kind"] == "store_unavailable"

    def test_data_corruption_is_500(self, config) -> None:
        service = MagicMock()
        service.get_task.side_effect = DataCorruptionError("title", 1, expected="str")
        client = TestClient(create_app(config=config, service=service))

        response = client.get("/tasks/a")

        assert response.status_code == 500
        assert response.json()["kind"] == "data_corruption"


class TestHealth:
    """Tests for /health."""

    def test_healthy(self, client) -> None:
        client.post("/tasks", json={"title": "A"})

        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["task_count"] == 1

    def test_unhealthy_without_service(self, config) -> None:
        client = TestClient(create_app(config=config))

        data = client.get("/health").json()

        assert data["status"] == "unhealthy"


class TestLifespan:
    """Tests for driver management by the application."""

    def test_lifespan_opens_configured_database(self, temp_dir) -> None:
        db_path = temp_dir / "lifespan.kuzu"
        config = TaskGraphConfig(storage=StorageConfig(db_path=str(db_path)))

        with TestClient(create_app(config=config)) as client:
            assert client.post("/tasks", json={"title": "A"}).status_code == 201
            assert client.get("/health").json()["status"] == "healthy"

        assert db_path.exists()

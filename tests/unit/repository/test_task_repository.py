"""Unit tests for TaskRepository."""

import pytest

from taskgraph.core.constants import AccessMode
from taskgraph.core.exceptions import DuplicateTaskError, NotFoundError
from taskgraph.graph.session import ManagedTransaction
from taskgraph.models.task import Task


def _edge_count(tx: ManagedTransaction) -> int:
    return tx.run("MATCH (:Task)-[r:HAS_PARENT]->(:Task) RETURN count(r)")[0][0]


class TestListAll:
    """Tests for listing tasks."""

    def test_empty_store_returns_empty_list(self, repository) -> None:
        assert repository.list_all() == []

    def test_lists_parent_ids(self, repository) -> None:
        repository.create(Task(id="a", title="A"))
        repository.create(Task(id="b", title="B", parent_id="a"))

        tasks = {t.id: t for t in repository.list_all()}

        assert tasks["a"].parent_id is None
        assert tasks["b"].parent_id == "a"


class TestGetById:
    """Tests for single task lookup."""

    def test_round_trip(self, repository, root_task) -> None:
        repository.create(root_task)

        assert repository.get_by_id(root_task.id) == root_task

    def test_missing_task_raises_not_found(self, repository) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            repository.get_by_id("missing")

        assert exc_info.value.task_id == "missing"


class TestCreate:
    """Tests for task creation."""

    def test_create_with_existing_parent(self, repository) -> None:
        repository.create(Task(id="a", title="A"))

        created = repository.create(Task(id="b", title="B", parent_id="a"))

        assert created.parent_id == "a"
        assert repository.get_by_id("b").parent_id == "a"

    def test_create_with_missing_parent_stores_root(self, repository) -> None:
        """A missing parent is not an error; no edge is created."""
        created = repository.create(Task(id="orphan", title="O", parent_id="ghost"))

        assert created.parent_id is None
        assert repository.get_by_id("orphan").parent_id is None
        with repository._driver.session(AccessMode.READ) as session:
            assert session.execute_read(_edge_count) == 0

    def test_missing_parent_logs_warning(self, repository, caplog) -> None:
        with caplog.at_level("WARNING", logger="taskgraph.repository.task_repository"):
            repository.create(Task(id="orphan", title="O", parent_id="ghost"))

        assert "ghost" in caplog.text

    def test_empty_parent_id_is_root(self, repository) -> None:
        created = repository.create(Task(id="a", title="A", parent_id=""))

        assert created.parent_id is None
        assert repository.get_by_id("a").parent_id is None

    def test_duplicate_id_rejected(self, repository, root_task) -> None:
        repository.create(root_task)

        with pytest.raises(DuplicateTaskError):
            repository.create(Task(id=root_task.id, title="Other"))

        assert repository.get_by_id(root_task.id).title == root_task.title
        assert repository.count() == 1

    def test_atomic_create_with_parent(self, atomic_repository) -> None:
        atomic_repository.create(Task(id="a", title="A"))

        created = atomic_repository.create(Task(id="b", title="B", parent_id="a"))

        assert created.parent_id == "a"
        assert atomic_repository.get_by_id("b").parent_id == "a"

    def test_atomic_create_with_missing_parent(self, atomic_repository) -> None:
        created = atomic_repository.create(Task(id="b", title="B", parent_id="ghost"))

        assert created.parent_id is None
        assert atomic_repository.get_by_id("b").parent_id is None

    def test_atomic_duplicate_rolls_back(self, atomic_repository) -> None:
        atomic_repository.create(Task(id="a", title="A"))

        with pytest.raises(DuplicateTaskError):
            atomic_repository.create(Task(id="a", title="Again", parent_id="a"))

        with atomic_repository._driver.session(AccessMode.READ) as session:
            assert session.execute_read(_edge_count) == 0


class TestUpdate:
    """Tests for task update."""

    def test_update_sets_both_fields(self, repository, root_task) -> None:
        repository.create(root_task)

        repository.update(root_task.id, "Renamed", True)

        task = repository.get_by_id(root_task.id)
        assert task.title == "Renamed"
        assert task.completed is True

    def test_update_keeps_parent(self, repository) -> None:
        repository.create(Task(id="a", title="A"))
        repository.create(Task(id="b", title="B", parent_id="a"))

        repository.update("b", "B2", True)

        assert repository.get_by_id("b").parent_id == "a"

    def test_update_missing_task_is_silent(self, repository) -> None:
        repository.update("missing", "Title", True)

        assert repository.list_all() == []


class TestDelete:
    """Tests for cascade delete."""

    def test_delete_removes_task_and_direct_children(self, repository) -> None:
        repository.create(Task(id="p", title="Parent"))
        for i in range(3):
            repository.create(Task(id=f"c{i}", title=f"Child {i}", parent_id="p"))
        repository.create(Task(id="other", title="Unrelated"))

        repository.delete("p")

        assert {t.id for t in repository.list_all()} == {"other"}

    def test_delete_leaves_grandchildren(self, repository) -> None:
        repository.create(Task(id="g", title="Grandparent"))
        repository.create(Task(id="p", title="Parent", parent_id="g"))
        repository.create(Task(id="c", title="Child", parent_id="p"))

        repository.delete("g")

        remaining = repository.list_all()
        assert [t.id for t in remaining] == ["c"]
        # The edge to the deleted parent went with it
        assert remaining[0].parent_id is None

    def test_delete_child_keeps_parent(self, repository) -> None:
        repository.create(Task(id="p", title="Parent"))
        repository.create(Task(id="c", title="Child", parent_id="p"))

        repository.delete("c")

        assert [t.id for t in repository.list_all()] == ["p"]

    def test_delete_missing_task_is_silent(self, repository, root_task) -> None:
        repository.create(root_task)

        repository.delete("missing")

        assert repository.count() == 1

    def test_delete_leaves_no_dangling_edges(self, repository) -> None:
        repository.create(Task(id="g", title="G"))
        repository.create(Task(id="p", title="P", parent_id="g"))
        repository.create(Task(id="c", title="C", parent_id="p"))

        repository.delete("g")

        with repository._driver.session(AccessMode.READ) as session:
            assert session.execute_read(_edge_count) == 0


class TestStats:
    """Tests for count and stats."""

    def test_count(self, repository) -> None:
        assert repository.count() == 0
        repository.create(Task(id="a", title="A"))
        assert repository.count() == 1

    def test_stats(self, repository, temp_graph_path) -> None:
        stats = repository.stats()

        assert stats["task_count"] == 0
        assert stats["db_path"] == str(temp_graph_path)
        assert stats["atomic_create"] is False

"""Task persistence over the graph store.

TaskRepository translates task operations into Kuzu transactions. Each
public method opens its own session and closes it on every exit path.
Reads run in read-only transactions, writes in write transactions.

Hierarchy rules enforced here:
- A HAS_PARENT edge is created only when the parent node exists at creation
  time. A missing parent is not an error; the task is stored as a root task.
- Deleting a task detach-deletes its direct children and then the task
  itself, in one transaction. Grandchildren are left in place.
"""

import logging
from dataclasses import replace
from typing import Any

from taskgraph.core.constants import AccessMode, HAS_PARENT_REL, TASK_LABEL
from taskgraph.core.exceptions import DuplicateTaskError, NotFoundError
from taskgraph.graph.mapper import row_to_task, rows_to_tasks, task_to_params
from taskgraph.graph.session import GraphDriver, ManagedTransaction
from taskgraph.models.task import Task

logger = logging.getLogger(__name__)


# =============================================================================
# Queries
# =============================================================================

LIST_TASKS_QUERY = f"""
    MATCH (t:{TASK_LABEL})
    OPTIONAL MATCH (t)-[:{HAS_PARENT_REL}]->(p:{TASK_LABEL})
    RETURN t.id AS id, t.title AS title, t.completed AS completed, p.id AS parent_id
"""

GET_TASK_QUERY = f"""
    MATCH (t:{TASK_LABEL} {{id: $id}})
    OPTIONAL MATCH (t)-[:{HAS_PARENT_REL}]->(p:{TASK_LABEL})
    RETURN t.id AS id, t.title AS title, t.completed AS completed, p.id AS parent_id
"""

TASK_EXISTS_QUERY = f"""
    MATCH (t:{TASK_LABEL} {{id: $id}})
    RETURN t.id
"""

CREATE_TASK_QUERY = f"""
    CREATE (t:{TASK_LABEL} {{id: $id, title: $title, completed: $completed}})
"""

ATTACH_PARENT_QUERY = f"""
    MATCH (child:{TASK_LABEL} {{id: $child_id}}), (parent:{TASK_LABEL} {{id: $parent_id}})
    CREATE (child)-[:{HAS_PARENT_REL}]->(parent)
    RETURN parent.id
"""

UPDATE_TASK_QUERY = f"""
    MATCH (t:{TASK_LABEL} {{id: $id}})
    SET t.title = $title, t.completed = $completed
"""

DELETE_CHILDREN_QUERY = f"""
    MATCH (child:{TASK_LABEL})-[:{HAS_PARENT_REL}]->(t:{TASK_LABEL} {{id: $id}})
    DETACH DELETE child
"""

DELETE_TASK_QUERY = f"""
    MATCH (t:{TASK_LABEL} {{id: $id}})
    DETACH DELETE t
"""

COUNT_TASKS_QUERY = f"""
    MATCH (t:{TASK_LABEL})
    RETURN count(t)
"""


# =============================================================================
# Transaction functions
# =============================================================================

def _list_tasks(tx: ManagedTransaction) -> list[Task]:
    return rows_to_tasks(tx.run(LIST_TASKS_QUERY))


def _get_task(tx: ManagedTransaction, task_id: str) -> list[Task]:
    return rows_to_tasks(tx.run(GET_TASK_QUERY, {"id": task_id}))


def _create_node(tx: ManagedTransaction, task: Task) -> None:
    if tx.run(TASK_EXISTS_QUERY, {"id": task.id}):
        raise DuplicateTaskError(task.id)
    tx.run(CREATE_TASK_QUERY, task_to_params(task))


def _attach_parent(tx: ManagedTransaction, child_id: str, parent_id: str) -> bool:
    rows = tx.run(ATTACH_PARENT_QUERY, {"child_id": child_id, "parent_id": parent_id})
    return bool(rows)


def _create_with_parent(tx: ManagedTransaction, task: Task) -> bool:
    _create_node(tx, task)
    if not task.has_parent:
        return False
    return _attach_parent(tx, task.id, task.parent_id)


def _update_task(tx: ManagedTransaction, task_id: str, title: str, completed: bool) -> None:
    tx.run(UPDATE_TASK_QUERY, {"id": task_id, "title": title, "completed": completed})


def _delete_task(tx: ManagedTransaction, task_id: str) -> None:
    tx.run(DELETE_CHILDREN_QUERY, {"id": task_id})
    tx.run(DELETE_TASK_QUERY, {"id": task_id})


def _count_tasks(tx: ManagedTransaction) -> int:
    rows = tx.run(COUNT_TASKS_QUERY)
    return int(rows[0][0]) if rows else 0


# =============================================================================
# Repository
# =============================================================================

class TaskRepository:
    """Graph-backed task persistence.

    The repository holds no mutable state besides its driver reference and
    is safe to share between concurrent callers. Conflicting writes are
    serialized by the store.

    Example:
        repo = TaskRepository(driver)
        repo.create(Task(id="a", title="Write report"))
        repo.get_by_id("a")
    """

    def __init__(self, driver: GraphDriver, atomic_create: bool = False) -> None:
        """Initialize the repository.

        Args:
            driver: Initialized graph driver.
            atomic_create: Write the node and its parent edge in one
                transaction instead of two.
        """
        self._driver = driver
        self._atomic_create = atomic_create

    @property
    def atomic_create(self) -> bool:
        return self._atomic_create

    def list_all(self) -> list[Task]:
        """Return every task with its parent id, in no particular order."""
        with self._driver.session(AccessMode.READ) as session:
            tasks = session.execute_read(_list_tasks)
        logger.debug(f"Listed {len(tasks)} tasks")
        return tasks

    def get_by_id(self, task_id: str) -> Task:
        """Get a task by id.

        Raises:
            NotFoundError: If no task node has this id.
        """
        with self._driver.session(AccessMode.READ) as session:
            tasks = session.execute_read(_get_task, task_id)
        if not tasks:
            raise NotFoundError(task_id)
        return tasks[0]

    def create(self, task: Task) -> Task:
        """Persist a new task and, when possible, its parent edge.

        With atomic_create off, the node and the edge are written in two
        separate transactions; a failure between them leaves a root task.

        Returns:
            The persisted task. parent_id is None when the requested parent
            did not exist and no edge was created.

        Raises:
            DuplicateTaskError: If a task with the same id exists.
        """
        with self._driver.session(AccessMode.WRITE) as session:
            if self._atomic_create:
                attached = session.execute_write(_create_with_parent, task)
            else:
                session.execute_write(_create_node, task)
                attached = False
                if task.has_parent:
                    attached = session.execute_write(_attach_parent, task.id, task.parent_id)

        if task.has_parent and not attached:
            logger.warning(
                f"Parent {task.parent_id} not found for task {task.id}; stored as root task"
            )
            return replace(task, parent_id=None)

        logger.debug(f"Created task {task.id} (parent={task.parent_id})")
        return replace(task, parent_id=task.parent_id or None)

    def update(self, task_id: str, title: str, completed: bool) -> None:
        """Set title and completed on a task.

        Both fields are written unconditionally. An unknown id is a no-op.
        """
        with self._driver.session(AccessMode.WRITE) as session:
            session.execute_write(_update_task, task_id, title, completed)
        logger.debug(f"Updated task {task_id}")

    def delete(self, task_id: str) -> None:
        """Delete a task and its direct children.

        Children and the task are removed in one write transaction, together
        with all their relationships. An unknown id is a no-op.
        """
        with self._driver.session(AccessMode.WRITE) as session:
            session.execute_write(_delete_task, task_id)
        logger.debug(f"Deleted task {task_id} and its direct children")

    def count(self) -> int:
        """Return the number of task nodes."""
        with self._driver.session(AccessMode.READ) as session:
            return session.execute_read(_count_tasks)

    def stats(self) -> dict[str, Any]:
        """Return store statistics for health reporting."""
        return {
            "task_count": self.count(),
            "db_path": str(self._driver.db_path),
            "atomic_create": self._atomic_create,
        }

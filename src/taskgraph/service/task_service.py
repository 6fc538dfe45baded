"""Task operations exposed to the transport layer."""

import logging
import uuid
from dataclasses import replace
from typing import Any, Callable, Optional

from taskgraph.core.exceptions import InvalidInputError
from taskgraph.graph.session import GraphDriver
from taskgraph.models.task import Task
from taskgraph.repository.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def generate_task_id() -> str:
    """Generate a random unique task id (UUID4)."""
    return str(uuid.uuid4())


def _check_type(field: str, value: Any, expected: type, optional: bool = False) -> None:
    if optional and value is None:
        return
    if type(value) is not expected:
        raise InvalidInputError(
            f"Field '{field}' must be {expected.__name__}",
            details={"field": field, "actual": type(value).__name__},
        )


class TaskService:
    """Stateless sequencing layer over TaskRepository.

    The service owns the graph driver handle it is constructed with and
    assigns ids to new tasks. It holds no other state and can be shared by
    concurrent request handlers.
    """

    def __init__(
        self,
        driver: GraphDriver,
        atomic_create: bool = False,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            driver: Graph driver used by the repository
            atomic_create: Create node and parent edge in one transaction
            id_factory: Id generator for tasks created without an id
        """
        self._driver = driver
        self._repository = TaskRepository(driver, atomic_create=atomic_create)
        self._id_factory = id_factory or generate_task_id

    @property
    def driver(self) -> GraphDriver:
        return self._driver

    @property
    def repository(self) -> TaskRepository:
        return self._repository

    def list_tasks(self) -> list[Task]:
        return self._repository.list_all()

    def create_task(self, task: Task) -> Task:
        """
        Create a task.

        An empty id is replaced with a generated one. completed is always
        stored as False regardless of the value supplied.

        Raises:
            InvalidInputError: If a field has the wrong type
            DuplicateTaskError: If the id is already taken
        """
        _check_type("id", task.id, str)
        _check_type("title", task.title, str)
        _check_type("parent_id", task.parent_id, str, optional=True)

        task_id = task.id or self._id_factory()
        new_task = replace(task, id=task_id, completed=False)
        created = self._repository.create(new_task)
        logger.info(f"Task created: {created.id}")
        return created

    def get_task(self, task_id: str) -> Task:
        return self._repository.get_by_id(task_id)

    def update_task(self, task_id: str, title: str, completed: bool) -> None:
        _check_type("title", title, str)
        _check_type("completed", completed, bool)
        self._repository.update(task_id, title, completed)

    def delete_task(self, task_id: str) -> None:
        self._repository.delete(task_id)
        logger.info(f"Task deleted: {task_id}")

"""Task persistence layer."""

from taskgraph.repository.task_repository import TaskRepository

__all__ = ["TaskRepository"]

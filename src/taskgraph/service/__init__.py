"""Task operation façade."""

from taskgraph.service.task_service import TaskService, generate_task_id

__all__ = ["TaskService", "generate_task_id"]

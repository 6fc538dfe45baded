"""TaskGraph data models."""

from taskgraph.models.task import Task

__all__ = ["Task"]

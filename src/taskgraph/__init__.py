"""TaskGraph - hierarchical tasks persisted in a graph database.

Tasks may have one parent task. Deleting a task removes its direct
children with it.
"""

__version__ = "0.1.0"

from taskgraph.core import (
    ErrorKind,
    TaskGraphConfig,
    TaskGraphError,
)
from taskgraph.models import Task

__all__ = [
    "__version__",
    "ErrorKind",
    "Task",
    "TaskGraphConfig",
    "TaskGraphError",
]

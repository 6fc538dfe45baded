"""Conversion between task graph rows and Task values.

Task read queries project four positional columns:
(id, title, completed, parent_id). The parent column is optional: a missing
or null value means the task has no parent.
"""

from typing import Any, Optional, Sequence

from taskgraph.core.exceptions import DataCorruptionError
from taskgraph.models.task import Task

# Column positions in a task projection row
ID_COLUMN = 0
TITLE_COLUMN = 1
COMPLETED_COLUMN = 2
PARENT_ID_COLUMN = 3

TASK_COLUMNS = ("id", "title", "completed", "parent_id")


def _required(row: Sequence[Any], index: int, expected: type) -> Any:
    field = TASK_COLUMNS[index]
    if index >= len(row):
        raise DataCorruptionError(field, None, expected=expected.__name__)
    value = row[index]
    # bool is an int subclass; keep the check exact for the completed column
    if type(value) is not expected:
        raise DataCorruptionError(field, value, expected=expected.__name__)
    return value


def _optional_parent(row: Sequence[Any]) -> Optional[str]:
    if len(row) <= PARENT_ID_COLUMN:
        return None
    value = row[PARENT_ID_COLUMN]
    if value is None:
        return None
    if not isinstance(value, str):
        raise DataCorruptionError("parent_id", value, expected="str")
    return value


def row_to_task(row: Sequence[Any]) -> Task:
    """Convert one projection row into a Task.

    Args:
        row: Positional row (id, title, completed[, parent_id]).

    Returns:
        Task populated from the row.

    Raises:
        DataCorruptionError: If a column is missing or has an unexpected type.
    """
    return Task(
        id=_required(row, ID_COLUMN, str),
        title=_required(row, TITLE_COLUMN, str),
        completed=_required(row, COMPLETED_COLUMN, bool),
        parent_id=_optional_parent(row),
    )


def rows_to_tasks(rows: Sequence[Sequence[Any]]) -> list[Task]:
    """Convert a sequence of projection rows into Tasks."""
    return [row_to_task(row) for row in rows]


def task_to_params(task: Task) -> dict[str, Any]:
    """Named parameters for creating a task node."""
    return task.to_node_params()

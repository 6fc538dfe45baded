"""Task entity definition.

A Task is a transient value copy of a persisted task node. The graph store
owns the persisted state; instances of this class are never live references.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Task:
    """A task that may belong to one parent task.

    Attributes:
        id: Unique identifier, immutable once assigned.
        title: Human readable title.
        completed: Completion flag; always False on creation.
        parent_id: Id of the parent task, None for a root task.
    """

    id: str
    title: str
    completed: bool = False
    parent_id: Optional[str] = None

    @property
    def has_parent(self) -> bool:
        """Check whether a non-empty parent id is set."""
        return bool(self.parent_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "parent_id": self.parent_id,
        }

    def to_node_params(self) -> dict[str, Any]:
        """Node properties for database insertion (no parent column)."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
        }


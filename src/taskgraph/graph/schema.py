"""Task graph schema definitions for Kuzu database.

This module defines the schema for the task graph:
- Node table: Task
- Relationship table: HAS_PARENT (child -> parent, no properties)

Schema version is tracked for future migrations.
"""

from typing import Final

import kuzu

from taskgraph.core.constants import HAS_PARENT_REL, TASK_LABEL

# Schema version for tracking migrations
SCHEMA_VERSION: Final[str] = "1.0.0"

# Node table definitions using Kuzu DDL syntax
NODE_SCHEMAS: Final[dict[str, str]] = {
    TASK_LABEL: f"""
        CREATE NODE TABLE IF NOT EXISTS {TASK_LABEL} (
            id STRING,
            title STRING,
            completed BOOLEAN,
            PRIMARY KEY (id)
        )
    """,
}

# Relationship table definitions using Kuzu DDL syntax
EDGE_SCHEMAS: Final[dict[str, str]] = {
    HAS_PARENT_REL: f"""
        CREATE REL TABLE IF NOT EXISTS {HAS_PARENT_REL} (
            FROM {TASK_LABEL} TO {TASK_LABEL}
        )
    """,
}


def initialize_schema(conn: kuzu.Connection) -> None:
    """Initialize the task graph schema.

    Creates the node and relationship tables if they do not exist.
    This function is idempotent and safe to call multiple times.

    Args:
        conn: Active Kuzu database connection.

    Raises:
        RuntimeError: If schema creation fails due to database issues.
    """
    # Node tables first, relationships reference them
    for ddl in (*NODE_SCHEMAS.values(), *EDGE_SCHEMAS.values()):
        try:
            conn.execute(ddl)
        except RuntimeError as e:
            error_msg = str(e).lower()
            if "already exists" not in error_msg:
                raise


def get_schema_version() -> str:
    """Return the current schema version."""
    return SCHEMA_VERSION


def get_node_tables() -> list[str]:
    """Return list of all node table names."""
    return list(NODE_SCHEMAS.keys())


def get_edge_tables() -> list[str]:
    """Return list of all edge table names."""
    return list(EDGE_SCHEMAS.keys())

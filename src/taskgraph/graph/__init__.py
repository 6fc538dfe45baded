"""TaskGraph graph store module.

Main components:
- GraphDriver: owns the Kuzu database and opens sessions
- GraphSession: per-operation connection with read/write transactions
- ManagedTransaction: runs parametrized statements
- Schema: Task node table and HAS_PARENT relationship table
- Mapper: converts projection rows into Task values

Example usage:
    from taskgraph.graph import GraphDriver

    driver = GraphDriver(Path(".taskgraph/data/tasks.kuzu"))
    driver.initialize()
"""

from taskgraph.graph.mapper import row_to_task, rows_to_tasks, task_to_params
from taskgraph.graph.schema import (
    SCHEMA_VERSION,
    get_edge_tables,
    get_node_tables,
    get_schema_version,
    initialize_schema,
)
from taskgraph.graph.session import GraphDriver, GraphSession, ManagedTransaction

__all__ = [
    "GraphDriver",
    "GraphSession",
    "ManagedTransaction",
    "initialize_schema",
    "get_schema_version",
    "get_node_tables",
    "get_edge_tables",
    "SCHEMA_VERSION",
    "row_to_task",
    "rows_to_tasks",
    "task_to_params",
]

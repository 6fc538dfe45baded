"""Core TaskGraph components."""

from taskgraph.core.config import ServerConfig, StorageConfig, TaskGraphConfig
from taskgraph.core.constants import AccessMode, ErrorKind
from taskgraph.core.exceptions import (
    ConfigurationError,
    DataCorruptionError,
    DuplicateTaskError,
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
    TaskGraphError,
)

__all__ = [
    "AccessMode",
    "ErrorKind",
    "ServerConfig",
    "StorageConfig",
    "TaskGraphConfig",
    "TaskGraphError",
    "ConfigurationError",
    "NotFoundError",
    "InvalidInputError",
    "DuplicateTaskError",
    "StoreUnavailableError",
    "DataCorruptionError",
]

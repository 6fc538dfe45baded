"""TaskGraph system constants and default values."""

from enum import Enum
from pathlib import Path
from typing import Final


class AccessMode(str, Enum):
    """Session access modes for the graph store."""

    READ = "read"
    WRITE = "write"


class ErrorKind(str, Enum):
    """Error categories surfaced by the task core."""

    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    STORE_UNAVAILABLE = "store_unavailable"
    DATA_CORRUPTION = "data_corruption"
    CONFIGURATION = "configuration"


# HTTP status equivalents for each error kind
ERROR_STATUS_CODES: Final[dict[ErrorKind, int]] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.STORE_UNAVAILABLE: 500,
    ErrorKind.DATA_CORRUPTION: 500,
    ErrorKind.CONFIGURATION: 500,
}

# Directory structure
TASKGRAPH_ROOT_DIR: Final[str] = ".taskgraph"
CONFIG_FILE: Final[str] = "config.json"
DEFAULT_DB_PATH: Final[str] = "data/tasks.kuzu"

# Graph schema names
TASK_LABEL: Final[str] = "Task"
HAS_PARENT_REL: Final[str] = "HAS_PARENT"

# Server settings
DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 7480
DEFAULT_LOG_LEVEL: Final[str] = "info"

# Environment overrides
ENV_HOST: Final[str] = "TASKGRAPH_HOST"
ENV_PORT: Final[str] = "TASKGRAPH_PORT"
ENV_DB_PATH: Final[str] = "TASKGRAPH_DB_PATH"


def get_taskgraph_root(base_path: Path | None = None) -> Path:
    """Get the .taskgraph root directory path."""
    base = base_path or Path.cwd()
    return base / TASKGRAPH_ROOT_DIR


def get_config_path(base_path: Path | None = None) -> Path:
    """Get the configuration file path."""
    return get_taskgraph_root(base_path) / CONFIG_FILE

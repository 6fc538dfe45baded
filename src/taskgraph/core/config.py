"""TaskGraph configuration loading and validation."""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Self

from taskgraph.core.constants import (
    DEFAULT_DB_PATH,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    ENV_DB_PATH,
    ENV_HOST,
    ENV_PORT,
    get_config_path,
    get_taskgraph_root,
)
from taskgraph.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class StorageConfig:
    """Graph storage configuration."""

    db_path: str = DEFAULT_DB_PATH
    atomic_create: bool = False


@dataclass(frozen=True)
class TaskGraphConfig:
    """Complete TaskGraph configuration."""

    version: str = "1.0"
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        return cls(
            version=data.get("version", "1.0"),
            server=ServerConfig(**data.get("server", {})),
            storage=StorageConfig(**data.get("storage", {})),
        )

    @classmethod
    def load(cls, base_path: Path | None = None) -> Self:
        """Load configuration from file or use defaults.

        Environment variables are applied on top of the file values.
        """
        config_path = get_config_path(base_path)

        if not config_path.exists():
            return cls().with_env_overrides()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data).with_env_overrides()
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                details={"path": str(config_path)},
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid configuration values: {e}",
                details={"path": str(config_path)},
            ) from e

    def with_env_overrides(self) -> Self:
        """Return a copy with TASKGRAPH_* environment variables applied."""
        server = self.server
        storage = self.storage

        if host := os.environ.get(ENV_HOST):
            server = replace(server, host=host)
        if port := os.environ.get(ENV_PORT):
            try:
                server = replace(server, port=int(port))
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid port in {ENV_PORT}: {port}",
                ) from e
        if db_path := os.environ.get(ENV_DB_PATH):
            storage = replace(storage, db_path=db_path)

        return replace(self, server=server, storage=storage)

    def resolve_db_path(self, base_path: Path | None = None) -> Path:
        """Resolve the database path; relative paths live under the .taskgraph root."""
        path = Path(self.storage.db_path)
        if path.is_absolute():
            return path
        return get_taskgraph_root(base_path) / path

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "version": self.version,
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "log_level": self.server.log_level,
            },
            "storage": {
                "db_path": self.storage.db_path,
                "atomic_create": self.storage.atomic_create,
            },
        }

    def save(self, base_path: Path | None = None) -> Path:
        """Save configuration to file and return its path."""
        config_path = get_config_path(base_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

        return config_path

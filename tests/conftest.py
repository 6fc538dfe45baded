"""Pytest configuration and fixtures for TaskGraph tests."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from taskgraph.core.config import TaskGraphConfig
from taskgraph.graph.session import GraphDriver
from taskgraph.models.task import Task
from taskgraph.repository.task_repository import TaskRepository
from taskgraph.service.task_service import TaskService


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_graph_path(temp_dir: Path) -> Path:
    """Path for a graph database that does not exist yet (Kuzu creates it)."""
    return temp_dir / "graph" / "tasks.kuzu"


@pytest.fixture
def driver(temp_graph_path: Path) -> Generator[GraphDriver, None, None]:
    """Create an initialized graph driver."""
    graph_driver = GraphDriver(temp_graph_path)
    graph_driver.initialize()
    yield graph_driver
    graph_driver.close()


@pytest.fixture
def repository(driver: GraphDriver) -> TaskRepository:
    """Create a task repository with two-step creation."""
    return TaskRepository(driver)


@pytest.fixture
def atomic_repository(driver: GraphDriver) -> TaskRepository:
    """Create a task repository with single-transaction creation."""
    return TaskRepository(driver, atomic_create=True)


@pytest.fixture
def service(driver: GraphDriver) -> TaskService:
    """Create a task service."""
    return TaskService(driver)


@pytest.fixture
def config() -> TaskGraphConfig:
    """Create default configuration."""
    return TaskGraphConfig()


@pytest.fixture
def root_task() -> Task:
    """A task without a parent."""
    return Task(id="task-root", title="Plan release")

"""FastAPI server for TaskGraph."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskgraph import __version__
from taskgraph.core.config import TaskGraphConfig
from taskgraph.core.exceptions import TaskGraphError
from taskgraph.graph.session import GraphDriver
from taskgraph.api.routes.tasks import router as tasks_router
from taskgraph.service.task_service import TaskService

logger = logging.getLogger(__name__)


def create_app(
    config: TaskGraphConfig | None = None,
    service: TaskService | None = None,
    base_path: Path | None = None,
) -> FastAPI:
    """
    Build the API application.

    When no service is given, the lifespan opens a GraphDriver at the
    configured path on startup and closes it on shutdown.

    Args:
        config: Configuration; loaded from base_path when omitted
        service: Pre-built service, used as-is and never closed here
        base_path: Directory containing the .taskgraph root
    """
    config = config or TaskGraphConfig.load(base_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app.state.start_time = datetime.now()
        driver: GraphDriver | None = None

        if app.state.service is None:
            driver = GraphDriver(config.resolve_db_path(base_path))
            driver.initialize()
            app.state.service = TaskService(
                driver, atomic_create=config.storage.atomic_create
            )

        yield

        if driver is not None:
            driver.close()
            app.state.service = None

    app = FastAPI(
        title="TaskGraph",
        description="Hierarchical task store backed by a graph database",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.service = service
    app.state.start_time = datetime.now()

    app.include_router(tasks_router)

    @app.exception_handler(RequestValidationError)
    async def invalid_payload(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug(f"Rejected payload on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request payload", "kind": "invalid_input"},
        )

    @app.exception_handler(TaskGraphError)
    async def task_graph_error(request: Request, exc: TaskGraphError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "kind": exc.kind.value},
        )

    @app.get("/health")
    def health(request: Request) -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content=_health_response(request.app))

    return app


def _health_response(app: FastAPI) -> dict[str, Any]:
    uptime = (datetime.now() - app.state.start_time).total_seconds()
    response: dict[str, Any] = {
        "status": "healthy",
        "version": __version__,
        "uptime_seconds": round(uptime, 3),
    }

    service: TaskService | None = app.state.service
    if service is None or not service.driver.is_initialized:
        response["status"] = "unhealthy"
        response["error"] = "Graph store not initialized"
        return response

    try:
        response.update(service.repository.stats())
    except TaskGraphError as e:
        response["status"] = "unhealthy"
        response["error"] = str(e)

    return response


def run_server(
    host: str | None = None,
    port: int | None = None,
    base_path: Path | None = None,
    config: TaskGraphConfig | None = None,
    log_level: str | None = None,
) -> None:
    """Run the API server."""
    import uvicorn

    config = config or TaskGraphConfig.load(base_path)
    app = create_app(config=config, base_path=base_path)

    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=log_level or config.server.log_level,
    )

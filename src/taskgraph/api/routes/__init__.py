"""API route modules."""

from taskgraph.api.routes.tasks import router as tasks_router

__all__ = ["tasks_router"]

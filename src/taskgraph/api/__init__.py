"""HTTP API for TaskGraph."""

from taskgraph.api.server import create_app, run_server

__all__ = ["create_app", "run_server"]

"""Main CLI entrypoint for TaskGraph."""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Any, Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

from taskgraph.core.config import TaskGraphConfig
from taskgraph.core.constants import DEFAULT_HOST, DEFAULT_PORT, get_config_path

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="taskgraph",
    help="TaskGraph - hierarchical tasks in a graph database",
    no_args_is_help=True,
)

HostOption = Annotated[str, typer.Option("--host", help="Server host")]
PortOption = Annotated[int, typer.Option("--port", help="Server port")]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def _request(
    method: str,
    host: str,
    port: int,
    path: str,
    payload: Optional[dict[str, Any]] = None,
) -> httpx.Response:
    """Send a request to the server, exiting with status 1 when unreachable."""
    url = f"http://{host}:{port}{path}"
    try:
        with httpx.Client(timeout=10.0) as client:
            return client.request(method, url, json=payload)
    except httpx.ConnectError:
        err_console.print(f"[red]TaskGraph server not running at http://{host}:{port}[/red]")
        raise typer.Exit(1)
    except httpx.RequestError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _check(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        detail = response.json().get("detail", response.text)
    except ValueError:
        detail = response.text
    err_console.print(f"[red]Error ({response.status_code}): {detail}[/red]")
    raise typer.Exit(1)


def _print_tasks(tasks: list[dict[str, Any]]) -> None:
    table = Table(title=f"Tasks ({len(tasks)})")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Done", justify="center")
    table.add_column("Parent", style="dim")

    for task in tasks:
        table.add_row(
            task["id"],
            task["title"],
            "[green]yes[/green]" if task["completed"] else "no",
            task.get("parent_id") or "-",
        )

    console.print(table)


@app.command("serve")
def serve_command(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind host")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Bind port")] = None,
    db_path: Annotated[
        Optional[Path], typer.Option("--db-path", help="Kuzu database directory")
    ] = None,
    log_level: Annotated[str, typer.Option("--log-level", help="Log level")] = "info",
) -> None:
    """Run the TaskGraph API server."""
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    log_level_upper = log_level.upper()
    if log_level_upper not in valid_log_levels:
        err_console.print(f"[red]Error: Invalid log level '{log_level}'[/red]")
        err_console.print(f"Valid levels: {', '.join(valid_log_levels)}")
        raise typer.Exit(1)

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = TaskGraphConfig.load()
    if db_path is not None:
        config = replace(config, storage=replace(config.storage, db_path=str(db_path.resolve())))

    console.print("[green]Starting TaskGraph server...[/green]")
    console.print(
        f"Listening on http://{host or config.server.host}:{port or config.server.port}"
    )

    try:
        from taskgraph.api.server import run_server

        run_server(host=host, port=port, config=config, log_level=log_level.lower())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.exception("Server error")
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("init")
def init_command(
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing config")] = False,
) -> None:
    """Write a default configuration file."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
        raise typer.Exit(0)

    path = TaskGraphConfig().save()
    console.print(f"[green]Wrote {path}[/green]")


@app.command("list")
def list_command(
    host: HostOption = DEFAULT_HOST,
    port: PortOption = DEFAULT_PORT,
    json_output: JsonOption = False,
) -> None:
    """List all tasks."""
    response = _request("GET", host, port, "/tasks")
    _check(response)
    tasks = response.json()

    if json_output:
        console.print(json.dumps(tasks, indent=2))
        return

    if not tasks:
        console.print("[dim]No tasks[/dim]")
        return

    _print_tasks(tasks)


@app.command("add")
def add_command(
    title: Annotated[str, typer.Argument(help="Task title")],
    parent: Annotated[
        Optional[str], typer.Option("--parent", "-p", help="Parent task id")
    ] = None,
    task_id: Annotated[Optional[str], typer.Option("--id", help="Explicit task id")] = None,
    host: HostOption = DEFAULT_HOST,
    port: PortOption = DEFAULT_PORT,
    json_output: JsonOption = False,
) -> None:
    """Create a task."""
    payload: dict[str, Any] = {"title": title}
    if parent:
        payload["parent_id"] = parent
    if task_id:
        payload["id"] = task_id

    response = _request("POST", host, port, "/tasks", payload)
    _check(response)
    task = response.json()

    if json_output:
        console.print(json.dumps(task, indent=2))
        return

    console.print(f"[green]Created task {task['id']}[/green]")
    if parent and not task.get("parent_id"):
        console.print(f"[yellow]Parent {parent} not found; task stored without parent[/yellow]")


@app.command("show")
def show_command(
    task_id: Annotated[str, typer.Argument(help="Task id")],
    host: HostOption = DEFAULT_HOST,
    port: PortOption = DEFAULT_PORT,
    json_output: JsonOption = False,
) -> None:
    """Show one task."""
    response = _request("GET", host, port, f"/tasks/{task_id}")
    _check(response)
    task = response.json()

    if json_output:
        console.print(json.dumps(task, indent=2))
        return

    _print_tasks([task])


@app.command("update")
def update_command(
    task_id: Annotated[str, typer.Argument(help="Task id")],
    title: Annotated[str, typer.Option("--title", "-t", help="New title")],
    completed: Annotated[
        bool, typer.Option("--completed/--not-completed", help="Completion flag")
    ] = False,
    host: HostOption = DEFAULT_HOST,
    port: PortOption = DEFAULT_PORT,
) -> None:
    """Set a task's title and completion flag."""
    response = _request(
        "PUT", host, port, f"/tasks/{task_id}", {"title": title, "completed": completed}
    )
    _check(response)
    console.print(f"[green]{response.json()['message']}[/green]")


@app.command("delete")
def delete_command(
    task_id: Annotated[str, typer.Argument(help="Task id")],
    host: HostOption = DEFAULT_HOST,
    port: PortOption = DEFAULT_PORT,
) -> None:
    """Delete a task and its direct children."""
    response = _request("DELETE", host, port, f"/tasks/{task_id}")
    _check(response)
    console.print(f"[green]Deleted task {task_id}[/green]")


@app.command("status")
def status_command(
    host: HostOption = DEFAULT_HOST,
    port: PortOption = DEFAULT_PORT,
    json_output: JsonOption = False,
) -> None:
    """Show server status."""
    url = f"http://{host}:{port}/health"

    try:
        with httpx.Client(timeout=5.0) as client:
            response = client.get(url)
            response.raise_for_status()
            data = response.json()
    except httpx.ConnectError:
        if json_output:
            console.print(json.dumps({"server_running": False}))
        else:
            console.print("[yellow]TaskGraph Status[/yellow]")
            console.print("-" * 30)
            console.print("Server:          [red]not running[/red]")
        return
    except httpx.HTTPError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print(json.dumps(data, indent=2))
        return

    healthy = data.get("status") == "healthy"
    console.print("[bold]TaskGraph Status[/bold]")
    console.print("-" * 30)
    console.print(
        f"Server:          {'[green]healthy[/green]' if healthy else '[red]unhealthy[/red]'}"
    )
    console.print(f"Version:         {data.get('version', 'unknown')}")
    console.print(f"Database:        {data.get('db_path', 'unknown')}")
    console.print(f"Tasks:           {data.get('task_count', 0)}")
    if data.get("error"):
        console.print(f"Error:           [red]{data['error']}[/red]")


if __name__ == "__main__":
    app()

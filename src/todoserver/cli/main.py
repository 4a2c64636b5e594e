"""todoserver CLI — run the server and talk to it from a terminal.

Usage:
    todoserver serve                              # Run the API with uvicorn
    todoserver init-db                            # Create tables (dev shortcut)
    todoserver register "Ann" ann@x.com           # Create an account, print token
    todoserver login ann@x.com                    # Print a fresh token
    todoserver tasks [--done | --open]            # List your tasks
    todoserver add "Buy milk"                     # Create a task
    todoserver toggle <task-id>                   # Flip done/not done
    todoserver rm <task-id>                       # Delete a task

Client commands read the token from --token or TODO_TOKEN.
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Optional

import click
import httpx

from todoserver import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:5000"


def _api_url() -> str:
    return os.environ.get("TODO_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the todoserver API."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_token(token: Optional[str]) -> str:
    if not token:
        click.secho(
            "Error: --token required (or set TODO_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return token


def _check(r: httpx.Response) -> dict:
    """Return the JSON body, or print the API error and exit 1."""
    if r.is_success:
        return r.json()
    try:
        detail = r.json().get("detail", {})
    except ValueError:
        detail = {}
    if isinstance(detail, dict):
        message = detail.get("message") or r.reason_phrase
    else:
        message = str(detail)
    click.secho(f"Error ({r.status_code}): {message}", fg="red", err=True)
    sys.exit(1)


def _print_task(task: dict) -> None:
    mark = click.style("✓", fg="green") if task["completed"] else " "
    click.echo(f"  [{mark}] {task['id']}  {task['title']}")


token_option = click.option(
    "--token", envvar="TODO_TOKEN", help="Bearer token (or set TODO_TOKEN)"
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="todoserver")
def main():
    """todoserver — per-user todo list API."""


@main.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", default=None, type=int, help="Port (default from settings)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from todoserver.config import settings

    uvicorn.run(
        "todoserver.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create the users and tasks tables if they don't exist."""
    from todoserver.db.engine import init_models

    asyncio.run(init_models())
    click.secho("Tables created.", fg="green")


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name")
@click.argument("email")
@click.password_option()
def register(name: str, email: str, password: str):
    """Create an account and print its token."""
    asyncio.run(_auth_impl("/api/auth/register", {
        "name": name, "email": email, "password": password,
    }))


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print a fresh token."""
    asyncio.run(_auth_impl("/api/auth/login", {"email": email, "password": password}))


async def _auth_impl(path: str, body: dict):
    async with _client() as c:
        data = _check(await c.post(path, json=body))
    click.secho(f"{data['message']} ({data['user']['email']})", fg="green")
    click.echo(data["token"])


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@main.command()
@token_option
@click.option("--done/--open", "completed", default=None, help="Filter by completion")
@click.option("--page", "-p", default=1, help="Page number")
@click.option("--limit", "-l", default=10, help="Tasks per page")
def tasks(token: Optional[str], completed: Optional[bool], page: int, limit: int):
    """List your tasks, newest first."""
    asyncio.run(_tasks_impl(_require_token(token), completed, page, limit))


async def _tasks_impl(token: str, completed: Optional[bool], page: int, limit: int):
    params: dict = {"page": page, "limit": limit}
    if completed is not None:
        params["completed"] = str(completed).lower()
    async with _client(token) as c:
        data = _check(await c.get("/api/tasks", params=params))

    if not data["tasks"]:
        click.echo("No tasks found.")
        return
    p = data["pagination"]
    click.secho(f"Tasks (page {p['page']}/{p['pages']}, {p['total']} total):", bold=True)
    for task in data["tasks"]:
        _print_task(task)


@main.command()
@token_option
@click.argument("title")
def add(token: Optional[str], title: str):
    """Create a task."""
    asyncio.run(_send(_require_token(token), "POST", "/api/tasks", {"title": title}))


@main.command()
@token_option
@click.argument("task_id")
def toggle(token: Optional[str], task_id: str):
    """Flip a task between done and not done."""
    asyncio.run(_send(_require_token(token), "PATCH", f"/api/tasks/{task_id}/toggle"))


@main.command()
@token_option
@click.argument("task_id")
def rm(token: Optional[str], task_id: str):
    """Delete a task."""
    asyncio.run(_send(_require_token(token), "DELETE", f"/api/tasks/{task_id}"))


async def _send(token: str, method: str, path: str, body: Optional[dict] = None):
    async with _client(token) as c:
        data = _check(await c.request(method, path, json=body))
    if "task" in data:
        _print_task(data["task"])
    else:
        click.secho(data.get("message", "OK"), fg="green")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()

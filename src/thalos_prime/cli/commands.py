# src/thalos_prime/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_api import try_submit

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _ts_local(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_task_line(task: Task) -> str:
    return f"{task.id}  [{task.status.value}]  {task.intent}"


def format_task_detail(task: Task) -> str:
    lines = [
        f"Task {task.id}",
        f"  Intent:  {task.intent}",
        f"  Status:  {task.status.value}",
        f"  Created: {_ts_local(task.created_at)}",
        f"  Updated: {_ts_local(task.updated_at)}",
    ]
    if task.result is not None:
        lines.append(f"  Result:  {task.result}")
    if task.error is not None:
        lines.append(f"  Error:   {task.error}")
    if task.metadata:
        meta = ", ".join(f"{k}={v!r}" for k, v in task.metadata.items())
        lines.append(f"  Metadata: {meta}")
    return "\n".join(lines)


def format_status(state: AppState) -> str:
    status = state.coordinator.status()
    lines = [
        "Status:",
        f"  Initialized: {_ts_local(status.initialized_at)}",
        f"  Total tasks: {status.total}",
        "  Status breakdown:",
    ]
    for s in TaskStatus:
        lines.append(f"    {s.value}: {status.counts.get(s, 0)}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    return format_status(state)


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks      -> most recent tasks (settings.recent_tasks_limit)
    /tasks N    -> N most recent tasks
    /tasks all  -> every task
    """
    limit: int | None = int(getattr(state.settings, "recent_tasks_limit", 10))
    if args:
        arg = args[0].lower()
        if arg == "all":
            limit = None
        else:
            try:
                limit = max(1, int(arg))
            except ValueError:
                return "Usage: /tasks [N|all]"

    tasks = state.coordinator.list_tasks(limit)
    if not tasks:
        return "No tasks yet. Type an intent to submit one."
    lines = [f"Tasks (newest first, {len(tasks)} shown):"]
    lines.extend(f"  {format_task_line(t)}" for t in tasks)
    return "\n".join(lines)


def cmd_task(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /task <id>"
    task = state.coordinator.get(args[0])
    if task is None:
        return f"Task not found: {args[0]}"
    return format_task_detail(task)


def cmd_submit(state: AppState, args: list[str]) -> str:
    """Submit without waiting; the task runs in the background."""
    task, error = try_submit(state.coordinator, " ".join(args))
    if task is None:
        return f"Rejected: {error}. Usage: /submit <intent>"
    logger.debug("Submitted via /submit task_id=%s", task.id)
    return f"Task {task.id} is {task.status.value}. Check it later with /task {task.id}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task counts by status.")
registry.register("tasks", cmd_tasks, help_text="List recent tasks: /tasks [N|all].")
registry.register("task", cmd_task, help_text="Show one task: /task <id>.")
registry.register(
    "submit", cmd_submit, help_text="Submit without waiting: /submit <intent>."
)

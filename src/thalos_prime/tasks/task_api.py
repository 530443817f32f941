# src/thalos_prime/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .coordinator import Coordinator
from .task_models import InvalidIntentError, Task

logger = logging.getLogger(__name__)


def iso_ts(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def run_intent(
    coordinator: Coordinator,
    intent: str,
    *,
    timeout: float | None = None,
) -> Task:
    """
    Convenience helper: submit an intent and block until it is terminal.

    The front doors that want a synchronous answer (CLI, console) use this;
    execution itself still goes through the coordinator's worker.
    """
    task = coordinator.submit(intent)
    return coordinator.wait_for(task.id, timeout=timeout)


def try_submit(coordinator: Coordinator, intent: str) -> tuple[Task | None, str | None]:
    """Submit without raising on a blank intent; returns (task, error_message)."""
    try:
        return coordinator.submit(intent), None
    except InvalidIntentError as e:
        logger.debug("Rejected intent %r: %s", intent, e)
        return None, str(e)

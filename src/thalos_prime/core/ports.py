# src/thalos_prime/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The coordinator depends on Protocols instead of concrete implementations,
so the store and the processing step stay swappable in tests.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from ..tasks.task_models import Task, TaskStatus, TaskSummary


class IntentProcessor(Protocol):
    """Turns an intent into a result string; raises on failure."""

    def process(self, intent: str) -> str: ...


class TaskRepo(Protocol):
    def create(self, intent: str, metadata: Mapping[str, Any] | None = None) -> Task: ...
    def get(self, task_id: str) -> Task | None: ...
    def require(self, task_id: str) -> Task: ...
    def list_tasks(self, limit: int | None = None) -> list[Task]: ...
    def transition(
            self,
            task_id: str,
            new_status: TaskStatus,
            *,
            result: str | None = None,
            error: str | None = None,
    ) -> Task: ...
    def summary(self) -> TaskSummary: ...
    def count_tasks(self) -> int: ...

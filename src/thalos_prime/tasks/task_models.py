# src/thalos_prime/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    pending -> running -> completed | failed
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.RUNNING}),
    TaskStatus.RUNNING: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.FAILED: frozenset(),
}


class TaskError(Exception):
    """Base class for task subsystem errors."""


class InvalidIntentError(TaskError, ValueError):
    """Submission rejected: the intent is empty after trimming."""


class TaskNotFoundError(TaskError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class ProcessingError(TaskError):
    """Raised by an intent processor when it cannot produce a result."""


class InvalidTransitionError(TaskError, RuntimeError):
    """A status change that breaks the lifecycle rules (a bug in the caller)."""


class CoordinatorClosedError(TaskError, RuntimeError):
    pass


def freeze_metadata(meta: Mapping[str, Any] | None) -> Mapping[str, Any]:
    """
    Read-only deep copy of caller metadata.

    mappings -> mappingproxy, lists/tuples -> tuple, sets -> frozenset
    """
    if not meta:
        return MappingProxyType({})
    return MappingProxyType({str(k): _freeze_value(v) for k, v in meta.items()})


def _freeze_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze_value(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze_value(v) for v in value)
    return value


def thaw_metadata(value: Any) -> Any:
    """Plain JSON-friendly copy of frozen metadata (mappings -> dict, tuples/sets -> list)."""
    if isinstance(value, Mapping):
        return {k: thaw_metadata(v) for k, v in value.items()}
    if isinstance(value, (tuple, frozenset)):
        return [thaw_metadata(v) for v in value]
    return value


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    intent: str
    status: TaskStatus
    created_at: float
    updated_at: float

    result: str | None = None
    error: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class TaskSummary:
    total: int
    counts: Mapping[TaskStatus, int]


@dataclass(frozen=True, slots=True)
class CoordinatorStatus:
    initialized_at: float
    total: int
    counts: Mapping[TaskStatus, int]

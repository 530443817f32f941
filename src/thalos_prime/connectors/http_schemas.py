# src/thalos_prime/connectors/http_schemas.py

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..tasks.task_api import iso_ts
from ..tasks.task_models import CoordinatorStatus, Task, thaw_metadata


class TaskCreate(BaseModel):
    intent: str = Field(..., description="Free-text task description")
    metadata: dict[str, Any] | None = None


class TaskCreated(BaseModel):
    id: str
    intent: str
    status: str
    created_at: str
    updated_at: str

    @classmethod
    def from_task(cls, task: Task) -> TaskCreated:
        return cls(
            id=task.id,
            intent=task.intent,
            status=task.status.value,
            created_at=iso_ts(task.created_at),
            updated_at=iso_ts(task.updated_at),
        )


class TaskRead(TaskCreated):
    result: str | None = None
    error: str | None = None

    @classmethod
    def from_task(cls, task: Task) -> TaskRead:
        return cls(
            id=task.id,
            intent=task.intent,
            status=task.status.value,
            created_at=iso_ts(task.created_at),
            updated_at=iso_ts(task.updated_at),
            result=task.result,
            error=task.error,
        )


class TaskDetail(TaskRead):
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_task(cls, task: Task) -> TaskDetail:
        base = TaskRead.from_task(task)
        return cls(**base.model_dump(), metadata=thaw_metadata(task.metadata))


class TaskListResponse(BaseModel):
    tasks: list[TaskRead]


class StatusResponse(BaseModel):
    initialized_at: str
    total_tasks: int
    status_breakdown: dict[str, int]

    @classmethod
    def from_status(cls, status: CoordinatorStatus) -> StatusResponse:
        return cls(
            initialized_at=iso_ts(status.initialized_at),
            total_tasks=status.total,
            status_breakdown={s.value: n for s, n in status.counts.items()},
        )


class HealthResponse(BaseModel):
    status: str
    timestamp: str

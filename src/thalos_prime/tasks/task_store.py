# src/thalos_prime/tasks/task_store.py

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from .task_models import (
    ALLOWED_TRANSITIONS,
    InvalidTransitionError,
    Task,
    TaskNotFoundError,
    TaskStatus,
    TaskSummary,
    freeze_metadata,
)

logger = logging.getLogger(__name__)


def _new_task_id() -> str:
    return uuid.uuid4().hex


class TaskStore:
    """
    In-memory task store (process lifetime only).

    Records are frozen dataclasses; every transition swaps in a new instance,
    so whatever a caller holds is a stable snapshot.

    Thread-safety:
    - one store-wide lock guards the map and the insertion counter
    - list/summary scan under the same lock (no running tallies)
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_task_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._tasks: dict[str, Task] = {}
        # Insertion sequence, used as the tie-breaker for equal created_at.
        self._seq: dict[str, int] = {}
        self._next_seq = 0
        logger.info("TaskStore ready (in-memory).")

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create(self, intent: str, metadata: Mapping[str, Any] | None = None) -> Task:
        meta = freeze_metadata(metadata)

        with self._lock:
            task_id = self._id_factory()
            if task_id in self._tasks:
                raise RuntimeError(f"id_factory returned a duplicate id: {task_id}")

            now = self._clock()
            task = Task(
                id=task_id,
                intent=intent,
                status=TaskStatus.PENDING,
                created_at=now,
                updated_at=now,
                metadata=meta,
            )
            self._tasks[task_id] = task
            self._seq[task_id] = self._next_seq
            self._next_seq += 1

        logger.debug("Task created id=%s intent=%r", task_id, intent)
        return task

    def get(self, task_id: str) -> Task | None:
        with self._lock:
            return self._tasks.get(task_id)

    def require(self, task_id: str) -> Task:
        task = self.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def list_tasks(self, limit: int | None = None) -> list[Task]:
        """
        All tasks, newest first.

        Equal created_at values keep the most recently inserted task first.
        """
        with self._lock:
            items = [(task, self._seq[task_id]) for task_id, task in self._tasks.items()]

        items.sort(key=lambda pair: (pair[0].created_at, pair[1]), reverse=True)
        tasks = [task for task, _ in items]
        if limit is not None:
            tasks = tasks[: max(0, int(limit))]
        return tasks

    def transition(
        self,
        task_id: str,
        new_status: TaskStatus,
        *,
        result: str | None = None,
        error: str | None = None,
    ) -> Task:
        """
        Atomically move a task to new_status.

        running   -> neither result nor error
        completed -> result only
        failed    -> error only
        """
        _check_payload(new_status, result, error)

        with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                raise TaskNotFoundError(task_id)

            if new_status not in ALLOWED_TRANSITIONS[current.status]:
                raise InvalidTransitionError(
                    f"Task {task_id}: {current.status.value} -> {new_status.value} is not allowed"
                )

            updated = replace(
                current,
                status=new_status,
                updated_at=max(self._clock(), current.created_at),
                result=result,
                error=error,
            )
            self._tasks[task_id] = updated

        logger.debug("Task %s -> %s", task_id, new_status.value)
        return updated

    def summary(self) -> TaskSummary:
        counts = {status: 0 for status in TaskStatus}
        with self._lock:
            for task in self._tasks.values():
                counts[task.status] += 1
            total = len(self._tasks)
        return TaskSummary(total=total, counts=counts)


def _check_payload(status: TaskStatus, result: str | None, error: str | None) -> None:
    if status == TaskStatus.COMPLETED:
        ok = result is not None and error is None
    elif status == TaskStatus.FAILED:
        ok = error is not None and result is None
    elif status in (TaskStatus.PENDING, TaskStatus.RUNNING):
        ok = result is None and error is None
    else:
        raise InvalidTransitionError(f"Unknown status: {status!r}")

    if not ok:
        raise InvalidTransitionError(
            f"Bad payload for {status.value}: result={result!r} error={error!r}"
        )

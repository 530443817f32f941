# src/thalos_prime/tasks/coordinator.py

from __future__ import annotations

"""
Execution coordinator.

Bridges non-blocking submission with serialized processing:
- submit() records a pending task and enqueues its id, never waiting on work,
- one worker thread drains the queue,
- the execution gate is held for exactly one task's processing at a time.

To stop the worker, call shutdown(); queued tasks are drained first.
"""

import logging
import queue
import threading
import time
from collections.abc import Mapping
from typing import Any

from ..core.ports import IntentProcessor, TaskRepo
from .intent_processor import RuleBasedIntentProcessor
from .task_models import (
    CoordinatorClosedError,
    CoordinatorStatus,
    InvalidIntentError,
    Task,
    TaskStatus,
)
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class Coordinator:
    def __init__(
        self,
        store: TaskRepo | None = None,
        processor: IntentProcessor | None = None,
        *,
        work_delay_seconds: float = 0.0,
    ) -> None:
        self._store: TaskRepo = store if store is not None else TaskStore()
        self._processor: IntentProcessor = (
            processor if processor is not None else RuleBasedIntentProcessor()
        )
        self._work_delay_s = max(0.0, float(work_delay_seconds))

        self.initialized_at = time.time()

        self._gate = threading.Lock()
        self._queue: "queue.Queue[str | None]" = queue.Queue()
        self._closed = False
        self._close_lock = threading.Lock()

        self._worker = threading.Thread(
            target=self._run_worker, name="thalos-coordinator", daemon=True
        )
        self._worker.start()
        logger.info("Coordinator initialized (work_delay=%.2fs).", self._work_delay_s)

    # ---- submission / queries ----

    @property
    def store(self) -> TaskRepo:
        return self._store

    def submit(self, intent: str, metadata: Mapping[str, Any] | None = None) -> Task:
        text = (intent or "").strip()
        if not text:
            raise InvalidIntentError("Intent cannot be empty")

        # Holding _close_lock keeps the stop sentinel behind every accepted id.
        with self._close_lock:
            if self._closed:
                raise CoordinatorClosedError("Coordinator is shut down")
            if not self._worker.is_alive():
                raise CoordinatorClosedError("Coordinator worker is not running")
            task = self._store.create(text, metadata)
            self._queue.put(task.id)

        logger.info("Task submitted: %s - %s", task.id, text)
        return task

    def get(self, task_id: str) -> Task | None:
        return self._store.get(task_id)

    def list_tasks(self, limit: int | None = None) -> list[Task]:
        return self._store.list_tasks(limit)

    def status(self) -> CoordinatorStatus:
        summary = self._store.summary()
        return CoordinatorStatus(
            initialized_at=self.initialized_at,
            total=summary.total,
            counts=summary.counts,
        )

    # ---- waiting / lifecycle ----

    def wait_idle(self) -> None:
        """Block until every queued task has been processed."""
        self._queue.join()

    def wait_for(
        self,
        task_id: str,
        timeout: float | None = None,
        poll_interval: float = 0.02,
    ) -> Task:
        """
        Poll until the task reaches a terminal status.

        Raises TaskNotFoundError for unknown ids, TimeoutError when the
        deadline passes first.
        """
        deadline = None if timeout is None else time.monotonic() + max(0.0, timeout)
        sleep_s = max(0.001, float(poll_interval))

        while True:
            task = self._store.require(task_id)
            if task.status.is_terminal:
                return task
            if deadline is not None and time.monotonic() >= deadline:
                raise TimeoutError(f"Task {task_id} still {task.status.value} after {timeout}s")
            time.sleep(sleep_s)

    @property
    def closed(self) -> bool:
        return self._closed

    def shutdown(self, wait: bool = True) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(None)

        logger.info("Stopping coordinator worker...")
        if wait:
            self._worker.join()
            logger.info("Coordinator stopped.")

    def __enter__(self) -> Coordinator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ---- execution path ----

    def _run_worker(self) -> None:
        logger.debug("Coordinator worker thread started.")
        while True:
            task_id = self._queue.get()
            try:
                if task_id is None:
                    logger.debug("Coordinator worker received stop signal.")
                    return
                self._execute(task_id)
            except Exception:
                logger.exception("Unexpected error while executing task_id=%s", task_id)
            finally:
                self._queue.task_done()

    def _execute(self, task_id: str) -> None:
        with self._gate:
            task = self._store.get(task_id)
            if task is None:
                logger.warning("Task %s vanished before execution; skipping", task_id)
                return
            if task.status != TaskStatus.PENDING:
                logger.warning("Task %s is %s, not pending; skipping", task_id, task.status.value)
                return

            task = self._store.transition(task_id, TaskStatus.RUNNING)
            logger.info("Executing task: %s", task_id)

            try:
                if self._work_delay_s:
                    time.sleep(self._work_delay_s)
                result = self._processor.process(task.intent)
            except BaseException as e:
                # SystemExit and friends raised by a processor fail that task only;
                # the worker keeps draining the queue.
                error = str(e) or type(e).__name__
                self._store.transition(task_id, TaskStatus.FAILED, error=error)
                logger.info("Task failed: %s - %s", task_id, error)
                return

            self._store.transition(task_id, TaskStatus.COMPLETED, result=str(result))
            logger.info("Task completed: %s", task_id)

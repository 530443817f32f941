# tests/test_coordinator.py

from __future__ import annotations

import threading
import time

import pytest

from thalos_prime.tasks.coordinator import Coordinator
from thalos_prime.tasks.intent_processor import CallableIntentProcessor
from thalos_prime.tasks.task_models import (
    CoordinatorClosedError,
    InvalidIntentError,
    ProcessingError,
    TaskNotFoundError,
    TaskStatus,
)
from thalos_prime.tasks.task_store import TaskStore

from .fakes import BlockingProcessor, ExplodingProcessor, RecordingProcessor


def test_submit_returns_pending_without_waiting() -> None:
    processor = BlockingProcessor()
    with Coordinator(processor=processor) as coord:
        task = coord.submit("  Hello there  ")
        assert task.status == TaskStatus.PENDING
        assert task.intent == "Hello there"

        assert processor.started.wait(timeout=2.0)
        running = coord.get(task.id)
        assert running is not None
        assert running.status == TaskStatus.RUNNING

        processor.release()
        done = coord.wait_for(task.id, timeout=2.0)
        assert done.status == TaskStatus.COMPLETED
        assert done.result == "done:Hello there"


@pytest.mark.parametrize("intent", ["", "   ", "\n\t"])
def test_blank_intent_rejected_and_nothing_created(coordinator: Coordinator, intent: str) -> None:
    before = coordinator.status().total
    with pytest.raises(InvalidIntentError):
        coordinator.submit(intent)
    assert coordinator.status().total == before
    assert coordinator.list_tasks() == []


def test_submitted_ids_are_unique(coordinator: Coordinator) -> None:
    ids = {coordinator.submit(f"intent {i}").id for i in range(100)}
    assert len(ids) == 100


def test_hello_scenario_completes_with_greeting(coordinator: Coordinator) -> None:
    task = coordinator.submit("Hello there")
    done = coordinator.wait_for(task.id, timeout=5.0)

    assert done.status == TaskStatus.COMPLETED
    assert "Thalos Prime" in (done.result or "")
    assert done.error is None


def test_analyze_scenario_echoes_subject(coordinator: Coordinator) -> None:
    task = coordinator.submit("Analyze X")
    done = coordinator.wait_for(task.id, timeout=5.0)

    assert done.status == TaskStatus.COMPLETED
    assert "X" in (done.result or "")


def test_processing_fault_marks_task_failed() -> None:
    with Coordinator(processor=ExplodingProcessor(ProcessingError("boom"))) as coord:
        task = coord.submit("anything")
        done = coord.wait_for(task.id, timeout=5.0)

        assert done.status == TaskStatus.FAILED
        assert done.error == "boom"
        assert done.result is None


def test_fault_without_message_uses_exception_name() -> None:
    with Coordinator(processor=ExplodingProcessor(KeyError())) as coord:
        done = coord.wait_for(coord.submit("x").id, timeout=5.0)
        assert done.status == TaskStatus.FAILED
        assert done.error == "KeyError"


def test_failure_does_not_block_later_tasks() -> None:
    def fn(intent: str) -> str:
        if intent == "bad":
            raise ValueError("bad input")
        return intent.upper()

    with Coordinator(processor=CallableIntentProcessor(fn)) as coord:
        bad = coord.submit("bad")
        good = coord.submit("good")
        coord.wait_idle()

        assert coord.get(bad.id).status == TaskStatus.FAILED  # type: ignore[union-attr]
        good_done = coord.get(good.id)
        assert good_done is not None
        assert good_done.status == TaskStatus.COMPLETED
        assert good_done.result == "GOOD"


def test_system_exit_from_processor_fails_task_and_worker_survives() -> None:
    def fn(intent: str) -> str:
        if intent == "die":
            raise SystemExit()
        return intent.upper()

    with Coordinator(processor=CallableIntentProcessor(fn)) as coord:
        bad = coord.submit("die")
        good = coord.submit("fine")
        coord.wait_idle()

        bad_done = coord.get(bad.id)
        assert bad_done is not None
        assert bad_done.status == TaskStatus.FAILED
        assert bad_done.error == "SystemExit"

        good_done = coord.get(good.id)
        assert good_done is not None
        assert good_done.status == TaskStatus.COMPLETED
        assert good_done.result == "FINE"

        later = coord.wait_for(coord.submit("again").id, timeout=5.0)
        assert later.status == TaskStatus.COMPLETED


def test_default_processor_simulated_failure(coordinator: Coordinator) -> None:
    done = coordinator.wait_for(coordinator.submit("please simulate failure").id, timeout=5.0)
    assert done.status == TaskStatus.FAILED
    assert "Simulated failure" in (done.error or "")


def test_at_most_one_running_under_concurrent_submission() -> None:
    processor = RecordingProcessor(delay_s=0.01)
    store = TaskStore()
    coord = Coordinator(store=store, processor=processor)

    stop_sampling = threading.Event()
    max_running_seen = 0

    def sampler() -> None:
        nonlocal max_running_seen
        while not stop_sampling.is_set():
            running = sum(1 for t in store.list_tasks() if t.status == TaskStatus.RUNNING)
            max_running_seen = max(max_running_seen, running)
            time.sleep(0.001)

    sampler_thread = threading.Thread(target=sampler)
    sampler_thread.start()

    def submitter(n: int) -> None:
        for i in range(5):
            coord.submit(f"submitter {n} intent {i}")

    submitters = [threading.Thread(target=submitter, args=(n,)) for n in range(6)]
    for t in submitters:
        t.start()
    for t in submitters:
        t.join()

    coord.wait_idle()
    stop_sampling.set()
    sampler_thread.join()
    coord.shutdown()

    assert processor.max_active == 1
    assert max_running_seen <= 1
    summary = coord.status()
    assert summary.total == 30
    assert summary.counts[TaskStatus.COMPLETED] == 30


def test_status_sequence_is_monotonic() -> None:
    processor = RecordingProcessor(delay_s=0.02)
    with Coordinator(processor=processor) as coord:
        task = coord.submit("watch me")
        seen: list[TaskStatus] = []
        deadline = time.monotonic() + 5.0
        while time.monotonic() < deadline:
            current = coord.get(task.id)
            assert current is not None
            if not seen or seen[-1] != current.status:
                seen.append(current.status)
            if current.status.is_terminal:
                break
            time.sleep(0.001)

    order = [TaskStatus.PENDING, TaskStatus.RUNNING, TaskStatus.COMPLETED]
    assert seen[-1] == TaskStatus.COMPLETED
    assert [s for s in order if s in seen] == seen


def test_status_reports_initialized_at_once(coordinator: Coordinator) -> None:
    first = coordinator.status()
    coordinator.wait_for(coordinator.submit("hi").id, timeout=5.0)
    second = coordinator.status()

    assert first.initialized_at == second.initialized_at == coordinator.initialized_at
    assert first.total == 0
    assert second.total == 1
    assert second.counts[TaskStatus.COMPLETED] == 1


def test_get_unknown_returns_none(coordinator: Coordinator) -> None:
    assert coordinator.get("nonexistent-id") is None
    with pytest.raises(TaskNotFoundError):
        coordinator.wait_for("nonexistent-id", timeout=0.1)


def test_wait_for_times_out_while_blocked() -> None:
    processor = BlockingProcessor()
    coord = Coordinator(processor=processor)
    task = coord.submit("slow")
    try:
        with pytest.raises(TimeoutError):
            coord.wait_for(task.id, timeout=0.05)
    finally:
        processor.release()
        coord.shutdown()


def test_shutdown_drains_queue_then_rejects_submissions() -> None:
    processor = RecordingProcessor(delay_s=0.005)
    coord = Coordinator(processor=processor)
    tasks = [coord.submit(f"t{i}") for i in range(5)]

    coord.shutdown()
    coord.shutdown()  # idempotent

    assert coord.closed
    for t in tasks:
        current = coord.get(t.id)
        assert current is not None
        assert current.status == TaskStatus.COMPLETED
    with pytest.raises(CoordinatorClosedError):
        coord.submit("late")

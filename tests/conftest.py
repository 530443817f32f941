# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from thalos_prime.core.state import AppState
from thalos_prime.tasks.coordinator import Coordinator
from thalos_prime.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the front doors.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="Thalos Test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        http_host="127.0.0.1",
        http_port=8000,
        work_delay_seconds=0.0,
        wait_timeout_seconds=5.0,
        recent_tasks_limit=10,
    )


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def coordinator(store: TaskStore) -> Iterator[Coordinator]:
    """Coordinator with the default rule-based processor; shut down after the test."""
    coord = Coordinator(store=store)
    yield coord
    coord.shutdown()


@pytest.fixture()
def state(settings: SimpleNamespace, coordinator: Coordinator) -> AppState:
    return AppState(settings=settings, coordinator=coordinator)

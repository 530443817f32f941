# src/thalos_prime/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires store, processor and coordinator into AppState,
- tears the coordinator down on exit.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import IntentProcessor
from ..core.state import AppState
from ..tasks.coordinator import Coordinator
from ..tasks.intent_processor import RuleBasedIntentProcessor
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, processor: IntentProcessor | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    coordinator = Coordinator(
        store=TaskStore(),
        processor=processor or RuleBasedIntentProcessor(),
        work_delay_seconds=float(getattr(settings, "work_delay_seconds", 0.0)),
    )
    return AppState(settings=settings, coordinator=coordinator)


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.coordinator.shutdown()
    except Exception:
        logger.exception("Coordinator shutdown failed.")

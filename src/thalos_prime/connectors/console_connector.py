# src/thalos_prime/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import run_intent
from ..tasks.task_models import InvalidIntentError, Task, TaskStatus

logger = logging.getLogger(__name__)

EXIT_WORDS = ("/exit", "/quit", "exit", "quit", "q")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def print_outcome(task: Task) -> None:
    if task.status == TaskStatus.COMPLETED:
        _print_ts("✓ Completed")
        print(f"Result: {task.result}\n")
    else:
        _print_ts("✗ Failed")
        print(f"Error: {task.error}\n")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "Thalos Prime"))
    timeout = float(getattr(state.settings, "wait_timeout_seconds", 30.0))

    _print_ts(f"[CONSOLE] {app_name} interactive mode.")
    _print_ts("[CONSOLE] Type an intent to run it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("Intent> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            print("\nGoodbye!")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print("\nInterrupted. Goodbye!")
            break

        if not user_input:
            continue

        if user_input.lower() in EXIT_WORDS:
            logger.info("Console exit command received.")
            print("Goodbye!")
            break

        # Commands (/help, /tasks, ...)
        try:
            cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            continue

        try:
            task = run_intent(state.coordinator, user_input, timeout=timeout)
        except InvalidIntentError as e:
            _print_ts(f"Rejected: {e}")
            continue
        except TimeoutError as e:
            _print_ts(f"Still running: {e}. Check later with /tasks.")
            continue

        _print_ts(f"Task ID: {task.id}")
        print_outcome(task)

    logger.info("Console connector finished.")

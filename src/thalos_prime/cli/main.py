# src/thalos_prime/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs one front door:
- a single intent given on the command line,
- --status,
- --interactive console REPL,
- --serve HTTP API.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..cli.commands import format_status
from ..config import get_settings
from ..connectors.console_connector import print_outcome, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_api import run_intent
from ..tasks.task_models import InvalidIntentError, TaskStatus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thalos-prime",
        description="Thalos Prime - task intake and execution CLI",
    )
    parser.add_argument("intent", nargs="*", help="Task intent to execute")
    parser.add_argument("--status", action="store_true", help="Show task status summary")
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Enter interactive mode"
    )
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API")
    parser.add_argument("--host", default=None, help="HTTP bind host (with --serve)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (with --serve)")
    return parser


def run_single_intent(state: AppState, intent: str) -> int:
    timeout = float(getattr(state.settings, "wait_timeout_seconds", 30.0))
    print(f"Submitting task: {intent}")
    try:
        task = run_intent(state.coordinator, intent, timeout=timeout)
    except InvalidIntentError as e:
        print(f"Rejected: {e}", file=sys.stderr)
        return EXIT_INVALID
    except TimeoutError as e:
        print(f"Gave up waiting: {e}", file=sys.stderr)
        return EXIT_FAILED

    print(f"Task ID: {task.id}")
    print_outcome(task)
    return EXIT_OK if task.status == TaskStatus.COMPLETED else EXIT_FAILED


def run(args: argparse.Namespace, state: AppState) -> int:
    if args.status:
        print(format_status(state))
        return EXIT_OK

    if args.serve:
        from ..connectors.http_api import serve

        serve(state, host=args.host, port=args.port)
        return EXIT_OK

    if args.interactive:
        run_console_loop(state)
        return EXIT_OK

    if args.intent:
        return run_single_intent(state, " ".join(args.intent))

    build_parser().print_help()
    return EXIT_FAILED


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    try:
        return run(args, state)
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    sys.exit(main())

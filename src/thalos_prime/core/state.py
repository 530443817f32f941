# src/thalos_prime/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.coordinator import Coordinator


@dataclass
class AppState:
    # Settings object (real Settings or a test stand-in with the same attributes).
    settings: object

    coordinator: Coordinator

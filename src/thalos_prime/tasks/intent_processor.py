# src/thalos_prime/tasks/intent_processor.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .task_models import ProcessingError

FAILURE_MARKER = "simulate failure"

GREETING = "Hello! I am Thalos Prime, a cognitive intelligence system. How can I assist you?"
WEATHER_DISCLAIMER = (
    "I apologize, but I don't have access to real-time weather data. "
    "This is a demonstration CIS system."
)
CALCULATION_ACK = "I have processed your calculation request. This is a demonstration response."


@dataclass(frozen=True, slots=True)
class IntentRule:
    keywords: tuple[str, ...]
    template: str

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)

    def render(self, intent: str) -> str:
        return self.template.replace("{intent}", intent)


DEFAULT_RULES: tuple[IntentRule, ...] = (
    IntentRule(("hello", "hi"), GREETING),
    IntentRule(("weather",), WEATHER_DISCLAIMER),
    IntentRule(("calculate", "compute"), CALCULATION_ACK),
    IntentRule(
        ("analyze",),
        'Analysis complete: I have analyzed your request "{intent}" '
        "and generated this demonstration response.",
    ),
)

DEFAULT_TEMPLATE = (
    'I have processed your request: "{intent}". '
    "This is a demonstration of the CIS processing capability."
)


class RuleBasedIntentProcessor:
    """
    Deterministic intent processor used when nothing smarter is plugged in.

    Behavior:
    - intents containing "simulate failure" -> ProcessingError
    - first rule whose keyword is a case-insensitive substring wins
    - otherwise the default template echoes the intent
    """

    def __init__(
        self,
        rules: tuple[IntentRule, ...] = DEFAULT_RULES,
        default_template: str = DEFAULT_TEMPLATE,
    ) -> None:
        self._rules = tuple(rules)
        self._default = IntentRule((), default_template)

    def process(self, intent: str) -> str:
        text = str(intent or "")
        lowered = text.lower()

        if FAILURE_MARKER in lowered:
            raise ProcessingError(f"Simulated failure requested by intent: {text!r}")

        for rule in self._rules:
            if rule.matches(lowered):
                return rule.render(text)
        return self._default.render(text)


class CallableIntentProcessor:
    """Adapts a plain `str -> str` function to the IntentProcessor port."""

    def __init__(self, fn: Callable[[str], str]) -> None:
        self._fn = fn

    def process(self, intent: str) -> str:
        return str(self._fn(intent))

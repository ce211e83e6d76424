"""Text suggestions for the add-task form: a tidier description and a duration guess.

The language model is an optional helper. Every failure path falls back to
what the user already typed (or the default duration) and is only logged.
"""

import json
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from focusflow.core.config import settings
from focusflow.suggest.provider import ollama_generate

logger = logging.getLogger(__name__)

REFINE_PROMPT = (
    "Please refine this task description to be more actionable and professional.\n"
    "Task Title: {title}\n"
    "Current Description: {description}\n"
    "Keep it under 30 words. Reply with the description only."
)

DURATION_PROMPT = (
    'How many minutes should a task titled "{title}" realistically take? '
    'Reply with JSON of the form {{"minutes": <number>}}.'
)


@dataclass(frozen=True)
class Suggestion:
    """Result of ``TextSuggester.optimize``."""
    description: str
    minutes: int

    @property
    def hours_minutes(self) -> tuple[int, int]:
        """Split into (hours, minutes) the way the form fields take them."""
        return divmod(self.minutes, 60)


class TextSuggester:
    """Wraps a ``generate(prompt, fmt=None) -> str`` callable."""

    def __init__(
        self,
        generate: Callable[..., str] = ollama_generate,
        default_minutes: int = settings.DEFAULT_SUGGESTED_MINUTES,
    ):
        self.generate = generate
        self.default_minutes = default_minutes

    def refine_description(self, title: str, description: str = "") -> str:
        """Ask for a sharper description. Empty output keeps the original."""
        text = self.generate(REFINE_PROMPT.format(title=title, description=description or ""))
        text = (text or "").strip()
        return text or description

    def suggest_duration(self, title: str) -> int:
        """Suggested whole minutes for ``title``; the default when the reply is unusable."""
        raw = self.generate(DURATION_PROMPT.format(title=title), fmt="json")
        return self.parse_minutes(raw)

    def parse_minutes(self, raw: Optional[str]) -> int:
        try:
            data = json.loads(raw or "")
        except json.JSONDecodeError:
            logger.debug("Duration reply is not JSON: %r", raw)
            return self.default_minutes
        minutes = data.get("minutes") if isinstance(data, dict) else None
        if isinstance(minutes, bool) or not isinstance(minutes, (int, float)) or minutes <= 0:
            return self.default_minutes
        return max(1, round(minutes))

    def optimize(self, title: str, description: str = "", minutes: int = 0) -> Suggestion:
        """Refine description and suggest a duration together.

        If either call fails the user's own ``description`` and ``minutes`` come
        back unchanged.
        """
        unchanged = Suggestion(description=description, minutes=minutes)
        if not (title or "").strip():
            return unchanged
        try:
            refined = self.refine_description(title, description)
            suggested = self.suggest_duration(title)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Suggestion service failed for %r: %s", title, e)
            return unchanged
        return Suggestion(description=refined, minutes=suggested)

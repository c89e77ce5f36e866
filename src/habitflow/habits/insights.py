"""
Insight generation — an LLM's read on the user's habit setup.

Sends the habit definitions (never the logs) to a chat model via LiteLLM and
returns its free-form analysis.  The statistics engine is not involved.

Requires litellm (``pip install habitflow[insights]``).  The provider API key
is read by litellm from the usual environment variable (``OPENAI_API_KEY``,
``ANTHROPIC_API_KEY``, ...).
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from loguru import logger

from habitflow.core.exceptions import InsightError

from .models import Habit

SYSTEM_PROMPT = """\
You are an analytical assistant embedded in a habit tracking app.

YOUR ROLE:
Explain patterns in user behavior clearly and honestly.

TONE:
- Calm
- Direct
- Neutral
- Analytical

DO:
- Point out repeated failures
- Explain likely causes
- Suggest structural changes
- Reference real data

DO NOT:
- Encourage blindly
- Use motivational language
- Praise effort without evidence
- Soften conclusions

EXAMPLE RESPONSE:
"Your sleep habit fails mainly on weekends.
The data suggests lack of routine, not motivation, is the issue.
Consider a lighter weekend target."

If data is insufficient:
Say that clearly.
"""

USER_PROMPT_TEMPLATE = """\
Here is the user's habit data:
{habits_json}

Analyze this data and provide insights based on the patterns you see.
"""


def build_messages(habits: Sequence[Habit]) -> list[dict[str, str]]:
    """System + user messages for a snapshot of habits."""
    habits_json = json.dumps([h.to_dict() for h in habits], indent=2)
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(habits_json=habits_json)},
    ]


def _message_content(response: Any) -> str:
    """Pull the text out of a chat completion, tolerating malformed responses."""
    choices = getattr(response, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    return content if isinstance(content, str) else ""


class InsightService:
    """Ask a chat model for an honest analysis of the user's habits.

    Example::

        service = InsightService(model="gpt-4o-mini")
        text = service.generate(store.list_habits())
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        timeout: int = 60,
        num_retries: int = 2,
    ):
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.num_retries = num_retries

    @classmethod
    def from_config(cls, config) -> InsightService:
        """Build from the ``insights.*`` section of a Config."""
        section = config.validated().insights
        return cls(
            model=section.model,
            temperature=section.temperature,
            timeout=section.timeout,
            num_retries=section.num_retries,
        )

    def generate(self, habits: Sequence[Habit]) -> str:
        """Return the model's analysis of ``habits``.

        Raises:
            InsightError: No habits were given, the provider call failed,
                or the model returned no text.
            ImportError: litellm is not installed.
        """
        if not habits:
            raise InsightError("Add some habits first to get insights.")

        try:
            import litellm
        except ImportError:
            raise ImportError("Install insight support with: pip install habitflow[insights]") from None

        logger.debug(f"Requesting insights for {len(habits)} habit(s) from {self.model}")
        try:
            response = litellm.completion(
                model=self.model,
                messages=build_messages(habits),
                temperature=self.temperature,
                timeout=self.timeout,
                num_retries=self.num_retries,
            )
        except Exception as e:
            logger.warning(f"Insight request to {self.model} failed: {e}")
            raise InsightError(f"Failed to analyze habits: {e}") from e

        text = _message_content(response).strip()
        if not text:
            raise InsightError("The insight service returned an empty response.")
        return text

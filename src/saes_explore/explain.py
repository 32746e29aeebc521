"""Natural-language explanations of trace steps.

The cipher never depends on this module: a missing credential or a failed
request turns into a fallback message, never an exception.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import OpenAI

from .config import Settings
from .interfaces import TraceStep
from .utils import state_to_hex

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Please configure your API Key to use AI features."
FAILURE_MESSAGE = "Failed to fetch AI explanation. Please check your API key and try again."
EMPTY_MESSAGE = "No explanation available."

SYSTEM_PROMPT = """You are an expert cryptography professor explaining Simplified AES (S-AES) to a student.
Provide a concise, engaging, and easy-to-understand explanation of what exactly happened in the
given step and why it matters for security (e.g., confusion vs diffusion).
Keep it under 3 sentences if possible. Focus on the transformation.
"""


def build_step_prompt(step: TraceStep, prev_step: Optional[TraceStep] = None) -> str:
    """Summarise a step (and optionally its predecessor) as prompt text."""
    lines = [
        f"Current Step: {step.id.value}",
        f"Description: {step.description}",
        f"Technical Details: {step.details}",
        "",
        f"Current State (Hex): {step.state.hex}",
    ]
    if prev_step is not None:
        lines.append(f"Previous State (Hex): {prev_step.state.hex}")
    if step.key is not None:
        lines.append(f"Round Key Used (Hex): {state_to_hex(step.key)}")
    return "\n".join(lines)


class StepExplainer:
    """Thin wrapper around the OpenAI Responses API for step explanations."""

    def __init__(self, settings: Settings, client: Any = None):
        self.settings = settings
        self.client = client

    def _get_client(self) -> Any:
        if self.client is None:
            self.client = OpenAI(api_key=self.settings.openai_api_key)
        return self.client

    def explain(self, step: TraceStep, prev_step: Optional[TraceStep] = None) -> str:
        if not self.settings.explain_enabled and self.client is None:
            logger.info("Explanation requested without an API key; returning fallback")
            return NOT_CONFIGURED_MESSAGE

        try:
            resp = self._get_client().responses.create(
                model=self.settings.openai_model,
                input=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_step_prompt(step, prev_step)},
                ],
                temperature=self.settings.explain_temperature,
                max_output_tokens=self.settings.explain_max_output_tokens,
            )
            text = getattr(resp, "output_text", "") or ""
        except Exception as e:  # collaborator failures must not reach the caller
            logger.warning("Explanation request for step %r failed: %s", step.id.value, e)
            return FAILURE_MESSAGE

        return text.strip() or EMPTY_MESSAGE


def explain_step(
    step: TraceStep,
    prev_step: Optional[TraceStep] = None,
    *,
    settings: Settings,
    client: Any = None,
) -> str:
    """Explain one trace step; returns fallback text on any failure."""
    return StepExplainer(settings, client=client).explain(step, prev_step)

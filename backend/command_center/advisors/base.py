"""Shared plumbing for the single-shot JSON advisors."""

from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from agents import Agent, ModelSettings, Runner
from pydantic import BaseModel, ValidationError

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class AdvisorError(RuntimeError):
    """Raised when an advisor is disabled, unreachable or returns unusable output."""


_AGENT_CACHE: Dict[Tuple[str, str], Agent[Any]] = {}


def _advisor_agent(name: str, instructions: str, model: str) -> Agent[Any]:
    key = (name, model)
    if key not in _AGENT_CACHE:
        _AGENT_CACHE[key] = Agent(
            name=name,
            instructions=instructions,
            model=model,
            tools=[],
            model_settings=ModelSettings(store=False),
        )
    return _AGENT_CACHE[key]


def run_json_advisor(
    *,
    name: str,
    instructions: str,
    context: Dict[str, Any],
    response_model: Type[ResponseT],
    settings: Optional[Settings] = None,
) -> ResponseT:
    """Send ``context`` to the advisor and validate its JSON reply against ``response_model``."""
    resolved = settings or get_settings()
    if resolved.advisor_mode == "off":
        raise AdvisorError(f"{name} is disabled.")

    agent = _advisor_agent(name, instructions, resolved.agent_model)
    schema = response_model.model_json_schema()
    prompt = (
        "Respond strictly with JSON. Schema:\n"
        f"{json.dumps(schema, ensure_ascii=False, indent=2)}\n\n"
        "CONTEXT:\n"
        f"{json.dumps(context, ensure_ascii=False, indent=2)}"
    )
    started = perf_counter()
    try:
        result = Runner.run_sync(agent, prompt)
    except Exception as exc:  # noqa: BLE001
        raise AdvisorError(f"{name} call failed: {exc}") from exc
    latency_ms = round((perf_counter() - started) * 1000.0, 2)

    try:
        parsed = response_model.model_validate_json(_strip_fences(str(result.final_output)))
    except (ValidationError, json.JSONDecodeError) as exc:
        raise AdvisorError(f"{name} returned invalid payload: {exc}") from exc

    logger.debug("%s succeeded (model=%s, latency_ms=%s)", name, resolved.agent_model, latency_ms)
    return parsed


def _strip_fences(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


__all__ = ["AdvisorError", "run_json_advisor"]

"""Classification of raw tool handler output into one of three result shapes.

Shapes are checked in priority order:

1. an object with a ``value`` key is a structured result
   (value, optional agent, context variables);
2. an object with an ``assistant`` key is a handoff to a new agent;
3. anything else is a plain value, used verbatim if it is a string and
   JSON-serialized otherwise.

Malformed structured or handoff objects degrade to a plain value; they
never raise.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from pydantic import ValidationError

from ..types import Agent, ToolResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlainValue:
    value: str


@dataclass(frozen=True)
class StructuredValue:
    value: str
    context_variables: Dict[str, str] = field(default_factory=dict)
    agent: Any = None  # Optional[Agent]


@dataclass(frozen=True)
class Handoff:
    agent: Agent
    value: str


ClassifiedResult = Union[PlainValue, StructuredValue, Handoff]


def _to_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return json.dumps(raw, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(raw)


def classify_result(raw: Any) -> ClassifiedResult:
    """Pure classification of a handler's return value."""
    if isinstance(raw, ToolResult):
        return StructuredValue(value=raw.value, context_variables=dict(raw.context_variables), agent=raw.agent)
    if isinstance(raw, Agent):
        return Handoff(agent=raw, value=raw.model_dump_json())

    if isinstance(raw, dict) and "value" in raw:
        try:
            result = ToolResult.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"Error parsing tool result, keeping value only: {e}")
            return PlainValue(_to_text(raw["value"]))
        return StructuredValue(value=result.value, context_variables=dict(result.context_variables), agent=result.agent)

    if isinstance(raw, dict) and "assistant" in raw:
        payload = raw["assistant"] if isinstance(raw["assistant"], dict) else raw
        try:
            agent = Agent.model_validate(payload)
        except ValidationError as e:
            logger.debug(f"Error parsing handoff agent, keeping raw object: {e}")
            return PlainValue(_to_text(raw))
        return Handoff(agent=agent, value=_to_text(raw))

    if not isinstance(raw, str):
        logger.debug(f"Failed to cast response to string: {raw!r}")
    return PlainValue(_to_text(raw))


def normalize_result(raw: Any) -> ToolResult:
    """Classify raw handler output and flatten it into a ToolResult."""
    shape = classify_result(raw)
    if isinstance(shape, Handoff):
        return ToolResult(value=shape.value, agent=shape.agent)
    if isinstance(shape, StructuredValue):
        return ToolResult(value=shape.value, agent=shape.agent, context_variables=shape.context_variables)
    return ToolResult(value=shape.value)

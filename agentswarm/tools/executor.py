"""Tool executor: dispatches one turn's tool calls in model order."""
import json
import logging
import time
from typing import Dict, List

from ..config import settings
from ..errors import ToolArgumentsError
from ..types import Response, ToolCall, ToolMessage
from .normalize import normalize_result
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


def _trace(debug: bool, msg: str):
    logger.log(logging.INFO if debug else logging.DEBUG, msg)


def parse_arguments(tool_call: ToolCall) -> dict:
    """Decode a tool call's JSON argument payload; it must be an object."""
    name = tool_call.function.name
    raw = tool_call.function.arguments or "{}"
    try:
        args = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ToolArgumentsError(
            f"Failed to parse arguments for tool {name}: {e}",
            tool_name=name,
            tool_call_id=tool_call.id,
        ) from e
    if not isinstance(args, dict):
        raise ToolArgumentsError(
            f"Arguments for tool {name} must be a JSON object, got {type(args).__name__}",
            tool_name=name,
            tool_call_id=tool_call.id,
        )
    return args


async def execute_tool_calls(
    registry: ToolRegistry,
    tool_calls: List[ToolCall],
    context_variables: Dict[str, str],
    debug: bool = False,
) -> Response:
    """Run every tool call sequentially and collect the turn's partial response.

    Unknown tools and failing handlers become in-band error messages.
    Malformed arguments raise ToolArgumentsError and abort the run.
    Context variable updates are last-write-wins in call order, and the
    last handoff in call order wins.
    """
    partial = Response()

    for tool_call in tool_calls:
        name = tool_call.function.name

        handler = registry.lookup(name)
        if handler is None:
            logger.warning(f"Unknown tool: {name}")
            partial.messages.append(ToolMessage(
                content=f"error: tool {name} not found.",
                tool_call_id=tool_call.id,
            ))
            continue

        try:
            args = parse_arguments(tool_call)
        except ToolArgumentsError as e:
            # Earlier calls of this turn already ran; keep their results
            e.partial_messages = list(partial.messages) + e.partial_messages
            raise
        _trace(debug, f"Processing tool call: {name} with arguments {args}")

        # Handlers see the run's context variables as of the start of this turn
        args[settings.context_variables_key] = dict(context_variables)

        t0 = time.monotonic()
        try:
            raw_result = await handler.invoke(args)
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}", exc_info=True)
            partial.messages.append(ToolMessage(
                content=f"error: tool {name} failed: {e}",
                tool_call_id=tool_call.id,
            ))
            continue
        elapsed = time.monotonic() - t0
        _trace(debug, f"Raw result: {raw_result!r}")

        result = normalize_result(raw_result)
        _trace(debug, f"Tool result: {result!r}")
        logger.info(f"Tool {name}: {elapsed:.2f}s -> {'handoff' if result.agent is not None else 'value'}")

        partial.messages.append(ToolMessage(content=result.value, tool_call_id=tool_call.id))
        partial.context_variables.update(result.context_variables)
        if result.agent is not None:
            partial.agent = result.agent

    return partial

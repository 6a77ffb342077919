"""Swarm orchestrator: the turn loop.

Each turn asks the completion service for the next assistant message,
appends it, and, if it requests tools, dispatches them, merges context
variables and applies any handoff before asking again.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from .errors import CompletionError, SwarmError, UnsupportedModeError
from .llm import CompletionClient, OpenAICompletionClient
from .session import ConversationState
from .tools.executor import execute_tool_calls
from .tools.registry import ToolRegistry
from .types import Agent, AssistantMessage, Response, ToolCall, parse_message

logger = logging.getLogger(__name__)


def _trace(debug: bool, msg: str):
    logger.log(logging.INFO if debug else logging.DEBUG, msg)


class Swarm:
    def __init__(self, client: Optional[CompletionClient] = None, registry: Optional[ToolRegistry] = None):
        """
        Args:
            client: Completion service client. Defaults to an OpenAI client
                configured from settings.
            registry: Tool registry, shareable between Swarm instances.
        """
        self.client: CompletionClient = client or OpenAICompletionClient()
        self.registry = registry if registry is not None else ToolRegistry()

    def register_tool(
        self,
        name: str,
        description: str,
        parameters: Optional[Dict[str, Any]],
        handler: Callable[[Dict[str, Any]], Any],
    ):
        """Register a tool handler. An existing tool of the same name is replaced."""
        return self.registry.register(name, description, parameters, handler)

    def tool(self, name: str, description: str = "", parameters: Optional[Dict[str, Any]] = None):
        """Decorator form of register_tool."""
        return self.registry.tool(name, description, parameters)

    async def get_chat_completion(
        self,
        agent: Agent,
        history: List,
        model_override: Optional[str] = None,
    ) -> AssistantMessage:
        return await self.client.complete(agent, history, model_override)

    async def run(
        self,
        agent: Agent,
        messages: List,
        context_variables: Optional[Dict[str, str]] = None,
        model_override: Optional[str] = None,
        stream: bool = False,
        debug: bool = False,
        max_turns: Optional[int] = None,
        execute_tools: bool = True,
    ) -> Response:
        """
        Drive the conversation until the model stops calling tools.

        Args:
            agent: Agent for the first turn.
            messages: Prior conversation (models or OpenAI-style dicts). Not modified.
            context_variables: Initial shared state passed to tool handlers.
            model_override: Model used instead of the active agent's.
            stream: Streaming is not supported; True raises UnsupportedModeError.
            debug: Log the turn trace at INFO instead of DEBUG.
            max_turns: Cap on messages appended by this run, tool messages
                included. None means unbounded.
            execute_tools: When False, the first tool-calling assistant message
                ends the run and its calls come back unexecuted.

        Returns:
            Response with only the appended messages, the final active agent
            and the merged context variables.

        Raises:
            UnsupportedModeError: stream was requested.
            ToolArgumentsError: a tool call had malformed arguments.
            CompletionError: the completion service failed.
        """
        if stream:
            return self.run_and_stream(
                agent, messages, context_variables, model_override, debug, max_turns, execute_tools,
            )

        state = ConversationState(
            agent,
            [parse_message(m) for m in messages],
            context_variables=context_variables,
            max_turns=max_turns,
        )
        logger.info(f"[{state.run_id}] Run started: agent={agent.name}, "
                    f"{state.init_len} prior messages, max_turns={max_turns}")
        self._check_tools(agent, state.run_id)

        pending: List[ToolCall] = []
        try:
            while state.has_budget():
                completion = await self._complete(state, model_override)
                state.turns += 1
                _trace(debug, f"[{state.run_id}] Received completion: {completion!r}")

                state.append(completion)

                if not completion.has_tool_calls:
                    _trace(debug, f"[{state.run_id}] Ending turn.")
                    break

                if not execute_tools:
                    pending = list(completion.tool_calls)
                    _trace(debug, f"[{state.run_id}] Returning {len(pending)} unexecuted tool calls.")
                    break

                # Tool messages count toward max_turns; calls beyond it stay unexecuted
                calls = completion.tool_calls
                remaining = state.remaining()
                if remaining is not None and remaining < len(calls):
                    calls, pending = calls[:remaining], list(calls[remaining:])
                    logger.info(f"[{state.run_id}] Turn budget reached, "
                                f"{len(pending)} tool calls left unexecuted")

                partial = await execute_tool_calls(
                    self.registry, calls, state.context_variables, debug,
                )
                previous = state.active_agent
                state.merge(partial)
                if state.active_agent is not previous:
                    logger.info(f"[{state.run_id}] Handoff: {previous.name} -> {state.active_agent.name}")
                    self._check_tools(state.active_agent, state.run_id)
        except SwarmError as e:
            e.partial_messages = state.appended + e.partial_messages
            raise

        logger.info(f"[{state.run_id}] Run finished: {state.turns} turns, "
                    f"{len(state.appended)} messages appended, agent={state.active_agent.name}")
        return state.to_response(pending)

    async def _complete(self, state: ConversationState, model_override: Optional[str]) -> AssistantMessage:
        try:
            return await self.get_chat_completion(state.active_agent, state.history, model_override)
        except SwarmError:
            raise
        except Exception as e:
            # Custom clients may raise anything; surface it as a completion failure
            logger.error(f"[{state.run_id}] Completion client failed: {e}", exc_info=True)
            raise CompletionError(f"Completion request failed: {e}") from e

    def _check_tools(self, agent: Agent, run_id: str):
        """Warn about advertised tools the registry can't serve.

        The model is offered `agent.tools` as-is; a call to a name missing
        here comes back as an in-band "not found" error.
        """
        names = [t.name for t in agent.tools]
        registered = {s.name: s for s in self.registry.specs(names)}
        for spec in agent.tools:
            known = registered.get(spec.name)
            if known is None:
                logger.warning(f"[{run_id}] Agent {agent.name} advertises unregistered tool: {spec.name}")
            elif known.parameters and spec.parameters and known.parameters != spec.parameters:
                logger.warning(f"[{run_id}] Agent {agent.name} advertises tool {spec.name} "
                               f"with a schema that differs from the registered one")

    def run_and_stream(
        self,
        agent: Agent,
        messages: List,
        context_variables: Optional[Dict[str, str]] = None,
        model_override: Optional[str] = None,
        debug: bool = False,
        max_turns: Optional[int] = None,
        execute_tools: bool = True,
    ) -> Response:
        raise UnsupportedModeError("Streaming responses are not supported")

    def run_sync(self, agent: Agent, messages: List, **kwargs) -> Response:
        """Blocking wrapper around run() for callers without an event loop."""
        return asyncio.run(self.run(agent, messages, **kwargs))

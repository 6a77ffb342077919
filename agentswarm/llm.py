"""Completion service client: asks an OpenAI-compatible chat API for the next assistant message."""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from .config import settings
from .errors import CompletionError
from .types import Agent, AssistantMessage, FunctionCall, SystemMessage, ToolCall

logger = logging.getLogger(__name__)


class CompletionClient(ABC):
    """The one suspension point of a run: produce the next assistant message."""

    @abstractmethod
    async def complete(
        self,
        agent: Agent,
        history: Sequence,
        model_override: Optional[str] = None,
    ) -> AssistantMessage:
        """
        Request the next assistant message for `agent` given the full history.

        Raises:
            CompletionError: If the request fails or yields no message.
        """
        pass


def build_request(agent: Agent, history: Sequence, model_override: Optional[str] = None) -> dict:
    """Build chat.completions.create kwargs.

    Tools are advertised from `agent.tools`, not from the registry.
    An agent without tools produces a request with no tool fields at all,
    not an empty tools list.
    """
    messages = [SystemMessage(content=agent.instructions).to_openai()]
    messages += [m.to_openai() for m in history]

    request = {
        "model": model_override or agent.model,
        "messages": messages,
        "max_tokens": settings.max_tokens,
    }
    if agent.tools:
        request["tools"] = [t.to_openai() for t in agent.tools]
        request["parallel_tool_calls"] = agent.parallel_tool_calls
        tool_choice = agent.tool_choice_param()
        if tool_choice is not None:
            request["tool_choice"] = tool_choice
    return request


def parse_completion(response, agent_name: Optional[str] = None) -> AssistantMessage:
    if not response.choices:
        raise CompletionError("Completion returned no choices")
    message = response.choices[0].message

    tool_calls: Optional[List[ToolCall]] = None
    if message.tool_calls:
        tool_calls = [
            ToolCall(
                id=tc.id,
                function=FunctionCall(name=tc.function.name, arguments=tc.function.arguments or "{}"),
            )
            for tc in message.tool_calls
        ]

    return AssistantMessage(
        content=message.content,
        tool_calls=tool_calls,
        refusal=getattr(message, "refusal", None),
        sender=agent_name,
    )


class OpenAICompletionClient(CompletionClient):
    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        # Built on first use so a Swarm can be constructed without credentials
        if self._client is None:
            self._client = _get_client()
        return self._client

    async def complete(
        self,
        agent: Agent,
        history: Sequence,
        model_override: Optional[str] = None,
    ) -> AssistantMessage:
        request = build_request(agent, history, model_override)
        logger.debug(f"[{agent.name}] Completion request: model={request['model']}, "
                     f"{len(request['messages'])} messages, {len(request.get('tools', []))} tools")
        try:
            response = await self.client.chat.completions.create(**request)
        except OpenAIError as e:
            logger.error(f"[{agent.name}] Completion request failed: {e}")
            raise CompletionError(f"Completion request failed: {e}") from e
        return parse_completion(response, agent_name=agent.name)


def _get_client() -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=settings.openai_api_key or None,
        base_url=settings.openai_base_url,
        timeout=settings.request_timeout_s,
    )

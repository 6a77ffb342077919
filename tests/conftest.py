"""Shared fixtures: a scripted completion client and tool-call builders."""
import json

import pytest

from agentswarm.llm import CompletionClient
from agentswarm.types import AssistantMessage, FunctionCall, ToolCall


class ScriptedClient(CompletionClient):
    """Replays canned assistant messages and records every request."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def complete(self, agent, history, model_override=None):
        self.calls.append({
            "agent": agent,
            "history": list(history),
            "model": model_override or agent.model,
        })
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_call(call_id, name, args=None, raw=None):
    arguments = raw if raw is not None else json.dumps(args or {})
    return ToolCall(id=call_id, function=FunctionCall(name=name, arguments=arguments))


def text_reply(text):
    return AssistantMessage(content=text)


def tool_reply(*calls):
    return AssistantMessage(tool_calls=list(calls))


@pytest.fixture
def scripted():
    return ScriptedClient


@pytest.fixture
def call():
    return make_call


@pytest.fixture
def reply():
    class _Reply:
        text = staticmethod(text_reply)
        tools = staticmethod(tool_reply)
    return _Reply

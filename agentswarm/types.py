"""Conversation data model: agents, tools, messages and run results."""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter

from .config import settings

# tool_choice keywords understood by the completion service as-is
TOOL_CHOICE_KEYWORDS = ("auto", "required", "none")


class ToolSpec(BaseModel):
    """A tool as advertised to the model: name, description and JSON schema."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)

    def to_openai(self) -> dict:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class Agent(BaseModel):
    """Persona and capabilities that drive the next completion request.

    Agents are never mutated; a handoff replaces the active agent wholesale.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = "Agent"
    model: str = Field(default_factory=lambda: settings.default_model)
    instructions: str = "You are a helpful agent."
    tools: List[ToolSpec] = Field(default_factory=list)
    tool_choice: Optional[str] = None  # None/"auto" | "required" | "none" | <function name>
    parallel_tool_calls: bool = True

    def tool_choice_param(self) -> Optional[Union[str, dict]]:
        """Render tool_choice for the request, or None to leave it unset."""
        if self.tool_choice is None:
            return None
        if self.tool_choice in TOOL_CHOICE_KEYWORDS:
            return self.tool_choice
        return {"type": "function", "function": {"name": self.tool_choice}}


class ToolResult(BaseModel):
    """Normalized outcome of one tool invocation."""
    value: StrictStr = ""
    agent: Optional[Agent] = None
    context_variables: Dict[StrictStr, StrictStr] = Field(default_factory=dict)


# ── Messages ────────────────────────────────────────────

class FunctionCall(BaseModel):
    name: str
    arguments: str = "{}"


class ToolCall(BaseModel):
    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class _MessageBase(BaseModel):
    def to_openai(self) -> dict:
        return self.model_dump(exclude_none=True)


class SystemMessage(_MessageBase):
    role: Literal["system"] = "system"
    content: str


class UserMessage(_MessageBase):
    role: Literal["user"] = "user"
    content: str
    name: Optional[str] = None


class AssistantMessage(_MessageBase):
    role: Literal["assistant"] = "assistant"
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    refusal: Optional[str] = None
    sender: Optional[str] = None  # agent that produced it; never sent to the model

    def to_openai(self) -> dict:
        return self.model_dump(exclude_none=True, exclude={"sender"})

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class ToolMessage(_MessageBase):
    role: Literal["tool"] = "tool"
    content: str
    tool_call_id: str


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, ToolMessage],
    Field(discriminator="role"),
]

_message_adapter = TypeAdapter(Message)


def parse_message(data: Union[dict, BaseModel]):
    """Accept a message model or an OpenAI-style dict."""
    if isinstance(data, (SystemMessage, UserMessage, AssistantMessage, ToolMessage)):
        return data
    return _message_adapter.validate_python(data)


class Response(BaseModel):
    """What a run hands back: only the messages it appended, plus final state."""
    messages: List[Message] = Field(default_factory=list)
    agent: Optional[Agent] = None
    context_variables: Dict[str, str] = Field(default_factory=dict)
    # Filled only when tools were not executed
    pending_tool_calls: List[ToolCall] = Field(default_factory=list)

"""Multi-agent conversation orchestration over an OpenAI-compatible completion API."""
from .config import settings, Settings
from .errors import SwarmError, UnsupportedModeError, ToolArgumentsError, CompletionError
from .types import (
    Agent,
    ToolSpec,
    ToolResult,
    Response,
    ToolCall,
    FunctionCall,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    ToolMessage,
    parse_message,
)
from .tools import ToolRegistry, ToolHandler
from .llm import CompletionClient, OpenAICompletionClient
from .swarm import Swarm

__all__ = [
    'settings', 'Settings',
    'SwarmError', 'UnsupportedModeError', 'ToolArgumentsError', 'CompletionError',
    'Agent', 'ToolSpec', 'ToolResult', 'Response', 'ToolCall', 'FunctionCall',
    'SystemMessage', 'UserMessage', 'AssistantMessage', 'ToolMessage', 'parse_message',
    'ToolRegistry', 'ToolHandler',
    'CompletionClient', 'OpenAICompletionClient',
    'Swarm',
]

"""Tool system: registry, result normalization, executor."""
from .registry import ToolRegistry, ToolHandler, ToolDef
from .normalize import classify_result, normalize_result, PlainValue, StructuredValue, Handoff
from .executor import execute_tool_calls, parse_arguments

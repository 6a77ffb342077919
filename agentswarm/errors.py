"""
Exception hierarchy for orchestration failures.

Only run-aborting conditions are raised. Per-call problems (unknown tool,
failing handler, malformed tool result) are reported to the model in-band
as tool messages instead.
"""
from typing import List, Optional


class SwarmError(Exception):
    """Base exception for all failures that abort a run.

    ``partial_messages`` holds whatever the run had appended to the
    conversation before it failed, so callers can inspect or resume.
    """

    def __init__(self, message: str, partial_messages: Optional[List] = None):
        super().__init__(message)
        self.partial_messages = list(partial_messages or [])


class UnsupportedModeError(SwarmError):
    """Raised when streaming delivery is requested."""

    pass


class ToolArgumentsError(SwarmError):
    """Raised when a tool call carries arguments that are not a JSON object."""

    def __init__(
        self,
        message: str,
        tool_name: str = "",
        tool_call_id: str = "",
        partial_messages: Optional[List] = None,
    ):
        super().__init__(message, partial_messages)
        self.tool_name = tool_name
        self.tool_call_id = tool_call_id


class CompletionError(SwarmError):
    """Raised when the completion service request fails."""

    pass

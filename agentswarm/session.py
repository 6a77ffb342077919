"""Per-run conversation state."""
import uuid
from typing import Dict, List, Optional

from .types import Agent, Response


class ConversationState:
    """State owned by exactly one `Swarm.run` invocation.

    Holds a private copy of the history so concurrent runs never share a
    buffer, plus the active agent and the merged context variables.
    """

    def __init__(
        self,
        agent: Agent,
        messages: List,
        context_variables: Optional[Dict[str, str]] = None,
        max_turns: Optional[int] = None,
    ):
        self.run_id = str(uuid.uuid4())[:8]
        self.active_agent = agent
        self.history: List = list(messages)
        self.init_len = len(self.history)
        self.context_variables: Dict[str, str] = dict(context_variables or {})
        self.max_turns = max_turns
        self.turns = 0  # model round-trips

    @property
    def appended(self) -> List:
        """Messages appended since the run started."""
        return self.history[self.init_len:]

    def remaining(self) -> Optional[int]:
        """Messages this run may still append, or None when unbounded."""
        if self.max_turns is None:
            return None
        return max(self.max_turns - (len(self.history) - self.init_len), 0)

    def has_budget(self) -> bool:
        """True while fewer than `max_turns` messages have been appended."""
        remaining = self.remaining()
        return remaining is None or remaining > 0

    def append(self, message):
        self.history.append(message)

    def merge(self, partial: Response):
        """Fold one turn's tool dispatch into the run state."""
        self.history.extend(partial.messages)
        self.context_variables.update(partial.context_variables)
        if partial.agent is not None:
            self.active_agent = partial.agent

    def to_response(self, pending_tool_calls=None) -> Response:
        return Response(
            messages=self.appended,
            agent=self.active_agent,
            context_variables=dict(self.context_variables),
            pending_tool_calls=list(pending_tool_calls or []),
        )

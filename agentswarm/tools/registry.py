"""Tool registry: name → (advertised spec, invocable handler)."""
import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..types import ToolSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolHandler:
    """Shareable handle to a tool implementation.

    Wraps a sync or async callable taking the parsed arguments dict.
    """
    name: str
    func: Callable[[Dict[str, Any]], Any]

    async def invoke(self, args: Dict[str, Any]) -> Any:
        if inspect.iscoroutinefunction(self.func):
            return await self.func(args)
        # Sync handlers run in the default thread pool so other runs sharing the loop keep going
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, self.func, args)
        if inspect.isawaitable(result):
            result = await result
        return result


@dataclass(frozen=True)
class ToolDef:
    spec: ToolSpec
    handler: ToolHandler


class ToolRegistry:
    """Thread-safe tool table shared by every conversation of one Swarm.

    Registering an existing name replaces the previous entry (last
    registration wins). Lookups return the handler without holding the
    lock during invocation.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDef] = {}
        self._lock = threading.RLock()

    def register(
        self,
        name: str,
        description: str,
        parameters: Optional[Dict[str, Any]],
        handler: Callable[[Dict[str, Any]], Any],
    ) -> ToolSpec:
        spec = ToolSpec(name=name, description=description, parameters=parameters or {})
        tool = ToolDef(spec=spec, handler=ToolHandler(name=name, func=handler))
        with self._lock:
            replaced = name in self._tools
            self._tools[name] = tool
        if replaced:
            logger.warning(f"Tool {name} re-registered, previous handler replaced")
        else:
            logger.info(f"Registered tool: {name}")
        return spec

    def tool(self, name: str, description: str = "", parameters: Optional[Dict[str, Any]] = None):
        """Decorator to register a tool function."""
        def decorator(func):
            self.register(name, description or func.__doc__ or "", parameters, func)
            return func
        return decorator

    def lookup(self, name: str) -> Optional[ToolHandler]:
        with self._lock:
            tool = self._tools.get(name)
        return tool.handler if tool else None

    def get_spec(self, name: str) -> Optional[ToolSpec]:
        with self._lock:
            tool = self._tools.get(name)
        return tool.spec if tool else None

    def specs(self, names: Optional[Iterable[str]] = None) -> List[ToolSpec]:
        """Specs in registration order, optionally restricted to `names` (in that order)."""
        with self._lock:
            if names is None:
                return [t.spec for t in self._tools.values()]
            return [self._tools[n].spec for n in names if n in self._tools]

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._tools

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)

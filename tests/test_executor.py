"""Tests for tools/executor.py: sequential dispatch of one turn."""
import pytest

from agentswarm.errors import ToolArgumentsError
from agentswarm.tools.executor import execute_tool_calls, parse_arguments
from agentswarm.tools.registry import ToolRegistry
from agentswarm.types import ToolMessage


@pytest.fixture
def registry():
    reg = ToolRegistry()
    reg.register("get_weather", "Get the weather", None,
                 lambda args: {"temp": 67, "unit": "F", "location": args.get("location", "Unknown")})
    return reg


class TestParseArguments:
    def test_valid_object(self, call):
        assert parse_arguments(call("c1", "t", {"x": 1})) == {"x": 1}

    def test_empty_payload_is_empty_object(self, call):
        assert parse_arguments(call("c1", "t", raw="")) == {}

    def test_malformed_json(self, call):
        with pytest.raises(ToolArgumentsError) as exc:
            parse_arguments(call("c9", "get_weather", raw="{location: Boston"))
        assert exc.value.tool_name == "get_weather"
        assert exc.value.tool_call_id == "c9"

    def test_non_object_json(self, call):
        with pytest.raises(ToolArgumentsError):
            parse_arguments(call("c1", "t", raw="[1, 2]"))


class TestExecuteToolCalls:
    @pytest.mark.asyncio
    async def test_single_call(self, registry, call):
        partial = await execute_tool_calls(registry, [call("c1", "get_weather", {"location": "Boston"})], {})
        assert len(partial.messages) == 1
        msg = partial.messages[0]
        assert isinstance(msg, ToolMessage)
        assert msg.tool_call_id == "c1"
        assert '"location": "Boston"' in msg.content
        assert partial.agent is None

    @pytest.mark.asyncio
    async def test_messages_follow_call_order(self, registry, call):
        calls = [call("c1", "get_weather", {"location": "Boston"}),
                 call("c2", "get_weather", {"location": "Atlanta"})]
        partial = await execute_tool_calls(registry, calls, {})
        assert [m.tool_call_id for m in partial.messages] == ["c1", "c2"]
        assert "Atlanta" in partial.messages[1].content

    @pytest.mark.asyncio
    async def test_context_variables_injected(self, call):
        seen = {}
        reg = ToolRegistry()
        reg.register("whoami", "", None, lambda args: seen.update(args) or "ok")
        await execute_tool_calls(reg, [call("c1", "whoami", {"a": 1})], {"user": "ada"})
        assert seen == {"a": 1, "context_variables": {"user": "ada"}}

    @pytest.mark.asyncio
    async def test_injected_map_is_a_copy(self, call):
        reg = ToolRegistry()

        def meddle(args):
            args["context_variables"]["user"] = "mallory"
            return "ok"

        reg.register("meddle", "", None, meddle)
        ctx = {"user": "ada"}
        await execute_tool_calls(reg, [call("c1", "meddle")], ctx)
        assert ctx == {"user": "ada"}

    @pytest.mark.asyncio
    async def test_unknown_tool_is_in_band_error(self, registry, call):
        calls = [call("c1", "launch_rockets"), call("c2", "get_weather", {"location": "Boston"})]
        partial = await execute_tool_calls(registry, calls, {})
        assert len(partial.messages) == 2
        assert partial.messages[0].tool_call_id == "c1"
        assert "not found" in partial.messages[0].content
        assert "launch_rockets" in partial.messages[0].content
        assert "Boston" in partial.messages[1].content

    @pytest.mark.asyncio
    async def test_unknown_tool_with_bad_arguments_is_not_fatal(self, registry, call):
        partial = await execute_tool_calls(registry, [call("c1", "nope", raw="{{{")], {})
        assert "not found" in partial.messages[0].content

    @pytest.mark.asyncio
    async def test_malformed_arguments_raise(self, registry, call):
        with pytest.raises(ToolArgumentsError):
            await execute_tool_calls(registry, [call("c1", "get_weather", raw="not json")], {})

    @pytest.mark.asyncio
    async def test_malformed_arguments_carry_earlier_results(self, registry, call):
        calls = [call("c1", "get_weather", {"location": "Boston"}), call("c2", "get_weather", raw="[1")]
        with pytest.raises(ToolArgumentsError) as exc:
            await execute_tool_calls(registry, calls, {})
        assert [m.tool_call_id for m in exc.value.partial_messages] == ["c1"]

    @pytest.mark.asyncio
    async def test_failing_handler_is_in_band_error(self, call):
        reg = ToolRegistry()

        def boom(args):
            raise RuntimeError("disk full")

        reg.register("boom", "", None, boom)
        reg.register("fine", "", None, lambda args: "fine")
        partial = await execute_tool_calls(reg, [call("c1", "boom"), call("c2", "fine")], {})
        assert partial.messages[0].content == "error: tool boom failed: disk full"
        assert partial.messages[1].content == "fine"

    @pytest.mark.asyncio
    async def test_async_handler(self, call):
        reg = ToolRegistry()

        async def lookup(args):
            return {"value": "found", "context_variables": {"hit": "yes"}}

        reg.register("lookup", "", None, lookup)
        partial = await execute_tool_calls(reg, [call("c1", "lookup")], {})
        assert partial.messages[0].content == "found"
        assert partial.context_variables == {"hit": "yes"}

    @pytest.mark.asyncio
    async def test_context_variables_last_write_wins(self, call):
        reg = ToolRegistry()
        reg.register("set", "", None,
                     lambda args: {"value": "set", "context_variables": {"units": args["units"]}})
        calls = [call("c1", "set", {"units": "C"}), call("c2", "set", {"units": "F"})]
        partial = await execute_tool_calls(reg, calls, {})
        assert partial.context_variables == {"units": "F"}

    @pytest.mark.asyncio
    async def test_last_handoff_wins(self, call):
        reg = ToolRegistry()
        reg.register("transfer", "", None, lambda args: {"assistant": {"name": args["to"]}})
        calls = [call("c1", "transfer", {"to": "Sales"}), call("c2", "transfer", {"to": "Support"})]
        partial = await execute_tool_calls(reg, calls, {})
        assert partial.agent.name == "Support"
        assert len(partial.messages) == 2

"""Tests for the bounded tool-call loop."""

import asyncio
import json
import os

import pytest

from flemoji_ai.agents.loop import execute_tool_call_loop, extract_text_content
from flemoji_ai.agents.tools.registry import ToolArgs, ToolRegistry
from flemoji_ai.config import MAX_TOOL_ITERATIONS, TOOL_RESULT_CHAR_LIMIT
from tests.conftest import FakeChatModel, calls, text, tool_call


class EchoArgs(ToolArgs):
    value: str


async def echo(args: EchoArgs):
    return {"echo": args.value}


async def explode(args: EchoArgs):
    raise RuntimeError("catalog offline")


async def huge(args: EchoArgs):
    return "x" * (TOOL_RESULT_CHAR_LIMIT + 500)


async def as_json_string(args: EchoArgs):
    return json.dumps({"wrapped": args.value})


@pytest.fixture
def tools():
    registry = ToolRegistry()
    registry.register("echo", echo, EchoArgs, "Echo a value")
    registry.register("explode", explode, EchoArgs, "Always fails")
    registry.register("huge", huge, EchoArgs, "Large output")
    registry.register("as_json_string", as_json_string, EchoArgs, "JSON string output")
    return registry


def run(model, tools, max_iterations=5):
    messages = [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}]
    return asyncio.run(execute_tool_call_loop(
        model=model, tools=tools, messages=messages, max_iterations=max_iterations,
    ))


class TestExecuteToolCallLoop:

    def test_text_reply_ends_loop(self, tools):
        result = run(FakeChatModel([text("All done")]), tools)
        assert result.iterations == 1
        assert result.tool_execution_truncated is False
        assert result.tool_results == []
        assert extract_text_content(result.final_message.content) == "All done"

    def test_tool_results_are_recorded_and_fed_back(self, tools):
        model = FakeChatModel([calls(tool_call("echo", "c1", value="a")), text("ok")])
        result = run(model, tools)

        assert result.iterations == 2
        [tr] = result.tool_results
        assert tr.tool_call_id == "c1"
        assert tr.parsed_result == {"echo": "a"}
        assert tr.error is None

        second_round = model.calls[1]["messages"]
        assert second_round[-2]["role"] == "assistant"
        assert second_round[-2]["tool_calls"][0]["function"]["name"] == "echo"
        assert second_round[-1] == {"role": "tool", "tool_call_id": "c1", "content": '{"echo": "a"}'}

    def test_tool_schemas_are_sent(self, tools):
        model = FakeChatModel([text("ok")])
        run(model, tools)
        names = {t["function"]["name"] for t in model.calls[0]["tools"]}
        assert names == {"echo", "explode", "huge", "as_json_string"}

    def test_calls_run_in_order(self, tools):
        model = FakeChatModel([
            calls(tool_call("echo", value="1"), tool_call("echo", value="2"), tool_call("echo", value="3")),
            text("ok"),
        ])
        result = run(model, tools)
        assert [r.parsed_result["echo"] for r in result.tool_results] == ["1", "2", "3"]

    def test_missing_ids_are_assigned(self, tools):
        model = FakeChatModel([calls(tool_call("echo", value="a"), tool_call("echo", value="b")), text("ok")])
        result = run(model, tools)
        assert [r.tool_call_id for r in result.tool_results] == ["call_0_0", "call_0_1"]

    def test_handler_error_is_data(self, tools):
        model = FakeChatModel([calls(tool_call("explode", value="a")), text("sorry")])
        result = run(model, tools)
        [tr] = result.tool_results
        assert tr.error == "catalog offline"
        assert tr.parsed_result == {"error": "catalog offline"}
        assert not tr.ok

    def test_unknown_tool_is_data(self, tools):
        model = FakeChatModel([calls(tool_call("does_not_exist")), text("ok")])
        result = run(model, tools)
        assert result.tool_results[0].error == 'Tool "does_not_exist" not found'

    def test_invalid_arguments_are_data(self, tools):
        model = FakeChatModel([calls(tool_call("echo")), text("ok")])
        result = run(model, tools)
        assert "Invalid arguments" in result.tool_results[0].error

    def test_cap_sets_truncated(self, tools):
        model = FakeChatModel([calls(tool_call("echo", value=str(i))) for i in range(10)])
        result = run(model, tools, max_iterations=3)
        assert result.tool_execution_truncated is True
        assert result.iterations == 3
        assert len(result.tool_results) == 3
        assert len(model.calls) == 3

    @pytest.mark.skipif("MAX_TOOL_ITERATIONS" in os.environ, reason="cap overridden in environment")
    def test_default_cap_is_six_rounds(self, tools):
        assert MAX_TOOL_ITERATIONS == 6
        model = FakeChatModel([calls(tool_call("echo", value=str(i))) for i in range(10)])
        result = asyncio.run(execute_tool_call_loop(
            model=model, tools=tools, messages=[{"role": "user", "content": "hi"}],
        ))
        assert result.tool_execution_truncated is True
        assert result.iterations == 6
        assert len(model.calls) == 6

    def test_not_truncated_when_answer_arrives_on_last_round(self, tools):
        model = FakeChatModel([calls(tool_call("echo", value="a")), calls(tool_call("echo", value="b")), text("ok")])
        result = run(model, tools, max_iterations=3)
        assert result.tool_execution_truncated is False
        assert result.iterations == 3

    def test_tool_content_capped_for_model_only(self, tools):
        model = FakeChatModel([calls(tool_call("huge", value="a")), text("ok")])
        result = run(model, tools)
        assert len(model.calls[1]["messages"][-1]["content"]) == TOOL_RESULT_CHAR_LIMIT
        assert len(result.tool_results[0].raw_result) == TOOL_RESULT_CHAR_LIMIT + 500

    def test_json_string_results_are_parsed(self, tools):
        model = FakeChatModel([calls(tool_call("as_json_string", value="v")), text("ok")])
        result = run(model, tools)
        tr = result.tool_results[0]
        assert isinstance(tr.raw_result, str)
        assert tr.parsed_result == {"wrapped": "v"}

    def test_model_errors_propagate(self, tools):
        with pytest.raises(RuntimeError):
            run(FakeChatModel([RuntimeError("boom")]), tools)

    def test_on_tool_call_callback(self, tools):
        seen = []
        model = FakeChatModel([calls(tool_call("echo", value="a")), text("ok")])
        asyncio.run(execute_tool_call_loop(
            model=model, tools=tools, messages=[{"role": "user", "content": "hi"}], on_tool_call=seen.append,
        ))
        assert [r.tool_name for r in seen] == ["echo"]

    def test_token_usage_is_summed(self, tools):
        first = calls(tool_call("echo", value="a"))
        first.total_tokens = 10
        last = text("ok")
        last.total_tokens = 5
        result = run(FakeChatModel([first, last]), tools)
        assert result.total_tokens == 15


class TestExtractTextContent:

    def test_string(self):
        assert extract_text_content("hello") == "hello"

    def test_content_blocks(self):
        blocks = [{"type": "text", "text": "one"}, {"type": "image"}, "two"]
        assert extract_text_content(blocks) == "one\ntwo"

    def test_dict(self):
        assert extract_text_content({"text": "hi"}) == "hi"

    def test_unknown(self):
        assert extract_text_content(None) == ""

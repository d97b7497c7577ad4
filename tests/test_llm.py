"""Tests for the chat model bindings, using stand-in clients."""

import asyncio
from types import SimpleNamespace

import anthropic
import openai
import pytest

from flemoji_ai.agents import llm
from flemoji_ai.agents.llm import AnthropicChatModel, ChatModel, OpenAIChatModel, create_chat_model
from flemoji_ai.errors import ModelInvocationError


def completion(content=None, tool_calls=None, total_tokens=42):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=SimpleNamespace(total_tokens=total_tokens))


def fn_call(call_id, name, arguments):
    return SimpleNamespace(id=call_id, function=SimpleNamespace(name=name, arguments=arguments))


class FakeCompletions:

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.response


def client_for(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def invoke(model, tools=None):
    return asyncio.run(model.invoke([{"role": "user", "content": "hi"}], tools))


def test_satisfies_protocol():
    assert isinstance(OpenAIChatModel(), ChatModel)


def test_text_reply():
    completions = FakeCompletions(completion(content="Hello there"))
    reply = invoke(OpenAIChatModel(temperature=0.5, client=client_for(completions)))
    assert reply.content == "Hello there"
    assert reply.tool_calls == []
    assert reply.total_tokens == 42
    assert completions.kwargs["temperature"] == 0.5
    assert "tools" not in completions.kwargs


def test_tool_calls_are_parsed():
    completions = FakeCompletions(completion(tool_calls=[
        fn_call("c1", "search_tracks", '{"query": "gqom"}'),
        fn_call("c2", "get_genres", "not json"),
    ]))
    tools = [{"type": "function", "function": {"name": "search_tracks"}}]
    reply = invoke(OpenAIChatModel(client=client_for(completions)), tools)

    assert [(tc.id, tc.name, tc.arguments) for tc in reply.tool_calls] == [
        ("c1", "search_tracks", {"query": "gqom"}),
        ("c2", "get_genres", {}),
    ]
    assert reply.content == ""
    assert completions.kwargs["tools"] == tools
    assert completions.kwargs["tool_choice"] == "auto"


def test_api_error_is_wrapped():
    completions = FakeCompletions(error=openai.OpenAIError("quota exceeded"))
    with pytest.raises(ModelInvocationError):
        invoke(OpenAIChatModel(client=client_for(completions)))


def test_missing_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(llm, "CONFIG_OPENAI_API_KEY", None)
    with pytest.raises(ModelInvocationError):
        invoke(OpenAIChatModel())


# --- Anthropic ------------------------------------------------------------------


def anthropic_message(*blocks, input_tokens=30, output_tokens=12):
    return SimpleNamespace(
        content=list(blocks),
        usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
    )


def text_block(text):
    return SimpleNamespace(type="text", text=text)


def tool_use_block(block_id, name, arguments):
    return SimpleNamespace(type="tool_use", id=block_id, name=name, input=arguments)


def anthropic_client_for(messages_api):
    return SimpleNamespace(messages=messages_api)


class TestAnthropicChatModel:

    def test_satisfies_protocol(self):
        assert isinstance(AnthropicChatModel(), ChatModel)

    def test_text_reply(self):
        api = FakeCompletions(anthropic_message(text_block("Sawubona")))
        reply = invoke(AnthropicChatModel(temperature=0.5, client=anthropic_client_for(api)))

        assert reply.content == "Sawubona"
        assert reply.tool_calls == []
        assert reply.total_tokens == 42
        assert api.kwargs["temperature"] == 0.5
        assert api.kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert "tools" not in api.kwargs
        assert "system" not in api.kwargs

    def test_tool_use_blocks_are_parsed(self):
        api = FakeCompletions(anthropic_message(
            text_block("Let me look."),
            tool_use_block("tu_1", "search_tracks", {"query": "gqom"}),
            tool_use_block("tu_2", "get_genres", {}),
        ))
        tools = [{
            "type": "function",
            "function": {
                "name": "search_tracks",
                "description": "Search tracks",
                "parameters": {"type": "object", "properties": {"query": {"type": "string"}}},
            },
        }]
        reply = invoke(AnthropicChatModel(client=anthropic_client_for(api)), tools)

        assert [(tc.id, tc.name, tc.arguments) for tc in reply.tool_calls] == [
            ("tu_1", "search_tracks", {"query": "gqom"}),
            ("tu_2", "get_genres", {}),
        ]
        assert reply.content == "Let me look."
        assert api.kwargs["tools"] == [{
            "name": "search_tracks",
            "description": "Search tracks",
            "input_schema": {"type": "object", "properties": {"query": {"type": "string"}}},
        }]
        assert api.kwargs["tool_choice"] == {"type": "auto"}

    def test_conversation_is_converted(self):
        api = FakeCompletions(anthropic_message(text_block("Done")))
        messages = [
            {"role": "system", "content": "You are a music assistant."},
            {"role": "user", "content": "find gqom"},
            {
                "role": "assistant",
                "content": "",
                "tool_calls": [
                    {"id": "c1", "type": "function", "function": {"name": "search_tracks", "arguments": '{"query": "gqom"}'}},
                    {"id": "c2", "type": "function", "function": {"name": "get_genres", "arguments": "{}"}},
                ],
            },
            {"role": "tool", "tool_call_id": "c1", "content": '{"tracks": []}'},
            {"role": "tool", "tool_call_id": "c2", "content": '{"genres": []}'},
        ]
        asyncio.run(AnthropicChatModel(client=anthropic_client_for(api)).invoke(messages))

        assert api.kwargs["system"] == "You are a music assistant."
        assert api.kwargs["messages"] == [
            {"role": "user", "content": "find gqom"},
            {
                "role": "assistant",
                "content": [
                    {"type": "tool_use", "id": "c1", "name": "search_tracks", "input": {"query": "gqom"}},
                    {"type": "tool_use", "id": "c2", "name": "get_genres", "input": {}},
                ],
            },
            {
                "role": "user",
                "content": [
                    {"type": "tool_result", "tool_use_id": "c1", "content": '{"tracks": []}'},
                    {"type": "tool_result", "tool_use_id": "c2", "content": '{"genres": []}'},
                ],
            },
        ]

    def test_api_error_is_wrapped(self):
        api = FakeCompletions(error=anthropic.AnthropicError("overloaded"))
        with pytest.raises(ModelInvocationError):
            invoke(AnthropicChatModel(client=anthropic_client_for(api)))

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        monkeypatch.setattr(llm, "CONFIG_ANTHROPIC_API_KEY", None)
        with pytest.raises(ModelInvocationError):
            invoke(AnthropicChatModel())


class TestCreateChatModel:

    def test_openai(self):
        model = create_chat_model("openai", temperature=0.5)
        assert isinstance(model, OpenAIChatModel)
        assert model.temperature == 0.5

    def test_anthropic(self):
        model = create_chat_model("anthropic", temperature=0.5)
        assert isinstance(model, AnthropicChatModel)
        assert model.temperature == 0.5

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_chat_model("google")

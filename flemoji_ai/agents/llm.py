"""Language model capability: the protocol agents rely on and its OpenAI and Anthropic bindings."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from ..config import OPENAI_API_KEY as CONFIG_OPENAI_API_KEY
from ..config import ANTHROPIC_API_KEY as CONFIG_ANTHROPIC_API_KEY
from ..config import AI_PROVIDER, ANTHROPIC_MODEL, OPENAI_MODEL
from ..errors import ModelInvocationError
from ..models.agent import ModelReply, ToolCallRequest

logger = logging.getLogger(__name__)


@runtime_checkable
class ChatModel(Protocol):
    """Stateless chat capability.

    Given role-tagged messages (OpenAI chat format) and optional tool schemas,
    return either final text or one or more tool-call requests.
    """

    async def invoke(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> ModelReply: ...


def _parse_arguments(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Model sent tool arguments that are not JSON: %r", raw[:200])
        return {}
    return parsed if isinstance(parsed, dict) else {}


class OpenAIChatModel:
    """ChatModel backed by the OpenAI chat completions API.

    Usage:
        model = OpenAIChatModel(temperature=0.5)
        reply = await model.invoke([{"role": "user", "content": "hi"}])
    """

    def __init__(
        self,
        *,
        model: str = OPENAI_MODEL,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        client: Any = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client

        # Check both os.environ and config (config loads from .env file)
        api_key = os.environ.get("OPENAI_API_KEY") or CONFIG_OPENAI_API_KEY
        if not api_key:
            raise ModelInvocationError(
                "OPENAI_API_KEY not set. Please set it in .env file or as environment variable."
            )

        from openai import AsyncOpenAI

        self._client = AsyncOpenAI(api_key=api_key)
        return self._client

    async def invoke(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> ModelReply:
        import openai

        client = self._get_client()

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if self.max_tokens:
            kwargs["max_tokens"] = self.max_tokens
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        try:
            response = await client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            raise ModelInvocationError(f"LLM call failed: {e}") from e

        if not response.choices:
            raise ModelInvocationError("LLM returned no choices")

        msg = response.choices[0].message
        tool_calls = [
            ToolCallRequest(
                id=tc.id,
                name=tc.function.name,
                arguments=_parse_arguments(tc.function.arguments),
            )
            for tc in (msg.tool_calls or [])
        ]
        return ModelReply(
            content=msg.content or "",
            tool_calls=tool_calls,
            total_tokens=response.usage.total_tokens if response.usage else 0,
        )


def _to_anthropic_tools(tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    converted = []
    for tool in tools:
        fn = tool.get("function", tool)
        converted.append({
            "name": fn["name"],
            "description": fn.get("description", ""),
            "input_schema": fn.get("parameters") or {"type": "object", "properties": {}},
        })
    return converted


def _to_anthropic_messages(messages: List[Dict[str, Any]]) -> Tuple[str, List[Dict[str, Any]]]:
    """Split OpenAI-format messages into a system prompt and Anthropic turns.

    Assistant tool calls become ``tool_use`` blocks; consecutive ``tool``
    replies are merged into one user turn of ``tool_result`` blocks.
    """
    system_parts: List[str] = []
    converted: List[Dict[str, Any]] = []

    for m in messages:
        role = m.get("role")
        content = m.get("content") or ""

        if role == "system":
            if content:
                system_parts.append(content)
        elif role == "tool":
            block = {"type": "tool_result", "tool_use_id": m.get("tool_call_id", ""), "content": str(content)}
            last = converted[-1] if converted else None
            if last and last["role"] == "user" and isinstance(last["content"], list):
                last["content"].append(block)
            else:
                converted.append({"role": "user", "content": [block]})
        elif role == "assistant" and m.get("tool_calls"):
            blocks: List[Dict[str, Any]] = []
            if content:
                blocks.append({"type": "text", "text": content})
            for tc in m["tool_calls"]:
                fn = tc.get("function", {})
                args = fn.get("arguments")
                blocks.append({
                    "type": "tool_use",
                    "id": tc.get("id", ""),
                    "name": fn.get("name", ""),
                    "input": args if isinstance(args, dict) else _parse_arguments(args),
                })
            converted.append({"role": "assistant", "content": blocks})
        elif content:
            converted.append({"role": role, "content": content})

    return "\n\n".join(system_parts), converted


class AnthropicChatModel:
    """ChatModel backed by the Anthropic messages API.

    Takes the same OpenAI-format messages and tool schemas as
    ``OpenAIChatModel`` and converts them on the way in and out.
    """

    def __init__(
        self,
        *,
        model: str = ANTHROPIC_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        client: Any = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client

        api_key = os.environ.get("ANTHROPIC_API_KEY") or CONFIG_ANTHROPIC_API_KEY
        if not api_key:
            raise ModelInvocationError(
                "ANTHROPIC_API_KEY not set. Please set it in .env file or as environment variable."
            )

        from anthropic import AsyncAnthropic

        self._client = AsyncAnthropic(api_key=api_key)
        return self._client

    async def invoke(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> ModelReply:
        import anthropic

        client = self._get_client()
        system, chat_messages = _to_anthropic_messages(messages)

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": chat_messages,
            "temperature": self.temperature,
        }
        if system:
            kwargs["system"] = system
        if tools:
            kwargs["tools"] = _to_anthropic_tools(tools)
            kwargs["tool_choice"] = {"type": "auto"}

        try:
            response = await client.messages.create(**kwargs)
        except anthropic.AnthropicError as e:
            raise ModelInvocationError(f"LLM call failed: {e}") from e

        text_parts: List[str] = []
        tool_calls: List[ToolCallRequest] = []
        for block in response.content or []:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                args = block.input
                tool_calls.append(ToolCallRequest(
                    id=block.id,
                    name=block.name,
                    arguments=args if isinstance(args, dict) else _parse_arguments(args),
                ))

        usage = getattr(response, "usage", None)
        total_tokens = (usage.input_tokens + usage.output_tokens) if usage else 0
        return ModelReply(content="".join(text_parts), tool_calls=tool_calls, total_tokens=total_tokens)


PROVIDERS = ("openai", "anthropic")


def create_chat_model(provider: str = AI_PROVIDER, *, temperature: float = 0.7) -> ChatModel:
    """Build the chat model for ``provider`` ("openai" or "anthropic")."""
    if provider == "openai":
        return OpenAIChatModel(temperature=temperature)
    if provider == "anthropic":
        return AnthropicChatModel(temperature=temperature)
    raise ValueError(f"Unsupported AI provider: {provider}")

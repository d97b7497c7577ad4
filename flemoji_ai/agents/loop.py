"""Bounded tool-call loop shared by all agents."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from ..config import MAX_TOOL_ITERATIONS, TOOL_RESULT_CHAR_LIMIT
from ..models.agent import ModelReply, ToolLoopResult, ToolResult
from .llm import ChatModel
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

TRUNCATED_FALLBACK = "I was unable to complete tool execution within the allowed iterations."


def _try_parse_json(value: Any) -> Any:
    """Parse a JSON string; anything else (or bad JSON) comes back unchanged."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def extract_text_content(content: Any) -> str:
    """Normalize assistant content (string or list of content blocks) to plain text."""
    if isinstance(content, str):
        return content

    if isinstance(content, list):
        parts: List[str] = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict):
                text = item.get("text", item.get("content"))
                if isinstance(text, str):
                    parts.append(text)
        return "\n".join(p for p in parts if p).strip()

    if isinstance(content, dict):
        text = content.get("text", content.get("content"))
        if isinstance(text, str):
            return text

    return ""


def _assistant_message(reply: ModelReply) -> Dict[str, Any]:
    return {
        "role": "assistant",
        "content": extract_text_content(reply.content),
        "tool_calls": [
            {
                "id": tc.id,
                "type": "function",
                "function": {
                    "name": tc.name,
                    "arguments": json.dumps(tc.arguments, ensure_ascii=False),
                },
            }
            for tc in reply.tool_calls
        ],
    }


async def execute_tool_call_loop(
    *,
    model: ChatModel,
    tools: ToolRegistry,
    messages: List[Dict[str, Any]],
    max_iterations: int = MAX_TOOL_ITERATIONS,
    on_tool_call: Optional[Callable[[ToolResult], None]] = None,
) -> ToolLoopResult:
    """Let the model call tools until it answers in text or the cap is hit.

    Tool failures (unknown tool, bad arguments, handler exceptions) never
    escape: they are recorded on the ``ToolResult`` and sent back to the
    model as ``{"error": ...}`` so it can retry or answer anyway. Model
    errors do propagate; the agent boundary handles them.

    Args:
        model: Chat model to drive.
        tools: Registry of tools the model may call.
        messages: Seed messages (system prompt, history, user query).
        max_iterations: Maximum model rounds.
        on_tool_call: Optional callback for each executed tool call.

    Returns:
        ToolLoopResult with the final reply, full message trace and tool results.
    """
    conversation: List[Dict[str, Any]] = list(messages)
    tool_schemas = tools.get_openai_tools()
    tool_results: List[ToolResult] = []
    total_tokens = 0
    final_message: Optional[ModelReply] = None

    for iteration in range(max_iterations):
        reply = await model.invoke(conversation, tool_schemas)
        final_message = reply
        total_tokens += reply.total_tokens

        # No tool calls -> final answer
        if not reply.tool_calls:
            conversation.append({"role": "assistant", "content": extract_text_content(reply.content)})
            return ToolLoopResult(
                final_message=reply,
                messages=conversation,
                tool_results=tool_results,
                iterations=iteration + 1,
                tool_execution_truncated=False,
                total_tokens=total_tokens,
            )

        for i, tc in enumerate(reply.tool_calls):
            if not tc.id:
                tc.id = f"call_{iteration}_{i}"
        conversation.append(_assistant_message(reply))

        for tc in reply.tool_calls:
            error: Optional[str] = None
            try:
                raw_result = await tools.execute(tc.name, tc.arguments)
                parsed_result = _try_parse_json(raw_result)
            except Exception as e:
                error = str(e) or e.__class__.__name__
                logger.warning("Tool %s failed: %s", tc.name, error)
                raw_result = {"error": error}
                parsed_result = raw_result

            result = ToolResult(
                tool_call_id=tc.id,
                tool_name=tc.name,
                arguments=tc.arguments,
                raw_result=raw_result,
                parsed_result=parsed_result,
                error=error,
            )
            tool_results.append(result)

            if on_tool_call:
                on_tool_call(result)

            content = raw_result if isinstance(raw_result, str) else json.dumps(raw_result, ensure_ascii=False, default=str)
            conversation.append({
                "role": "tool",
                "tool_call_id": tc.id,
                "content": content[:TOOL_RESULT_CHAR_LIMIT],
            })

    logger.info("Tool-call loop hit the cap of %d iterations", max_iterations)
    return ToolLoopResult(
        final_message=final_message or ModelReply(content=TRUNCATED_FALLBACK),
        messages=conversation,
        tool_results=tool_results,
        iterations=max_iterations,
        tool_execution_truncated=True,
        total_tokens=total_tokens,
    )

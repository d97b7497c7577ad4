"""Common behaviour of the specialized agents."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..config import AI_PROVIDER, MAX_TOOL_ITERATIONS
from ..models.agent import AgentContext, AgentMetadata, AgentResponse, ToolLoopResult, ToolResult
from .llm import ChatModel, create_chat_model
from .loop import execute_tool_call_loop, extract_text_content
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class BaseAgent:
    """A system prompt, a tool subset and a model, wrapped around the tool-call loop.

    Subclasses set ``name``, ``system_prompt``, ``tool_names`` and
    ``error_message`` and override ``build_response`` to shape the output.
    ``process`` never raises: any failure becomes an apology with
    ``metadata.error`` set.
    """

    name: str = "BaseAgent"
    system_prompt: str = ""
    tool_names: List[str] = []
    temperature: float = 0.7
    error_message: str = "I apologize, but I encountered an error. Please try again."
    no_results_message: str = "I couldn't find anything for that yet. Try rephrasing, or name a genre, artist or track."

    def __init__(
        self,
        registry: ToolRegistry,
        model: Optional[ChatModel] = None,
        *,
        max_iterations: int = MAX_TOOL_ITERATIONS,
        provider: str = AI_PROVIDER,
    ):
        self.registry = registry
        self.model = model or create_chat_model(provider, temperature=self.temperature)
        self.max_iterations = max_iterations
        self.tools = registry.subset(self.tool_names)

    def format_context(self, context: Optional[AgentContext]) -> str:
        """Render active filters as a short context line."""
        if context is None:
            return ""
        parts: List[str] = []
        if context.filters.genre:
            parts.append(f"Genre: {context.filters.genre}")
        if context.filters.province:
            parts.append(f"Province: {context.filters.province}")
        return " ".join(parts)

    def build_messages(self, query: str, context: Optional[AgentContext]) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = [{"role": "system", "content": self.system_prompt}]
        if context is not None:
            messages.extend(
                {"role": m.role, "content": m.content}
                for m in context.conversation_history
                if m.role in ("user", "assistant")
            )

        user_msg = query
        context_line = self.format_context(context)
        if context_line:
            user_msg = f"{query}\n\nContext: {context_line}"
        messages.append({"role": "user", "content": user_msg})
        return messages

    async def process(
        self,
        query: str,
        context: Optional[AgentContext] = None,
        *,
        on_tool_call: Optional[Callable[[ToolResult], None]] = None,
    ) -> AgentResponse:
        """Run the agent on one query."""
        try:
            result = await execute_tool_call_loop(
                model=self.model,
                tools=self.tools,
                messages=self.build_messages(query, context),
                max_iterations=self.max_iterations,
                on_tool_call=on_tool_call,
            )
            logger.info(
                "%s finished: iterations=%d tool_calls=%d truncated=%s",
                self.name, result.iterations, len(result.tool_results), result.tool_execution_truncated,
            )
            return await self.build_response(query, context, result)
        except Exception as e:
            logger.exception("%s failed", self.name)
            return AgentResponse(
                message=self.error_message,
                metadata=AgentMetadata(agent=self.name, error=str(e) or e.__class__.__name__),
            )

    async def build_response(
        self,
        query: str,
        context: Optional[AgentContext],
        result: ToolLoopResult,
    ) -> AgentResponse:
        return AgentResponse(message=self.final_text(result), metadata=self.metadata(result))

    # --- helpers for subclasses ----------------------------------------------

    def metadata(self, result: ToolLoopResult) -> AgentMetadata:
        return AgentMetadata(
            agent=self.name,
            iterations=result.iterations,
            tool_calls=[
                {"id": r.tool_call_id or "", "name": r.tool_name, "arguments": r.arguments}
                for r in result.tool_results
            ],
            truncated=result.tool_execution_truncated,
            total_tokens=result.total_tokens,
        )

    def final_text(self, result: ToolLoopResult) -> str:
        """The model's last text, or a fallback describing what was done."""
        text = extract_text_content(result.final_message.content).strip()
        if text:
            return text
        if not result.tool_results:
            return self.no_results_message
        used = ", ".join(dict.fromkeys(r.tool_name for r in result.tool_results))
        return f"Here's what I found using {used}."

"""Agent system data models."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import ConfigDict, Field

from .base import CamelModel
from .responses import ResponseVariant

Intent = Literal["discovery", "playback", "recommendation", "unknown"]
Role = Literal["system", "user", "assistant", "tool"]


class ChatMessage(CamelModel):
    """A single role-tagged message in conversation history."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = ""


class AgentFilters(CamelModel):
    model_config = ConfigDict(frozen=True)

    genre: Optional[str] = None
    province: Optional[str] = None


class AgentContext(CamelModel):
    """Per-request state supplied by the caller. Read-only inside the core."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = None
    conversation_history: List[ChatMessage] = Field(default_factory=list)
    filters: AgentFilters = Field(default_factory=AgentFilters)


class RoutingDecision(CamelModel):
    """Classified user intent for routing to the right agent."""

    intent: Intent
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    target_agent: str


class ToolCallRequest(CamelModel):
    """A tool invocation requested by the model."""

    id: str = ""
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolResult(CamelModel):
    """Record of a single tool invocation inside the tool-call loop."""

    tool_call_id: Optional[str] = None
    tool_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    raw_result: Any = None
    parsed_result: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ModelReply(CamelModel):
    """What the language model returned for one invocation."""

    content: Union[str, List[Any]] = ""
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)
    total_tokens: int = 0


class ToolLoopResult(CamelModel):
    """Outcome of one run of the tool-call loop."""

    final_message: ModelReply
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    tool_results: List[ToolResult] = Field(default_factory=list)
    iterations: int = 0
    tool_execution_truncated: bool = False
    total_tokens: int = 0


class AgentMetadata(CamelModel):
    agent: str
    iterations: int = 0
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)
    truncated: bool = False
    total_tokens: int = 0
    error: Optional[str] = None


class AgentResponse(CamelModel):
    """Result from an agent execution.

    ``data`` holds one response variant (discovery, playback) or a flat list of
    tool outputs (recommendation), or nothing.
    """

    message: str = ""
    data: Optional[Union[ResponseVariant, List[Dict[str, Any]]]] = None
    metadata: AgentMetadata

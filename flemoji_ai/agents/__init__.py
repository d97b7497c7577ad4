"""Assistant agents: keyword router, specialized workers and the tool-call loop."""

from .router import RouterAgent, classify_intent
from .loop import execute_tool_call_loop
from .normalizer import ResponseNormalizer
from .memory import ConversationMemory, PreferenceTracker, build_context

__all__ = [
    "RouterAgent",
    "classify_intent",
    "execute_tool_call_loop",
    "ResponseNormalizer",
    "ConversationMemory",
    "PreferenceTracker",
    "build_context",
]

"""Router agent: keyword intent classification + delegation to a specialized agent."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from ..catalog.base import MusicCatalog
from ..config import AI_PROVIDER, MAX_TOOL_ITERATIONS
from ..models.agent import AgentContext, AgentMetadata, AgentResponse, RoutingDecision, ToolResult
from .base import BaseAgent
from .intents import INTENT_KEYWORDS, INTENT_PRIORITY
from .llm import ChatModel
from .tools.registry import ToolRegistry, get_default_registry
from .workers.discovery_agent import DiscoveryAgent
from .workers.playback_agent import PlaybackAgent
from .workers.recommendation_agent import RecommendationAgent

logger = logging.getLogger(__name__)

INTENT_AGENTS: Dict[str, str] = {
    "playback": "PlaybackAgent",
    "recommendation": "RecommendationAgent",
    "discovery": "DiscoveryAgent",
    "unknown": "DiscoveryAgent",
}

ROUTING_ERROR_MESSAGE = "I apologize, but I encountered an error processing your request. Please try again."


def classify_intent(query: str) -> RoutingDecision:
    """Score the query against each keyword list and pick the winning intent.

    Ties go to the intent listed first in ``INTENT_PRIORITY``. A query that
    hits no keyword at all is ``unknown`` and falls back to discovery.
    """
    lowered = (query or "").lower()
    scores = {
        intent: sum(1 for keyword in INTENT_KEYWORDS[intent] if keyword in lowered)
        for intent in INTENT_PRIORITY
    }
    max_score = max(scores.values())

    if max_score == 0:
        return RoutingDecision(intent="unknown", confidence=0.0, target_agent=INTENT_AGENTS["unknown"])

    intent = next(i for i in INTENT_PRIORITY if scores[i] == max_score)
    confidence = min(max_score / len(INTENT_KEYWORDS[intent]), 1.0)
    return RoutingDecision(intent=intent, confidence=confidence, target_agent=INTENT_AGENTS[intent])


class RouterAgent:
    """Entry point of the assistant: one query in, one AgentResponse out.

    Usage:
        router = RouterAgent(catalog, provider="anthropic")
        response = await router.route("play some amapiano")
    """

    def __init__(
        self,
        catalog: Optional[MusicCatalog] = None,
        *,
        registry: Optional[ToolRegistry] = None,
        model: Optional[ChatModel] = None,
        max_iterations: int = MAX_TOOL_ITERATIONS,
        provider: str = AI_PROVIDER,
    ):
        if registry is None:
            if catalog is None:
                raise ValueError("RouterAgent needs a catalog or a prebuilt tool registry")
            registry = get_default_registry(catalog)
        self.registry = registry

        options = {"max_iterations": max_iterations, "provider": provider}
        self.agents: Dict[str, BaseAgent] = {
            "DiscoveryAgent": DiscoveryAgent(registry, model, catalog=catalog, **options),
            "PlaybackAgent": PlaybackAgent(registry, model, **options),
            "RecommendationAgent": RecommendationAgent(registry, model, **options),
        }

    def get_routing_decision(self, query: str) -> RoutingDecision:
        decision = classify_intent(query)
        logger.debug(
            "Routing %r -> %s (intent=%s, confidence=%.2f)",
            query[:80], decision.target_agent, decision.intent, decision.confidence,
        )
        return decision

    async def route(
        self,
        query: str,
        context: Optional[AgentContext] = None,
        *,
        on_tool_call: Optional[Callable[[ToolResult], None]] = None,
    ) -> AgentResponse:
        """Classify ``query`` and hand it to the matching agent. Never raises."""
        try:
            decision = self.get_routing_decision(query)
            agent = self.agents[decision.target_agent]
            return await agent.process(query, context, on_tool_call=on_tool_call)
        except Exception as e:
            logger.exception("Routing failed for query %r", query[:80])
            return AgentResponse(
                message=ROUTING_ERROR_MESSAGE,
                metadata=AgentMetadata(agent="RouterAgent", error=str(e) or e.__class__.__name__),
            )

"""Recommendation agent: data-driven suggestions from stats and the catalog."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ...models.agent import AgentContext, AgentResponse, ToolLoopResult
from ..base import BaseAgent
from ..tools.analytics_tools import ANALYTICS_TOOL_NAMES
from ..tools.discovery_tools import DISCOVERY_TOOL_NAMES

SYSTEM_PROMPT = """You are a music recommendation assistant for Flemoji, a South African music streaming platform.

Your role is to provide personalized music recommendations based on user preferences, listening history, and current trends.

Available data sources:
- TRENDING: Current trending tracks
- GENRE STATS: Statistics by genre
- PROVINCE STATS: Regional music statistics
- USER HISTORY: User's listening patterns (if available)

When responding:
- Be enthusiastic about helping users discover new music
- Base recommendations on data and trends
- Explain why you're recommending specific tracks/artists
- Provide context about genres and regions
- Keep recommendations diverse and interesting

You have access to analytics tools to provide data-driven recommendations. Use them to suggest music that matches user preferences."""


class RecommendationAgent(BaseAgent):
    name = "RecommendationAgent"
    system_prompt = SYSTEM_PROMPT
    tool_names = ANALYTICS_TOOL_NAMES + DISCOVERY_TOOL_NAMES
    temperature = 0.7
    error_message = "I apologize, but I encountered an error while generating recommendations. Please try again."

    async def build_response(
        self,
        query: str,
        context: Optional[AgentContext],
        result: ToolLoopResult,
    ) -> AgentResponse:
        outputs: List[Dict[str, Any]] = []
        for r in result.tool_results:
            entry: Dict[str, Any] = {"tool": r.tool_name, "arguments": r.arguments, "result": r.parsed_result}
            if r.error:
                entry["error"] = r.error
            outputs.append(entry)

        return AgentResponse(
            message=self.final_text(result),
            data=outputs or None,
            metadata=self.metadata(result),
        )

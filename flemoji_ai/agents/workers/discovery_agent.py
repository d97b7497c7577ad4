"""Discovery agent: search, browse and explore the catalog."""

from __future__ import annotations

from typing import Optional

from ...catalog.base import MusicCatalog
from ...config import R2_PUBLIC_URL
from ...models.agent import AgentContext, AgentResponse, ToolLoopResult
from ..base import BaseAgent
from ..llm import ChatModel
from ..normalizer import ResponseNormalizer
from ..tools.discovery_tools import DISCOVERY_TOOL_NAMES
from ..tools.registry import ToolRegistry

SYSTEM_PROMPT = """You are a music discovery assistant for Flemoji, a South African music streaming platform.

Your role is to help users discover new music, search for tracks and artists, browse playlists, and explore different genres and regions.

Available actions:
- SEARCH: Find tracks by title, artist, or description
- BROWSE: Explore playlists by genre or province
- DISCOVER: Find trending tracks and top charts
- ARTIST: Get information about specific artists

When responding:
- Be enthusiastic about helping users discover South African music
- Provide context about genres when relevant (Amapiano, Afrobeat, House, etc.)
- Suggest similar artists or tracks when appropriate
- Keep responses conversational and engaging
- Use the tools available to gather real data before responding

If the user asks you to create or compile a playlist, search for matching tracks first.
The tracks you find will be assembled into a playlist for them."""


class DiscoveryAgent(BaseAgent):
    """Finds tracks, artists, playlists and genres; answers with one response variant."""

    name = "DiscoveryAgent"
    system_prompt = SYSTEM_PROMPT
    tool_names = DISCOVERY_TOOL_NAMES
    temperature = 0.7
    error_message = "I apologize, but I encountered an error while searching for music. Please try again."

    def __init__(
        self,
        registry: ToolRegistry,
        model: Optional[ChatModel] = None,
        *,
        catalog: Optional[MusicCatalog] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        **kwargs,
    ):
        super().__init__(registry, model, **kwargs)
        self.normalizer = normalizer or ResponseNormalizer(
            catalog=catalog,
            summarizer=self.model,
            file_url_base=R2_PUBLIC_URL,
        )

    async def build_response(
        self,
        query: str,
        context: Optional[AgentContext],
        result: ToolLoopResult,
    ) -> AgentResponse:
        variant = await self.normalizer.normalize(result.tool_results, query, context)
        message = self.final_text(result)
        return AgentResponse(message=message, data=variant, metadata=self.metadata(result))

"""Playback agent: turns requests into client-executable actions."""

from __future__ import annotations

from typing import List, Optional

from pydantic import ValidationError

from ...models.agent import AgentContext, AgentResponse, ToolLoopResult
from ...models.responses import Action, ActionData, ActionResponse
from ..base import BaseAgent
from ..tools.playback_tools import PLAYBACK_TOOL_NAMES

SYSTEM_PROMPT = """You are a music playback control assistant for Flemoji, a South African music streaming platform.

Your role is to help users control music playback by creating actions to play tracks, playlists, manage the queue, and control playback.

Available actions:
- PLAY TRACK: Play a specific track
- PLAY PLAYLIST: Play a complete playlist
- QUEUE: Add tracks to the playback queue
- SHUFFLE: Shuffle the current playback

When responding:
- Be brief and action-oriented
- Confirm what action you're taking
- Use the playback tools to create executable actions
- Keep responses concise and helpful
- Always create actions when the user wants to play music

You have access to playback control tools. Use them to execute user requests."""


class PlaybackAgent(BaseAgent):
    name = "PlaybackAgent"
    system_prompt = SYSTEM_PROMPT
    tool_names = PLAYBACK_TOOL_NAMES
    temperature = 0.5
    error_message = "I apologize, but I encountered an error while handling playback. Please try again."
    no_results_message = "Tell me which track or playlist you'd like to hear and I'll start it for you."

    async def build_response(
        self,
        query: str,
        context: Optional[AgentContext],
        result: ToolLoopResult,
    ) -> AgentResponse:
        actions = self.collect_actions(result)
        message = self.final_text(result)

        data = None
        if actions:
            data = ActionResponse(message=message, data=ActionData(actions=actions, success=True))
        return AgentResponse(message=message, data=data, metadata=self.metadata(result))

    @staticmethod
    def collect_actions(result: ToolLoopResult) -> List[Action]:
        """Actions carried by successful tool results, in call order."""
        actions: List[Action] = []
        for r in result.tool_results:
            payload = r.parsed_result
            if r.error or not isinstance(payload, dict) or not payload.get("action"):
                continue
            try:
                actions.append(Action.model_validate(payload["action"]))
            except ValidationError:
                continue
        return actions

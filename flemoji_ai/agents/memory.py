"""Caller-owned conversation memory and listening preferences.

The agents never touch this module; the HTTP layer records turns here and
turns them into an ``AgentContext`` before each request.
"""

from __future__ import annotations

import logging
from collections import Counter, OrderedDict, defaultdict
from typing import Dict, List, Optional, Tuple

from ..models.agent import AgentContext, AgentFilters, AgentResponse, ChatMessage

logger = logging.getLogger(__name__)

KNOWN_GENRES: Tuple[str, ...] = (
    "amapiano",
    "afro house",
    "afrobeat",
    "house",
    "hip hop",
    "gospel",
    "jazz",
    "r&b",
    "pop",
)


class ConversationMemory:
    """Sliding window of messages per (user, conversation).

    - Keeps at most ``max_messages`` per conversation, oldest dropped first
    - Keeps at most ``max_conversations``; the least recently written one is
      evicted first
    - ``history`` returns the newest ``limit`` messages in order
    """

    def __init__(self, *, max_messages: int = 50, max_conversations: int = 1000):
        self.max_messages = max_messages
        self.max_conversations = max_conversations
        self._conversations: "OrderedDict[Tuple[str, str], List[ChatMessage]]" = OrderedDict()

    def add(self, user_id: str, conversation_id: str, role: str, content: str) -> None:
        """Append one message to a conversation."""
        key = (user_id, conversation_id)
        messages = self._conversations.setdefault(key, [])
        self._conversations.move_to_end(key)
        messages.append(ChatMessage(role=role, content=content))
        if len(messages) > self.max_messages:
            del messages[: len(messages) - self.max_messages]

        while len(self._conversations) > self.max_conversations:
            evicted, _ = self._conversations.popitem(last=False)
            logger.debug("Evicted conversation %s of user %s", evicted[1], evicted[0])

    def history(self, user_id: str, conversation_id: str, limit: int = 10) -> List[ChatMessage]:
        messages = self._conversations.get((user_id, conversation_id), [])
        return list(messages[-limit:]) if limit > 0 else []

    def clear(self, user_id: str, conversation_id: Optional[str] = None) -> None:
        """Forget one conversation, or every conversation of the user."""
        if conversation_id is not None:
            self._conversations.pop((user_id, conversation_id), None)
            return
        for key in [k for k in self._conversations if k[0] == user_id]:
            del self._conversations[key]


class PreferenceTracker:
    """Counts the genres and artists a user keeps coming back to."""

    def __init__(self):
        self._genres: Dict[str, Counter] = defaultdict(Counter)
        self._artists: Dict[str, Counter] = defaultdict(Counter)

    def genres(self, user_id: str) -> Dict[str, int]:
        return dict(self._genres.get(user_id, {}))

    def artists(self, user_id: str) -> Dict[str, int]:
        return dict(self._artists.get(user_id, {}))

    def update_from_message(self, user_id: Optional[str], text: str) -> None:
        """Count every known genre named in the user's message."""
        if not user_id or not text:
            return
        lowered = text.lower()
        for genre in KNOWN_GENRES:
            if genre in lowered:
                self._genres[user_id][genre] += 1

    def update_from_response(self, user_id: Optional[str], response: AgentResponse) -> None:
        """Count genres and artists of the tracks an agent returned."""
        if not user_id or response.data is None or isinstance(response.data, list):
            return
        tracks = getattr(getattr(response.data, "data", None), "tracks", None) or []
        for track in tracks:
            track = getattr(track, "track", track)  # playlist entries wrap the track
            if track.genre:
                self._genres[user_id][track.genre] += 1
            if track.artist:
                self._artists[user_id][track.artist] += 1

    def top_genre(self, user_id: Optional[str]) -> Optional[str]:
        counts = self._genres.get(user_id) if user_id else None
        if not counts:
            return None
        return counts.most_common(1)[0][0]


def build_context(
    user_id: Optional[str],
    conversation_id: Optional[str],
    *,
    memory: Optional[ConversationMemory] = None,
    preferences: Optional[PreferenceTracker] = None,
    filters: Optional[AgentFilters] = None,
    history_limit: int = 6,
) -> AgentContext:
    """Assemble the request context from recent history and preferences.

    Explicit ``filters`` win; otherwise the user's top genre becomes the
    genre filter.
    """
    history: List[ChatMessage] = []
    if memory is not None and user_id and conversation_id:
        history = memory.history(user_id, conversation_id, limit=history_limit)

    filters = filters or AgentFilters()
    if filters.genre is None and preferences is not None:
        top = preferences.top_genre(user_id)
        if top:
            filters = AgentFilters(genre=top, province=filters.province)

    return AgentContext(user_id=user_id, conversation_history=history, filters=filters)

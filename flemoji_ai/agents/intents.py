"""Keyword lists used by the router to classify queries.

Kept as plain data so they can be tuned and tested apart from the scoring.
Matching is case-insensitive substring matching, so "play" also hits
"playlist" and "playing".
"""

from typing import Dict, Tuple

PLAYBACK_KEYWORDS: Tuple[str, ...] = (
    "play",
    "start",
    "begin",
    "resume",
    "pause",
    "stop",
    "shuffle",
    "queue",
    "add to",
    "next",
    "previous",
    "skip",
)

RECOMMENDATION_KEYWORDS: Tuple[str, ...] = (
    "recommend",
    "suggest",
    "similar",
    "like",
    "discover",
    "new music",
    "fresh",
    "what should i",
    "tell me what",
    "help me find",
    "best",
    "top",
    "what else",
    "else is good",
    "other good",
)

DISCOVERY_KEYWORDS: Tuple[str, ...] = (
    "find",
    "search",
    "show",
    "list",
    "browse",
    "look for",
    "what is",
    "who is",
    "tell me about",
    "artist",
    "album",
    "playlist",
    "trending",
    "track",
    "song",
)

# Ties resolve in this order: action words are rarer and more decisive
INTENT_PRIORITY: Tuple[str, ...] = ("playback", "recommendation", "discovery")

INTENT_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "playback": PLAYBACK_KEYWORDS,
    "recommendation": RECOMMENDATION_KEYWORDS,
    "discovery": DISCOVERY_KEYWORDS,
}

"""Pydantic data models for the Flemoji AI assistant."""

from .agent import (
    AgentContext,
    AgentFilters,
    AgentMetadata,
    AgentResponse,
    ChatMessage,
    ModelReply,
    RoutingDecision,
    ToolCallRequest,
    ToolLoopResult,
    ToolResult,
)
from .catalog import Artist, Genre, GenreStats, Playlist, PlaylistInfo, PlaylistTrack, ProvinceStats, Track
from .responses import (
    Action,
    ActionResponse,
    ArtistResponse,
    GenreListResponse,
    PlaylistGridResponse,
    PlaylistResponse,
    ResponseVariant,
    SearchResultsResponse,
    TextResponse,
    TrackListResponse,
)

__all__ = [
    "AgentContext",
    "AgentFilters",
    "AgentMetadata",
    "AgentResponse",
    "ChatMessage",
    "ModelReply",
    "RoutingDecision",
    "ToolCallRequest",
    "ToolLoopResult",
    "ToolResult",
    "Artist",
    "Genre",
    "GenreStats",
    "Playlist",
    "PlaylistInfo",
    "PlaylistTrack",
    "ProvinceStats",
    "Track",
    "Action",
    "ActionResponse",
    "ArtistResponse",
    "GenreListResponse",
    "PlaylistGridResponse",
    "PlaylistResponse",
    "ResponseVariant",
    "SearchResultsResponse",
    "TextResponse",
    "TrackListResponse",
]

"""Typed, UI-renderable response variants.

Every variant carries ``type``, ``message`` and ``timestamp``; the ``data``
payload model is fixed per ``type``. ``ResponseVariant`` is a discriminated
union so a payload can never be paired with the wrong tag.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import CamelModel
from .catalog import Artist, Genre, Playlist, PlaylistInfo, Track

ActionType = Literal[
    "play_track",
    "play_playlist",
    "queue_add",
    "queue_replace",
    "shuffle",
    "open_playlist",
    "view_artist",
    "share_track",
    "save_playlist",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Action(CamelModel):
    """Client-executable action produced by a playback tool."""

    type: ActionType
    label: str
    icon: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class BaseResponse(CamelModel):
    message: str
    timestamp: datetime = Field(default_factory=_now)


# --- payloads ---------------------------------------------------------------

class TrackListMetadata(CamelModel):
    genre: Optional[str] = None
    province: Optional[str] = None
    total: Optional[int] = None
    query: Optional[str] = None


class TrackListData(CamelModel):
    tracks: List[Track] = Field(default_factory=list)
    other: Optional[List[Track]] = None  # fallback recommendation rail
    summary: Optional[str] = None
    metadata: TrackListMetadata = Field(default_factory=TrackListMetadata)


class PlaylistGridMetadata(CamelModel):
    genre: Optional[str] = None
    province: Optional[str] = None
    total: Optional[int] = None


class PlaylistGridData(CamelModel):
    playlists: List[PlaylistInfo] = Field(default_factory=list)
    metadata: PlaylistGridMetadata = Field(default_factory=PlaylistGridMetadata)


class ArtistData(CamelModel):
    artist: Artist


class SearchResultsMetadata(CamelModel):
    query: str
    total: Optional[int] = None


class SearchResultsData(CamelModel):
    tracks: List[Track] = Field(default_factory=list)
    artists: List[Artist] = Field(default_factory=list)
    metadata: SearchResultsMetadata


class ActionData(CamelModel):
    actions: List[Action] = Field(default_factory=list)
    success: bool = True


class GenreListMetadata(CamelModel):
    total: Optional[int] = None


class GenreListData(CamelModel):
    genres: List[Genre] = Field(default_factory=list)
    metadata: GenreListMetadata = Field(default_factory=GenreListMetadata)


# --- variants ---------------------------------------------------------------

class TextResponse(BaseResponse):
    type: Literal["text"] = "text"


class TrackListResponse(BaseResponse):
    type: Literal["track_list"] = "track_list"
    data: TrackListData


class PlaylistResponse(BaseResponse):
    type: Literal["playlist"] = "playlist"
    data: Playlist


class PlaylistGridResponse(BaseResponse):
    type: Literal["playlist_grid"] = "playlist_grid"
    data: PlaylistGridData


class ArtistResponse(BaseResponse):
    type: Literal["artist"] = "artist"
    data: ArtistData


class SearchResultsResponse(BaseResponse):
    type: Literal["search_results"] = "search_results"
    data: SearchResultsData


class ActionResponse(BaseResponse):
    type: Literal["action"] = "action"
    data: ActionData


class GenreListResponse(BaseResponse):
    type: Literal["genre_list"] = "genre_list"
    data: GenreListData


ResponseVariant = Annotated[
    Union[
        TextResponse,
        TrackListResponse,
        PlaylistResponse,
        PlaylistGridResponse,
        ArtistResponse,
        SearchResultsResponse,
        ActionResponse,
        GenreListResponse,
    ],
    Field(discriminator="type"),
]

RESPONSE_TYPES = (
    "text",
    "track_list",
    "playlist",
    "playlist_grid",
    "artist",
    "search_results",
    "action",
    "genre_list",
)

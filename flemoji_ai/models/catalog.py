"""Music catalog records: tracks, artists, playlists, genres."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import CamelModel


class CatalogRecord(CamelModel):
    """Base for records that tools return and the normalizer re-validates.

    Tools may hand back records without an id, or with a numeric one; the
    id is kept as a string when present.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)


class Track(CatalogRecord):
    """A playable track with its artist display name."""

    title: str = ""
    artist: str = "Unknown Artist"
    artist_id: Optional[str] = None
    user_id: Optional[str] = None
    genre: Optional[str] = None
    album: Optional[str] = None
    province: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None  # seconds
    play_count: int = 0
    like_count: int = 0
    cover_image_url: Optional[str] = None
    album_artwork: Optional[str] = None
    file_path: Optional[str] = None
    unique_url: Optional[str] = None
    is_downloadable: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Filled in by the response normalizer
    file_url: Optional[str] = None
    summary: Optional[str] = None


class Artist(CatalogRecord):
    """An artist profile with a sample of their tracks."""

    artist_name: str
    slug: Optional[str] = None
    bio: Optional[str] = None
    genre: Optional[str] = None
    location: Optional[str] = None
    province: Optional[str] = None
    profile_image: Optional[str] = None
    total_plays: int = 0
    total_likes: int = 0
    profile_views: int = 0
    tracks: List[Track] = Field(default_factory=list)


class PlaylistInfo(CatalogRecord):
    """Playlist card without its tracks."""

    name: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    genre: Optional[str] = None
    province: Optional[str] = None
    track_count: int = 0
    is_featured: bool = False
    is_top_chart: bool = False


class PlaylistTrack(CamelModel):
    """A track at a position inside a playlist."""

    order: int
    track: Track


class Playlist(PlaylistInfo):
    """A playlist with its ordered tracks.

    Compiled playlists set ``is_virtual`` and have no stored counterpart.
    """

    tracks: List[PlaylistTrack] = Field(default_factory=list)
    is_virtual: bool = False

    def info(self) -> PlaylistInfo:
        data = self.model_dump(exclude={"tracks", "is_virtual"})
        data["track_count"] = self.track_count or len(self.tracks)
        return PlaylistInfo.model_validate(data)


class Genre(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    color_hex: Optional[str] = None
    icon: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)
    is_active: bool = True
    order: int = 0
    track_count: Optional[int] = None


class GenreStats(CamelModel):
    genre: str
    track_count: int = 0
    total_plays: int = 0
    top_track: Optional[str] = None


class ProvinceStats(CamelModel):
    province: str
    artist_count: int = 0
    track_count: int = 0
    total_plays: int = 0

"""Discovery tools: track, playlist, artist and genre lookups against the catalog."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from ...catalog.base import MusicCatalog
from ...models.base import CamelModel
from .registry import ToolArgs, ToolRegistry

DISCOVERY_TOOL_NAMES = [
    "search_tracks",
    "get_track",
    "get_playlist",
    "get_artist",
    "search_artists",
    "get_top_charts",
    "get_featured_playlists",
    "get_trending_tracks",
    "get_playlists_by_genre",
    "get_playlists_by_province",
    "get_tracks_by_genre",
    "get_genres",
]


def _dump(record: CamelModel) -> Dict[str, Any]:
    return record.to_json_dict()


def _dump_all(records: List[CamelModel]) -> List[Dict[str, Any]]:
    return [_dump(r) for r in records]


# --- argument schemas --------------------------------------------------------

class SearchTracksArgs(ToolArgs):
    query: str = Field(description="Search query string (track title, artist name, or description). For multi-artist tracks, search for each artist individually as well.")
    genre: Optional[str] = Field(default=None, description="Optional genre filter (e.g., Amapiano, Afrobeat)")
    province: Optional[str] = Field(default=None, description="Optional province filter (e.g., Gauteng, Western Cape)")
    limit: int = Field(default=20, ge=1, description="Maximum number of tracks to return (1-50)")
    order_by: Literal["recent", "popular", "alphabetical"] = Field(default="recent", description="Sort order: recent (newest first), popular (most plays), or alphabetical")


class TrackIdArgs(ToolArgs):
    track_id: str = Field(description="The unique ID of the track")


class PlaylistIdArgs(ToolArgs):
    playlist_id: str = Field(description="The unique ID of the playlist")


class ArtistArgs(ToolArgs):
    artist_identifier: str = Field(description="Artist slug or artist name")


class SearchArtistsArgs(ToolArgs):
    query: str = Field(description="Artist name or part of it")
    limit: int = Field(default=10, ge=1, description="Number of artists to return (1-20)")


class PlaylistLimitArgs(ToolArgs):
    limit: int = Field(default=10, ge=1, description="Number of playlists to return (1-20)")


class TrackLimitArgs(ToolArgs):
    limit: int = Field(default=20, ge=1, description="Number of tracks to return (1-50)")


class GenrePlaylistsArgs(ToolArgs):
    genre: str = Field(description="Genre name to filter by")
    limit: int = Field(default=20, ge=1, description="Number of playlists to return (1-20)")


class ProvincePlaylistsArgs(ToolArgs):
    province: str = Field(description="Province name (e.g., Gauteng, Western Cape, KwaZulu-Natal)")
    limit: int = Field(default=20, ge=1, description="Number of playlists to return (1-20)")


class GenreTracksArgs(ToolArgs):
    genre: str = Field(description='Genre name, slug, or alias to filter by (e.g., "3 Step", "Afro Pop", "Amapiano", "amapiano")')
    limit: int = Field(default=20, ge=1, description="Number of tracks to return (1-50)")


class GenresArgs(ToolArgs):
    limit: int = Field(default=50, ge=1, description="Maximum number of genres to return (1-100)")
    include_inactive: bool = Field(default=False, description="Include inactive genres in results")


# --- registration --------------------------------------------------------------

def register_discovery_tools(registry: ToolRegistry, catalog: MusicCatalog) -> None:
    """Register all discovery tools bound to ``catalog``."""

    async def search_tracks(args: SearchTracksArgs) -> Dict[str, Any]:
        tracks = await catalog.search_tracks(
            args.query,
            genre=args.genre,
            province=args.province,
            limit=min(args.limit, 50),
            order_by=args.order_by,
        )
        return {"tracks": _dump_all(tracks), "count": len(tracks)}

    async def get_track(args: TrackIdArgs) -> Dict[str, Any]:
        track = await catalog.get_track(args.track_id)
        if track is None:
            return {"error": "Track not found", "track": None}
        return {"track": _dump(track)}

    async def get_playlist(args: PlaylistIdArgs) -> Dict[str, Any]:
        playlist = await catalog.get_playlist(args.playlist_id)
        if playlist is None:
            return {"error": "Playlist not found", "playlist": None}
        data = _dump(playlist)
        data["trackCount"] = len(playlist.tracks)
        data["tracks"] = [_dump(pt.track) for pt in playlist.tracks[:10]]
        return {"playlist": data}

    async def get_artist(args: ArtistArgs) -> Dict[str, Any]:
        artist = await catalog.get_artist(args.artist_identifier)
        if artist is None:
            return {"error": "Artist not found", "artist": None}
        data = _dump(artist)
        data["trackCount"] = len(artist.tracks)
        data["tracks"] = _dump_all(artist.tracks[:10])
        return {"artist": data}

    async def search_artists(args: SearchArtistsArgs) -> Dict[str, Any]:
        artists = await catalog.search_artists(args.query, limit=min(args.limit, 20))
        return {"artists": _dump_all(artists), "count": len(artists)}

    async def get_top_charts(args: PlaylistLimitArgs) -> Dict[str, Any]:
        playlists = await catalog.get_top_charts(min(args.limit, 20))
        return {"playlists": _dump_all(playlists), "count": len(playlists)}

    async def get_featured_playlists(args: PlaylistLimitArgs) -> Dict[str, Any]:
        playlists = await catalog.get_featured_playlists(min(args.limit, 20))
        return {"playlists": _dump_all(playlists), "count": len(playlists)}

    async def get_trending_tracks(args: TrackLimitArgs) -> Dict[str, Any]:
        tracks = await catalog.get_trending_tracks(min(args.limit, 50))
        return {"tracks": _dump_all(tracks), "count": len(tracks)}

    async def get_playlists_by_genre(args: GenrePlaylistsArgs) -> Dict[str, Any]:
        playlists = await catalog.get_playlists_by_genre(args.genre, min(args.limit, 20))
        return {"playlists": _dump_all(playlists), "count": len(playlists)}

    async def get_playlists_by_province(args: ProvincePlaylistsArgs) -> Dict[str, Any]:
        playlists = await catalog.get_playlists_by_province(args.province, min(args.limit, 20))
        return {"playlists": _dump_all(playlists), "count": len(playlists)}

    async def get_tracks_by_genre(args: GenreTracksArgs) -> Dict[str, Any]:
        tracks = await catalog.get_tracks_by_genre(args.genre, min(args.limit, 50))
        return {"tracks": _dump_all(tracks), "count": len(tracks)}

    async def get_genres(args: GenresArgs) -> Dict[str, Any]:
        genres = await catalog.get_genres(min(args.limit, 100), include_inactive=args.include_inactive)
        return {"genres": _dump_all(genres), "count": len(genres)}

    registry.register(
        "search_tracks", search_tracks, SearchTracksArgs,
        "Search for music tracks by title, artist name, or description. Returns a list of matching tracks with metadata. "
        "When searching for tracks with multiple artists (e.g., \"Caeser x MLT zA\"), also search for each individual artist "
        "separately. Split multi-artist names by \"x\", \"&\", \"feat\", \"ft\", \"featuring\", or commas.",
    )
    registry.register(
        "get_track", get_track, TrackIdArgs,
        "Get detailed information about a specific track by its ID.",
    )
    registry.register(
        "get_playlist", get_playlist, PlaylistIdArgs,
        "Get a playlist with all its tracks by playlist ID.",
    )
    registry.register(
        "get_artist", get_artist, ArtistArgs,
        "Get an artist profile with their tracks by artist slug or name.",
    )
    registry.register(
        "search_artists", search_artists, SearchArtistsArgs,
        "Search artist profiles by name. Use when the user asks about artists rather than a single known artist.",
    )
    registry.register(
        "get_top_charts", get_top_charts, PlaylistLimitArgs,
        "Get the top charts/trending playlists on Flemoji.",
    )
    registry.register(
        "get_featured_playlists", get_featured_playlists, PlaylistLimitArgs,
        "Get featured playlists on Flemoji.",
    )
    registry.register(
        "get_trending_tracks", get_trending_tracks, TrackLimitArgs,
        "Get currently trending tracks based on play count and engagement.",
    )
    registry.register(
        "get_playlists_by_genre", get_playlists_by_genre, GenrePlaylistsArgs,
        "Get playlists filtered by genre (e.g., Amapiano, Afrobeat, House).",
    )
    registry.register(
        "get_playlists_by_province", get_playlists_by_province, ProvincePlaylistsArgs,
        "Get playlists featuring music from artists in a specific province.",
    )
    registry.register(
        "get_tracks_by_genre", get_tracks_by_genre, GenreTracksArgs,
        "Get popular tracks in a specific genre. Accepts a genre name (e.g., \"3 Step\", \"Afro Pop\", \"Amapiano\"), "
        "slug, or alias; it is matched to the right genre automatically.",
    )
    registry.register(
        "get_genres", get_genres, GenresArgs,
        "Get a list of all available music genres on the platform. Use this when users ask about available genres, "
        "what genres exist, or want to browse genres.",
    )

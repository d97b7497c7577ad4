"""Interface of the music data store used by the assistant tools."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from ..models.catalog import Artist, Genre, GenreStats, Playlist, PlaylistInfo, ProvinceStats, Track


@runtime_checkable
class MusicCatalog(Protocol):
    """Async lookups over tracks, playlists, artists and genres.

    Every record carries a stable ``id``. Implementations may raise
    ``CatalogError``; the tool-call loop turns that into tool-result data.
    """

    async def search_tracks(
        self,
        query: str,
        *,
        genre: Optional[str] = None,
        province: Optional[str] = None,
        limit: int = 20,
        order_by: str = "recent",
    ) -> List[Track]: ...

    async def get_track(self, track_id: str) -> Optional[Track]: ...

    async def get_tracks_by_genre(self, genre: str, limit: int = 20) -> List[Track]: ...

    async def get_trending_tracks(self, limit: int = 20) -> List[Track]: ...

    async def get_playlist(self, playlist_id: str) -> Optional[Playlist]: ...

    async def get_top_charts(self, limit: int = 10) -> List[PlaylistInfo]: ...

    async def get_featured_playlists(self, limit: int = 10) -> List[PlaylistInfo]: ...

    async def get_playlists_by_genre(self, genre: str, limit: int = 20) -> List[PlaylistInfo]: ...

    async def get_playlists_by_province(self, province: str, limit: int = 20) -> List[PlaylistInfo]: ...

    async def get_artist(self, identifier: str) -> Optional[Artist]: ...

    async def search_artists(self, query: str, limit: int = 10) -> List[Artist]: ...

    async def get_genres(self, limit: int = 50, include_inactive: bool = False) -> List[Genre]: ...

    async def get_genre_stats(self, genre: Optional[str] = None) -> List[GenreStats]: ...

    async def get_province_stats(self, province: Optional[str] = None) -> List[ProvinceStats]: ...

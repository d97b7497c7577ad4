"""In-memory music catalog, loadable from a JSON snapshot."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from ..errors import CatalogError
from ..models.catalog import Artist, Genre, GenreStats, Playlist, PlaylistInfo, ProvinceStats, Track

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _created(track: Track) -> datetime:
    ts = track.created_at
    if ts is None:
        return _EPOCH
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class InMemoryCatalog:
    """Catalog backed by plain lists of records.

    Usage:
        catalog = InMemoryCatalog.from_json("data/catalog.json")
        tracks = await catalog.get_tracks_by_genre("amapiano")
    """

    def __init__(
        self,
        *,
        tracks: Optional[Iterable[Track]] = None,
        artists: Optional[Iterable[Artist]] = None,
        playlists: Optional[Iterable[Playlist]] = None,
        genres: Optional[Iterable[Genre]] = None,
    ):
        self.tracks: List[Track] = list(tracks or [])
        self.artists: List[Artist] = list(artists or [])
        self.playlists: List[Playlist] = list(playlists or [])
        self.genres: List[Genre] = list(genres or [])

    # --- loading -----------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryCatalog":
        """Build a catalog from snapshot data. Stored records must carry an id."""
        catalog = cls(
            tracks=[Track.model_validate(t) for t in data.get("tracks", [])],
            artists=[Artist.model_validate(a) for a in data.get("artists", [])],
            playlists=[Playlist.model_validate(p) for p in data.get("playlists", [])],
            genres=[Genre.model_validate(g) for g in data.get("genres", [])],
        )
        for kind, records in (("track", catalog.tracks), ("artist", catalog.artists), ("playlist", catalog.playlists)):
            missing = sum(1 for r in records if not r.id)
            if missing:
                raise CatalogError(f"{missing} {kind} record(s) in the snapshot have no id", {"kind": kind})
        return catalog

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryCatalog":
        """Load a catalog snapshot; a missing file yields an empty catalog."""
        path = Path(path)
        if not path.exists():
            logger.warning("Catalog snapshot %s not found; starting with an empty catalog", path)
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            catalog = cls.from_dict(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise CatalogError(f"Invalid catalog snapshot {path}: {e}", {"path": str(path)}) from e
        logger.info(
            "Loaded catalog: %d tracks, %d artists, %d playlists, %d genres",
            len(catalog.tracks), len(catalog.artists), len(catalog.playlists), len(catalog.genres),
        )
        return catalog

    # --- helpers -----------------------------------------------------------

    def _resolve_genre(self, genre: str) -> str:
        """Map a genre name, slug or alias to the canonical genre name."""
        wanted = _norm(genre)
        for g in self.genres:
            candidates = {_norm(g.name), _norm(g.slug), *(_norm(a) for a in g.aliases)}
            if wanted in candidates:
                return g.name
        return genre

    def _genre_matches(self, track_genre: Optional[str], genre: str) -> bool:
        return _norm(track_genre) == _norm(self._resolve_genre(genre))

    def _artist_tracks(self, artist: Artist) -> List[Track]:
        return [t for t in self.tracks if t.artist_id == artist.id]

    # --- tracks ------------------------------------------------------------

    async def search_tracks(
        self,
        query: str,
        *,
        genre: Optional[str] = None,
        province: Optional[str] = None,
        limit: int = 20,
        order_by: str = "recent",
    ) -> List[Track]:
        terms = [t for t in _norm(query).split() if t]
        results: List[Track] = []
        for track in self.tracks:
            haystack = " ".join(
                _norm(v) for v in (track.title, track.artist, track.description, track.genre, track.album)
            )
            if terms and not all(term in haystack for term in terms):
                continue
            if genre and not self._genre_matches(track.genre, genre):
                continue
            if province and _norm(track.province) != _norm(province):
                continue
            results.append(track)

        if order_by == "popular":
            results.sort(key=lambda t: t.play_count, reverse=True)
        elif order_by == "alphabetical":
            results.sort(key=lambda t: _norm(t.title))
        else:
            results.sort(key=_created, reverse=True)
        return results[:limit]

    async def get_track(self, track_id: str) -> Optional[Track]:
        return next((t for t in self.tracks if t.id == track_id), None)

    async def get_tracks_by_genre(self, genre: str, limit: int = 20) -> List[Track]:
        matches = [t for t in self.tracks if self._genre_matches(t.genre, genre)]
        matches.sort(key=lambda t: t.play_count, reverse=True)
        return matches[:limit]

    async def get_trending_tracks(self, limit: int = 20) -> List[Track]:
        ranked = sorted(self.tracks, key=lambda t: t.play_count + 2 * t.like_count, reverse=True)
        return ranked[:limit]

    # --- playlists ---------------------------------------------------------

    async def get_playlist(self, playlist_id: str) -> Optional[Playlist]:
        return next((p for p in self.playlists if p.id == playlist_id), None)

    async def get_top_charts(self, limit: int = 10) -> List[PlaylistInfo]:
        return [p.info() for p in self.playlists if p.is_top_chart][:limit]

    async def get_featured_playlists(self, limit: int = 10) -> List[PlaylistInfo]:
        return [p.info() for p in self.playlists if p.is_featured][:limit]

    async def get_playlists_by_genre(self, genre: str, limit: int = 20) -> List[PlaylistInfo]:
        return [p.info() for p in self.playlists if self._genre_matches(p.genre, genre)][:limit]

    async def get_playlists_by_province(self, province: str, limit: int = 20) -> List[PlaylistInfo]:
        return [p.info() for p in self.playlists if _norm(p.province) == _norm(province)][:limit]

    # --- artists -----------------------------------------------------------

    async def get_artist(self, identifier: str) -> Optional[Artist]:
        wanted = _norm(identifier)
        for artist in self.artists:
            if wanted in (_norm(artist.id), _norm(artist.slug), _norm(artist.artist_name)):
                if artist.tracks:
                    return artist
                return artist.model_copy(update={"tracks": self._artist_tracks(artist)})
        return None

    async def search_artists(self, query: str, limit: int = 10) -> List[Artist]:
        wanted = _norm(query)
        found = [a for a in self.artists if wanted in _norm(a.artist_name) or wanted == _norm(a.slug)]
        return found[:limit]

    # --- genres & stats ----------------------------------------------------

    async def get_genres(self, limit: int = 50, include_inactive: bool = False) -> List[Genre]:
        genres = [g for g in self.genres if include_inactive or g.is_active]
        genres.sort(key=lambda g: (g.order, g.name))
        counted = [
            g.model_copy(update={"track_count": sum(1 for t in self.tracks if _norm(t.genre) == _norm(g.name))})
            for g in genres
        ]
        return counted[:limit]

    async def get_genre_stats(self, genre: Optional[str] = None) -> List[GenreStats]:
        grouped: Dict[str, List[Track]] = defaultdict(list)
        for track in self.tracks:
            if track.genre:
                grouped[track.genre].append(track)

        stats: List[GenreStats] = []
        for name, tracks in sorted(grouped.items()):
            if genre and _norm(name) != _norm(self._resolve_genre(genre)):
                continue
            top = max(tracks, key=lambda t: t.play_count)
            stats.append(GenreStats(
                genre=name,
                track_count=len(tracks),
                total_plays=sum(t.play_count for t in tracks),
                top_track=top.title,
            ))
        return stats

    async def get_province_stats(self, province: Optional[str] = None) -> List[ProvinceStats]:
        grouped: Dict[str, List[Track]] = defaultdict(list)
        for track in self.tracks:
            if track.province:
                grouped[track.province].append(track)

        stats: List[ProvinceStats] = []
        for name, tracks in sorted(grouped.items()):
            if province and _norm(name) != _norm(province):
                continue
            stats.append(ProvinceStats(
                province=name,
                artist_count=len({t.artist_id or t.artist for t in tracks}),
                track_count=len(tracks),
                total_plays=sum(t.play_count for t in tracks),
            ))
        return stats

"""Turn raw tool results into one typed response variant.

Pipeline:
    1. aggregate results by the kind of record they carry (tracks, artists,
       playlists, genre lists), whichever tool produced them
    2. deduplicate each set by id, first occurrence wins
    3. compile intent ("make me a playlist...") always yields a playlist
    4. otherwise pick the shape by fixed precedence:
       tracks+artists > tracks > artist(s) > playlists > single genre list
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..catalog.base import MusicCatalog
from ..config import COMPILED_PLAYLIST_MAX_TRACKS, MAX_OTHER_TRACKS
from ..models.agent import AgentContext, ToolResult
from ..models.catalog import Artist, Genre, PlaylistInfo, Track
from ..models.responses import (
    ArtistData,
    ArtistResponse,
    GenreListData,
    GenreListMetadata,
    GenreListResponse,
    PlaylistGridData,
    PlaylistGridMetadata,
    PlaylistGridResponse,
    PlaylistResponse,
    ResponseVariant,
    SearchResultsData,
    SearchResultsMetadata,
    SearchResultsResponse,
    TrackListData,
    TrackListMetadata,
    TrackListResponse,
)
from ..url_utils import construct_file_url
from .compilation import backfill_tracks, build_compiled_playlist, has_compile_intent, infer_genre
from .enrichment import featured_other_tracks, summarize_track
from .llm import ChatModel

logger = logging.getLogger(__name__)


@dataclass
class AggregatedResults:
    """Records of each kind collected across all successful tool calls."""

    tracks: List[Dict[str, Any]] = field(default_factory=list)
    artists: List[Dict[str, Any]] = field(default_factory=list)
    playlists: List[Dict[str, Any]] = field(default_factory=list)
    genre_lists: List[List[Dict[str, Any]]] = field(default_factory=list)


def _as_records(value: Any) -> List[Dict[str, Any]]:
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, dict)]
    return []


def aggregate_tool_results(tool_results: Iterable[ToolResult]) -> AggregatedResults:
    """Union records of the same kind, in call order. Failed calls are skipped."""
    agg = AggregatedResults()
    for result in tool_results:
        payload = result.parsed_result
        if result.error or not isinstance(payload, dict):
            continue

        agg.tracks.extend(_as_records(payload.get("tracks")))
        agg.tracks.extend(_as_records(payload.get("track")))
        agg.artists.extend(_as_records(payload.get("artists")))
        agg.artists.extend(_as_records(payload.get("artist")))
        agg.playlists.extend(_as_records(payload.get("playlists")))
        agg.playlists.extend(_as_records(payload.get("playlist")))
        if isinstance(payload.get("genres"), list):
            agg.genre_lists.append(_as_records(payload["genres"]))
    return agg


def _value_key(item: Dict[str, Any]) -> str:
    return json.dumps(item, sort_keys=True, default=str)


def dedupe_records(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Collapse records sharing an ``id``; id-less records compare by value."""
    seen_ids = set()
    seen_values = set()
    unique: List[Dict[str, Any]] = []
    for item in items:
        item_id = item.get("id")
        if item_id is not None and item_id != "":
            item_id = str(item_id)
            if item_id in seen_ids:
                continue
            seen_ids.add(item_id)
        else:
            key = _value_key(item)
            if key in seen_values:
                continue
            seen_values.add(key)
        unique.append(item)
    return unique


def _validate_all(model, items: Iterable[Dict[str, Any]]) -> list:
    """Validate records into ``model``, dropping the ones that don't fit."""
    valid = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.debug("Dropping %s record that failed validation: %s", model.__name__, e.errors()[:1])
    return valid


class ResponseNormalizer:
    """Maps one agent run's tool results to a response variant.

    Usage:
        normalizer = ResponseNormalizer(catalog=catalog, summarizer=model)
        variant = await normalizer.normalize(result.tool_results, query, context)
    """

    def __init__(
        self,
        *,
        catalog: Optional[MusicCatalog] = None,
        summarizer: Optional[ChatModel] = None,
        max_compiled_tracks: int = COMPILED_PLAYLIST_MAX_TRACKS,
        max_other_tracks: int = MAX_OTHER_TRACKS,
        file_url_base: Optional[str] = None,
    ):
        self.catalog = catalog
        self.summarizer = summarizer
        self.max_compiled_tracks = max_compiled_tracks
        self.max_other_tracks = max_other_tracks
        self.file_url_base = file_url_base

    async def normalize(
        self,
        tool_results: List[ToolResult],
        query: str,
        context: Optional[AgentContext] = None,
    ) -> Optional[ResponseVariant]:
        agg = aggregate_tool_results(tool_results)
        tracks: List[Track] = _validate_all(Track, dedupe_records(agg.tracks))
        artists: List[Artist] = _validate_all(Artist, dedupe_records(agg.artists))
        playlists: List[PlaylistInfo] = _validate_all(PlaylistInfo, dedupe_records(agg.playlists))

        if has_compile_intent(query):
            return await self._compile(tracks, query, context)

        if tracks and artists:
            return SearchResultsResponse(
                message=f"Found {len(tracks)} tracks and {len(artists)} artists",
                data=SearchResultsData(
                    tracks=self._resolve_urls(tracks),
                    artists=artists,
                    metadata=SearchResultsMetadata(query=query, total=len(tracks) + len(artists)),
                ),
            )

        if tracks:
            return await self._track_list(tracks, query, context)

        if len(artists) == 1:
            return ArtistResponse(message=f"Here's {artists[0].artist_name}", data=ArtistData(artist=artists[0]))

        if artists:
            return SearchResultsResponse(
                message=f"Found {len(artists)} artists",
                data=SearchResultsData(
                    artists=artists,
                    metadata=SearchResultsMetadata(query=query, total=len(artists)),
                ),
            )

        if playlists:
            return PlaylistGridResponse(
                message=f"Found {len(playlists)} playlists",
                data=PlaylistGridData(
                    playlists=playlists,
                    metadata=PlaylistGridMetadata(
                        genre=self._genre_for(query, context),
                        province=context.filters.province if context else None,
                        total=len(playlists),
                    ),
                ),
            )

        if len(agg.genre_lists) == 1:
            genres: List[Genre] = _validate_all(Genre, agg.genre_lists[0])
            return GenreListResponse(
                message=f"Here are {len(genres)} genres you can explore",
                data=GenreListData(genres=genres, metadata=GenreListMetadata(total=len(genres))),
            )

        return None

    # --- branches -------------------------------------------------------------

    async def _compile(
        self,
        tracks: List[Track],
        query: str,
        context: Optional[AgentContext],
    ) -> PlaylistResponse:
        genre = self._genre_for(query, context)
        if not tracks:
            tracks = await backfill_tracks(self.catalog, genre, limit=self.max_compiled_tracks)

        playlist = build_compiled_playlist(
            tracks,
            genre=genre,
            max_tracks=self.max_compiled_tracks,
            file_url_base=self.file_url_base,
        )
        n = len(playlist.tracks)
        message = f"I compiled a playlist with {n} track{'s' if n != 1 else ''} for you"
        if not n:
            message += ", but I couldn't find any matching tracks yet. You can start adding some"
        logger.info("Compiled playlist %s with %d tracks (genre=%s)", playlist.id, n, genre)
        return PlaylistResponse(message=message, data=playlist)

    async def _track_list(
        self,
        tracks: List[Track],
        query: str,
        context: Optional[AgentContext],
    ) -> TrackListResponse:
        tracks = self._resolve_urls(tracks)

        summary = None
        if len(tracks) == 1:
            summary = await summarize_track(self.summarizer, tracks[0])
            if summary:
                tracks[0] = tracks[0].model_copy(update={"summary": summary})

        other = await featured_other_tracks(
            self.catalog,
            {t.id for t in tracks},
            limit=self.max_other_tracks,
        )
        if other:
            other = self._resolve_urls(other)

        return TrackListResponse(
            message=f"Found {len(tracks)} track{'s' if len(tracks) != 1 else ''}",
            data=TrackListData(
                tracks=tracks,
                other=other,
                summary=summary,
                metadata=TrackListMetadata(
                    genre=self._genre_for(query, context),
                    province=context.filters.province if context else None,
                    total=len(tracks),
                    query=query,
                ),
            ),
        )

    # --- helpers ----------------------------------------------------------------

    def _resolve_urls(self, tracks: List[Track]) -> List[Track]:
        return [
            t.model_copy(update={"file_url": t.file_url or construct_file_url(t.file_path, self.file_url_base)})
            for t in tracks
        ]

    @staticmethod
    def _genre_for(query: str, context: Optional[AgentContext]) -> Optional[str]:
        genre = infer_genre(query)
        if genre is None and context is not None:
            genre = context.filters.genre
        return genre

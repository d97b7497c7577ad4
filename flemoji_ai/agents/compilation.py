"""Playlist compilation: turn search results into a virtual playlist on request."""

from __future__ import annotations

import logging
import re
import uuid
from typing import List, Optional, Sequence

from ..catalog.base import MusicCatalog
from ..config import COMPILED_PLAYLIST_MAX_TRACKS
from ..models.catalog import Playlist, PlaylistTrack, Track
from ..url_utils import construct_file_url
from .enrichment import attempt

logger = logging.getLogger(__name__)

# Whole words plus regular inflections: "compiled", "creating" and "makes"
# count, "Makeba", "maker" and "builder" do not
_COMPILE_STEMS = ("compil", "creat", "mak", "build", "assembl", "curat", "generat")
_COMPILE_RE = re.compile(
    r"\b(?:(?:" + "|".join(_COMPILE_STEMS) + r")(?:e|es|ed|ing|s)?|put(?:s|ting)?\s+together)\b",
    re.IGNORECASE,
)

SUPPORTED_GENRES = (
    "Amapiano",
    "Afro House",
    "Afrobeat",
    "Afro Pop",
    "Deep House",
    "House",
    "Gqom",
    "Kwaito",
    "Hip Hop",
    "Gospel",
    "Jazz",
    "R&B",
    "Maskandi",
    "3 Step",
    "Pop",
)

COMPILED_ID_PREFIX = "compiled-"
GENERIC_PLAYLIST_NAME = "Your Compiled Playlist"


def has_compile_intent(query: str) -> bool:
    """True when the query asks us to build something (a playlist, a mix...)."""
    return bool(_COMPILE_RE.search(query or ""))


def _genre_pattern(genre: str) -> re.Pattern:
    # "hip hop" should also match "hip-hop" and "hiphop"
    body = r"[\s\-]?".join(re.escape(word) for word in genre.lower().split())
    return re.compile(r"(?<![a-z0-9])" + body + r"s?(?![a-z0-9])")


_GENRE_PATTERNS = sorted(
    ((genre, _genre_pattern(genre)) for genre in SUPPORTED_GENRES),
    key=lambda item: len(item[0]),
    reverse=True,
)


def infer_genre(text: str) -> Optional[str]:
    """Find a supported genre named in ``text``; the longest name wins."""
    lowered = (text or "").lower()
    for genre, pattern in _GENRE_PATTERNS:
        if pattern.search(lowered):
            return genre
    return None


def new_compiled_playlist_id() -> str:
    return f"{COMPILED_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def is_compiled_playlist_id(playlist_id: str) -> bool:
    return playlist_id.startswith(COMPILED_ID_PREFIX)


def build_compiled_playlist(
    tracks: Sequence[Track],
    *,
    genre: Optional[str] = None,
    max_tracks: int = COMPILED_PLAYLIST_MAX_TRACKS,
    file_url_base: Optional[str] = None,
) -> Playlist:
    """Assemble a virtual playlist from ``tracks`` (already deduplicated).

    The result is never stored; its id carries ``COMPILED_ID_PREFIX`` so
    clients can offer "save playlist" instead of treating it as a real one.
    """
    selected = list(tracks)[:max_tracks]
    entries: List[PlaylistTrack] = []
    for position, track in enumerate(selected, start=1):
        resolved = track.model_copy(
            update={"file_url": track.file_url or construct_file_url(track.file_path, file_url_base)}
        )
        entries.append(PlaylistTrack(order=position, track=resolved))

    if genre:
        name = f"{genre} Mix"
        description = f"A curated {genre} playlist compiled just for you"
    else:
        name = GENERIC_PLAYLIST_NAME
        description = "A playlist compiled just for you from your search"

    cover = None
    if selected:
        cover = selected[0].cover_image_url or selected[0].album_artwork

    return Playlist(
        id=new_compiled_playlist_id(),
        name=name,
        description=description,
        cover_image=cover,
        genre=genre,
        track_count=len(entries),
        tracks=entries,
        is_virtual=True,
    )


async def backfill_tracks(
    catalog: Optional[MusicCatalog],
    genre: Optional[str],
    *,
    limit: int = COMPILED_PLAYLIST_MAX_TRACKS,
) -> List[Track]:
    """Fetch tracks for ``genre`` when the tools came back empty. Best-effort."""
    if catalog is None or not genre:
        return []

    async def _fetch() -> List[Track]:
        return await catalog.get_tracks_by_genre(genre, limit)

    tracks = await attempt(_fetch, label=f"backfill tracks for {genre}", default=[])
    logger.debug("Backfilled %d %s tracks for compiled playlist", len(tracks or []), genre)
    return tracks or []

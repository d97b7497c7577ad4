"""Best-effort enrichment steps. None of them may fail a response."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Set, TypeVar

from ..catalog.base import MusicCatalog
from ..models.catalog import Track
from .llm import ChatModel
from .loop import extract_text_content

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUMMARY_PROMPT = (
    "You write one or two upbeat sentences introducing a track to a listener on Flemoji, "
    "a South African music streaming platform. Mention the artist and genre. No lists, no emojis."
)


async def attempt(
    step: Callable[[], Awaitable[T]],
    *,
    label: str,
    default: Optional[T] = None,
) -> Optional[T]:
    """Run an optional async step; log and return ``default`` if it fails."""
    try:
        return await step()
    except Exception as e:
        logger.warning("Best-effort step %r failed: %s", label, e)
        return default


async def summarize_track(model: Optional[ChatModel], track: Track) -> Optional[str]:
    """Ask the model for a short blurb about ``track``; None when unavailable."""
    if model is None:
        return None

    details = [f"Title: {track.title}", f"Artist: {track.artist}"]
    if track.genre:
        details.append(f"Genre: {track.genre}")
    if track.album:
        details.append(f"Album: {track.album}")
    if track.description:
        details.append(f"Description: {track.description[:400]}")

    async def _call() -> Optional[str]:
        reply = await model.invoke([
            {"role": "system", "content": SUMMARY_PROMPT},
            {"role": "user", "content": "\n".join(details)},
        ])
        return extract_text_content(reply.content).strip() or None

    return await attempt(_call, label=f"summary for track {track.id}")


async def featured_other_tracks(
    catalog: Optional[MusicCatalog],
    exclude_ids: Set[str],
    *,
    limit: int,
) -> Optional[List[Track]]:
    """Tracks from curated (featured) playlists not already shown.

    Returns None when nothing is available so callers can omit the field.
    """
    if catalog is None or limit <= 0:
        return None

    async def _collect() -> List[Track]:
        picked: List[Track] = []
        seen = set(exclude_ids)
        for info in await catalog.get_featured_playlists(limit=10):
            playlist = await catalog.get_playlist(info.id)
            if playlist is None:
                continue
            for entry in sorted(playlist.tracks, key=lambda pt: pt.order):
                if entry.track.id in seen:
                    continue
                seen.add(entry.track.id)
                picked.append(entry.track)
                if len(picked) >= limit:
                    return picked
        return picked

    tracks = await attempt(_collect, label="featured other tracks", default=[])
    return tracks or None

"""Playback tools: build client-executable actions (play, queue, shuffle)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from ...models.responses import Action
from .registry import ToolArgs, ToolRegistry

PLAYBACK_TOOL_NAMES = [
    "create_play_track_action",
    "create_play_playlist_action",
    "create_queue_add_action",
    "create_shuffle_action",
]


class PlayTrackArgs(ToolArgs):
    track_id: str = Field(description="The unique ID of the track to play")
    label: Optional[str] = Field(default=None, description='Optional action label (defaults to "Play Track")')


class PlayPlaylistArgs(ToolArgs):
    playlist_id: str = Field(description="The unique ID of the playlist to play")
    label: Optional[str] = Field(default=None, description='Optional action label (defaults to "Play Playlist")')


class QueueAddArgs(ToolArgs):
    track_ids: List[str] = Field(min_length=1, description="Array of track IDs to add to the queue")
    label: Optional[str] = Field(default=None, description='Optional action label (defaults to "Add to Queue")')


class ShuffleArgs(ToolArgs):
    label: Optional[str] = Field(default=None, description='Optional action label (defaults to "Shuffle")')


def _result(action: Action, message: str) -> Dict[str, Any]:
    return {"action": action.to_json_dict(), "message": message}


async def create_play_track_action(args: PlayTrackArgs) -> Dict[str, Any]:
    action = Action(type="play_track", label=args.label or "Play Track", data={"trackId": args.track_id})
    return _result(action, "Track will be played")


async def create_play_playlist_action(args: PlayPlaylistArgs) -> Dict[str, Any]:
    action = Action(type="play_playlist", label=args.label or "Play Playlist", data={"playlistId": args.playlist_id})
    return _result(action, "Playlist will be played")


async def create_queue_add_action(args: QueueAddArgs) -> Dict[str, Any]:
    n = len(args.track_ids)
    label = args.label or f"Add {n} Track{'s' if n > 1 else ''} to Queue"
    action = Action(type="queue_add", label=label, data={"trackIds": list(args.track_ids)})
    return _result(action, "Tracks will be added to queue")


async def create_shuffle_action(args: ShuffleArgs) -> Dict[str, Any]:
    action = Action(type="shuffle", label=args.label or "Shuffle", data={})
    return _result(action, "Playback will be shuffled")


def register_playback_tools(registry: ToolRegistry) -> None:
    """Register playback tools. They build actions and never touch the catalog."""
    registry.register(
        "create_play_track_action", create_play_track_action, PlayTrackArgs,
        "Create an action to play a specific track. Returns a play action object.",
    )
    registry.register(
        "create_play_playlist_action", create_play_playlist_action, PlayPlaylistArgs,
        "Create an action to play a specific playlist. Returns a play playlist action object.",
    )
    registry.register(
        "create_queue_add_action", create_queue_add_action, QueueAddArgs,
        "Create an action to add tracks to the playback queue.",
    )
    registry.register(
        "create_shuffle_action", create_shuffle_action, ShuffleArgs,
        "Create an action to shuffle the current playlist or queue.",
    )

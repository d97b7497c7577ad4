"""Shared fixtures: a small in-memory catalog and a scripted chat model."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import pytest

from flemoji_ai.agents.tools.registry import get_default_registry
from flemoji_ai.catalog.memory import InMemoryCatalog
from flemoji_ai.models.agent import ModelReply, ToolCallRequest, ToolResult

CDN = "https://cdn.test"


def make_track(track_id: str, genre: str = "Amapiano", **extra: Any) -> Dict[str, Any]:
    data = {
        "id": track_id,
        "title": f"Track {track_id}",
        "artist": "Kabza Sounds",
        "artistId": "a-kabza",
        "genre": genre,
        "province": "Gauteng",
        "filePath": f"tracks/{track_id}.mp3",
        "playCount": 100,
    }
    data.update(extra)
    return data


CATALOG_DATA: Dict[str, Any] = {
    "genres": [
        {"id": "g1", "name": "Amapiano", "slug": "amapiano", "aliases": ["piano"], "order": 1},
        {"id": "g2", "name": "Gqom", "slug": "gqom", "order": 2},
        {"id": "g3", "name": "Hip Hop", "slug": "hip-hop", "aliases": ["rap"], "order": 3},
        {"id": "g4", "name": "Maskandi", "slug": "maskandi", "order": 4, "isActive": False},
    ],
    "artists": [
        {"id": "a-kabza", "artistName": "Kabza Sounds", "slug": "kabza-sounds", "genre": "Amapiano"},
        {"id": "a-durban", "artistName": "Durban Pulse", "slug": "durban-pulse", "genre": "Gqom"},
    ],
    "tracks": [
        make_track("t1", title="Mamelodi Sunset", playCount=500, likeCount=10,
                   coverImageUrl="https://img.test/t1.jpg", createdAt="2024-01-01T00:00:00Z"),
        make_track("t2", title="Log Drum Theory", playCount=900, likeCount=5, createdAt="2024-06-01T00:00:00Z"),
        make_track("t3", title="Private School Piano", playCount=300, likeCount=210, createdAt="2023-06-01T00:00:00Z"),
        make_track("t4", genre="Gqom", title="Umlazi Nights", artist="Durban Pulse", artistId="a-durban",
                   province="KwaZulu-Natal", playCount=700),
        make_track("t5", genre="Hip Hop", title="Flats Chronicles", artist="Cape Flow", artistId="a-cape",
                   province="Western Cape", playCount=50),
    ],
    "playlists": [
        {
            "id": "p-featured",
            "name": "Editor's Picks",
            "isFeatured": True,
            "tracks": [
                {"order": 2, "track": make_track("t5", genre="Hip Hop")},
                {"order": 1, "track": make_track("t4", genre="Gqom")},
                {"order": 3, "track": make_track("t9", genre="Jazz")},
            ],
        },
        {"id": "p-top", "name": "Top 50", "isTopChart": True, "tracks": [{"order": 1, "track": make_track("t2")}]},
        {"id": "p-kzn", "name": "KZN Heat", "genre": "Gqom", "province": "KwaZulu-Natal"},
    ],
}


class FakeChatModel:
    """Chat model that plays back scripted replies and records every call.

    Once the script runs out it answers with ``default`` text.
    """

    def __init__(self, replies: Optional[List[Union[ModelReply, Exception]]] = None, default: str = "Done."):
        self.replies = list(replies or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    async def invoke(self, messages, tools=None) -> ModelReply:
        self.calls.append({"messages": list(messages), "tools": tools})
        if not self.replies:
            return ModelReply(content=self.default)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def tool_call(name: str, call_id: str = "", **arguments: Any) -> ToolCallRequest:
    return ToolCallRequest(id=call_id, name=name, arguments=arguments)


def calls(*requests: ToolCallRequest, content: str = "") -> ModelReply:
    """A model reply requesting the given tool calls."""
    return ModelReply(content=content, tool_calls=list(requests))


def text(content: str) -> ModelReply:
    return ModelReply(content=content)


def result(name: str, payload: Any, error: Optional[str] = None) -> ToolResult:
    """A ToolResult as the loop would record it."""
    return ToolResult(tool_name=name, raw_result=payload, parsed_result=payload, error=error)


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog.from_dict(CATALOG_DATA)


@pytest.fixture
def registry(catalog):
    return get_default_registry(catalog)

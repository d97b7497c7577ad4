"""Analytics tools: genre and province statistics for recommendations."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field

from ...catalog.base import MusicCatalog
from .registry import ToolArgs, ToolRegistry

ANALYTICS_TOOL_NAMES = ["get_genre_stats", "get_province_stats"]


class GenreStatsArgs(ToolArgs):
    genre: Optional[str] = Field(default=None, description="Genre name to get stats for. If not provided, returns all genres.")


class ProvinceStatsArgs(ToolArgs):
    province: Optional[str] = Field(default=None, description="Province name to get stats for. If not provided, returns all provinces.")


def register_analytics_tools(registry: ToolRegistry, catalog: MusicCatalog) -> None:
    """Register analytics tools bound to ``catalog``."""

    async def get_genre_stats(args: GenreStatsArgs) -> Dict[str, Any]:
        stats = await catalog.get_genre_stats(args.genre)
        return {"stats": [s.to_json_dict() for s in stats]}

    async def get_province_stats(args: ProvinceStatsArgs) -> Dict[str, Any]:
        stats = await catalog.get_province_stats(args.province)
        return {"stats": [s.to_json_dict() for s in stats]}

    registry.register(
        "get_genre_stats", get_genre_stats, GenreStatsArgs,
        "Get statistics for a specific genre including track count, total plays, and top tracks.",
    )
    registry.register(
        "get_province_stats", get_province_stats, ProvinceStatsArgs,
        "Get statistics for a specific province including artist count, track count, and total plays.",
    )

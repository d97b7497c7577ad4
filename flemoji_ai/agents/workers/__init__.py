"""Specialized agents the router delegates to."""

from .discovery_agent import DiscoveryAgent
from .playback_agent import PlaybackAgent
from .recommendation_agent import RecommendationAgent

__all__ = ["DiscoveryAgent", "PlaybackAgent", "RecommendationAgent"]

"""Music catalog capability: the data store the tools query."""

from .base import MusicCatalog
from .memory import InMemoryCatalog

__all__ = ["MusicCatalog", "InMemoryCatalog"]

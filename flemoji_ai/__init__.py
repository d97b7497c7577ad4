"""Flemoji AI - conversational music assistant: intent routing, tool-call loop, typed responses."""

__version__ = "1.0.0"

__all__ = []

"""Exception hierarchy for the assistant core."""

from __future__ import annotations

from typing import Any, Dict, Optional


class AssistantError(Exception):
    """Base class for all assistant errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ModelInvocationError(AssistantError):
    """The language model could not be reached or returned an unusable reply."""


class ToolError(AssistantError):
    """A tool could not be executed."""


class ToolNotFoundError(ToolError):
    """The model asked for a tool that is not registered."""

    def __init__(self, name: str):
        super().__init__(f'Tool "{name}" not found', {"tool": name})
        self.name = name


class ToolArgumentError(ToolError):
    """Tool arguments failed schema validation."""

    def __init__(self, name: str, reason: str):
        super().__init__(f'Invalid arguments for tool "{name}": {reason}', {"tool": name})
        self.name = name


class CatalogError(AssistantError):
    """The music catalog failed to answer a lookup."""

"""Tool name -> handler mapping with OpenAI function schema generation."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ...errors import ToolArgumentError, ToolNotFoundError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[Any]]


class ToolArgs(BaseModel):
    """Base class for tool argument schemas. Models see camelCase names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ToolRegistry:
    """Registry mapping tool names to async handlers and argument schemas.

    Usage:
        registry = ToolRegistry()
        registry.register("search_tracks", handler_fn, SearchTracksArgs, "Search tracks")
        result = await registry.execute("search_tracks", {"query": "amapiano"})
        openai_tools = registry.get_openai_tools()
    """

    def __init__(self):
        self._handlers: Dict[str, ToolHandler] = {}
        self._arg_models: Dict[str, Type[ToolArgs]] = {}
        self._descriptions: Dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: ToolHandler,
        args_model: Type[ToolArgs],
        description: str,
    ) -> None:
        """Register a tool.

        Args:
            name: Tool name exposed to the model.
            handler: Async function(validated_args) -> JSON-serializable result.
            args_model: Pydantic model describing and validating the arguments.
            description: Text the model uses to decide when to call the tool.
        """
        self._handlers[name] = handler
        self._arg_models[name] = args_model
        self._descriptions[name] = description

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    async def execute(self, name: str, arguments: Dict[str, Any]) -> Any:
        """Validate arguments and run a tool by name.

        Raises:
            ToolNotFoundError: If the tool is not registered.
            ToolArgumentError: If the arguments do not match the schema.
        """
        if name not in self._handlers:
            raise ToolNotFoundError(name)

        try:
            args = self._arg_models[name].model_validate(arguments or {})
        except ValidationError as e:
            raise ToolArgumentError(name, str(e)) from e

        logger.debug("Executing tool %s with %s", name, arguments)
        return await self._handlers[name](args)

    def schema(self, name: str) -> Dict[str, Any]:
        """OpenAI function schema (name, description, parameters) for one tool."""
        parameters = self._arg_models[name].model_json_schema(by_alias=True)
        parameters.pop("title", None)
        for prop in parameters.get("properties", {}).values():
            prop.pop("title", None)
        return {
            "name": name,
            "description": self._descriptions[name],
            "parameters": parameters,
        }

    def get_openai_tools(self, names: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """Return OpenAI function-calling tool schemas.

        Args:
            names: Optional subset of tool names. If None, returns all.
        """
        tool_names = names or list(self._handlers.keys())
        return [
            {"type": "function", "function": self.schema(name)}
            for name in tool_names
            if name in self._handlers
        ]

    def subset(self, names: List[str]) -> "ToolRegistry":
        """A new registry holding only the named tools, in the given order."""
        sub = ToolRegistry()
        for name in names:
            if name in self._handlers:
                sub.register(name, self._handlers[name], self._arg_models[name], self._descriptions[name])
            else:
                logger.warning("Tool %s requested for subset but not registered", name)
        return sub

    def list_tools(self) -> List[str]:
        """List all registered tool names."""
        return list(self._handlers.keys())


def get_default_registry(catalog) -> ToolRegistry:
    """Build the default tool registry with all available tools."""
    registry = ToolRegistry()

    from .discovery_tools import register_discovery_tools
    from .playback_tools import register_playback_tools
    from .analytics_tools import register_analytics_tools

    register_discovery_tools(registry, catalog)
    register_playback_tools(registry)
    register_analytics_tools(registry, catalog)

    return registry

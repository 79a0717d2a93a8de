"""Tool registry for agent runs.

The registry holds the fixed tool set an agent may call. Host code builds
one registry per agent; there is no process-wide registry.
"""

import logging
from typing import Dict, Iterator, List, Optional

from ..agents.tools.tool_definition import Tool
from ..models.conversation_types import ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of tools available to one agent."""

    def __init__(self, tools: Optional[List[Tool]] = None):
        self._tools: Dict[str, Tool] = {}
        for tool in tools or []:
            self.register_tool(tool)

    def register_tool(self, tool: Tool) -> None:
        """Register a tool instance.

        Args:
            tool: Tool instance to register

        Raises:
            ValueError: If tool with same name already registered
            TypeError: If tool is not a Tool
        """
        if not isinstance(tool, Tool):
            raise TypeError(f"Expected a Tool, got {type(tool)}")

        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool '{tool.name}'")

    def get_tool(self, name: str) -> Optional[Tool]:
        """Get a registered tool by name, or None."""
        return self._tools.get(name)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> Dict[str, str]:
        """Map tool names to their descriptions."""
        return {name: tool.description for name, tool in self._tools.items()}

    def definitions(self) -> List[ToolDefinition]:
        """Tool definitions in registration order."""
        return [tool.definition() for tool in self._tools.values()]

    def unregister_tool(self, name: str) -> bool:
        """Unregister a tool.

        Returns:
            True if tool was unregistered, False if not found
        """
        if name in self._tools:
            del self._tools[name]
            logger.debug(f"Unregistered tool '{name}'")
            return True
        return False

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

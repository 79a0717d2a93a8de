"""Agent reasoning loop, tools and tool execution."""

from .errors import AgentError, FatalToolError, ToolNotFoundError
from .models import AgentOptions, AgentResult
from .runner import AgentRunner, AgentState
from .tools import Tool, ToolExecutor

__all__ = [
    "AgentError",
    "FatalToolError",
    "ToolNotFoundError",
    "AgentOptions",
    "AgentResult",
    "AgentRunner",
    "AgentState",
    "Tool",
    "ToolExecutor",
]

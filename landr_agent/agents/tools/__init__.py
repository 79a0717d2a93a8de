from .tool_definition import Tool
from .tool_executor import ToolExecutor

__all__ = ["Tool", "ToolExecutor"]

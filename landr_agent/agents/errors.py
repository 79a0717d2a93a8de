from typing import Optional


class AgentError(Exception):
    pass


class ToolNotFoundError(AgentError):
    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"unknown tool '{tool_name}'")


class FatalToolError(AgentError):
    """A tool failure that must abort the whole run instead of being fed back to the model."""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        self.tool_name = tool_name
        super().__init__(message)

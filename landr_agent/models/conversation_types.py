import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TurnRole(str, Enum):
    """Conversation turn roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ToolInvocation(BaseModel):
    """A model-emitted request to call a named tool.

    ``synthesized_id`` is unique among the pending invocations of one turn
    and must be echoed exactly by the matching tool-result turn.
    ``raw_arguments`` keeps the vendor's argument string so undecodable
    arguments can be reported back to the model.
    """

    synthesized_id: str
    tool_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    raw_arguments: Optional[str] = None

    def arguments_json(self) -> str:
        if self.raw_arguments is not None and not self.arguments:
            return self.raw_arguments
        return json.dumps(self.arguments)


class ToolDefinition(BaseModel):
    """Externally supplied description of a callable tool."""

    name: str
    description: str = ""
    parameter_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    model_config = {"frozen": True}

    def to_wire(self) -> Dict[str, Any]:
        """Vendor ``tools`` entry."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameter_schema,
            },
        }


class ConversationTurn(BaseModel):
    """One role-tagged unit of conversation."""

    role: TurnRole
    text: Optional[str] = None
    tool_invocations: Optional[List[ToolInvocation]] = None
    tool_result_correlation_id: Optional[str] = None
    tool_name: Optional[str] = None

    @property
    def has_tool_invocations(self) -> bool:
        return bool(self.tool_invocations)

    @classmethod
    def system(cls, text: str) -> "ConversationTurn":
        return cls(role=TurnRole.SYSTEM, text=text)

    @classmethod
    def user(cls, text: str) -> "ConversationTurn":
        return cls(role=TurnRole.USER, text=text)

    @classmethod
    def assistant(
        cls,
        text: Optional[str] = None,
        tool_invocations: Optional[List[ToolInvocation]] = None
    ) -> "ConversationTurn":
        return cls(role=TurnRole.ASSISTANT, text=text, tool_invocations=tool_invocations)

    @classmethod
    def tool_result(cls, invocation: ToolInvocation, content: Any) -> "ConversationTurn":
        """Package a tool result, correlated to its invocation by id."""
        text = content if isinstance(content, str) else json.dumps(content, default=str)
        return cls(
            role=TurnRole.TOOL,
            text=text,
            tool_result_correlation_id=invocation.synthesized_id,
            tool_name=invocation.tool_name,
        )

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from ...models.conversation_types import ToolDefinition


class Tool(BaseModel):
    """A callable tool plus the schema the model sees.

    ``fatal_errors`` lists exception types that abort the agent run when
    the handler raises them; every other handler error is returned to the
    model as data.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    handler: Callable
    fatal_errors: Tuple[Type[BaseException], ...] = ()

    def definition(self) -> ToolDefinition:
        schema = self.parameters or {"type": "object", "properties": {}}
        return ToolDefinition(name=self.name, description=self.description, parameter_schema=schema)

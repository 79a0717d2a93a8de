from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ...models.conversation_types import ConversationTurn


class AgentResult(BaseModel):
    content: str
    iterations: int
    tool_calls: int = 0
    transcript: List[ConversationTurn] = Field(default_factory=list)
    elapsed_ms: int
    provider: str
    model: str = ""
    usage: Dict[str, Any] = Field(default_factory=dict)

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List

from ...models.conversation_types import ConversationTurn


class AgentState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"
    FAILED = "failed"


TRANSITIONS: Dict[AgentState, FrozenSet[AgentState]] = {
    AgentState.AWAITING_MODEL: frozenset({AgentState.EXECUTING_TOOLS, AgentState.DONE, AgentState.FAILED}),
    AgentState.EXECUTING_TOOLS: frozenset({AgentState.AWAITING_MODEL, AgentState.FAILED}),
    AgentState.DONE: frozenset(),
    AgentState.FAILED: frozenset(),
}


@dataclass
class RunState:
    """Per-run conversation state. Never shared between runs."""
    turns: List[ConversationTurn] = field(default_factory=list)
    state: AgentState = AgentState.AWAITING_MODEL
    iterations: int = 0
    tool_calls: int = 0

    def transition(self, new_state: AgentState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"invalid agent state transition {self.state.value} -> {new_state.value}")
        self.state = new_state

    def fail(self) -> None:
        if self.state not in (AgentState.DONE, AgentState.FAILED):
            self.state = AgentState.FAILED

    @property
    def finished(self) -> bool:
        return self.state in (AgentState.DONE, AgentState.FAILED)

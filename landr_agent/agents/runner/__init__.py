from .agent_runner import AgentRunner
from .state import AgentState, RunState

__all__ = ["AgentRunner", "AgentState", "RunState"]

from .agent_options import AgentOptions
from .agent_result import AgentResult

__all__ = ["AgentOptions", "AgentResult"]

from .conversation_types import ConversationTurn, ToolDefinition, ToolInvocation, TurnRole
from .generation import GenerationParams, GenerationResponse, ProviderResult

__all__ = [
    "ConversationTurn",
    "ToolDefinition",
    "ToolInvocation",
    "TurnRole",
    "GenerationParams",
    "GenerationResponse",
    "ProviderResult",
]

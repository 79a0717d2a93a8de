from typing import Any, Dict, List, Optional, Sequence

from ...models.conversation_types import ConversationTurn, ToolDefinition, TurnRole
from ...models.generation import GenerationParams


def turn_to_message(turn: ConversationTurn) -> Dict[str, Any]:
    """Convert one turn to a chat-completions message.

    Shape: ``{role, content, tool_calls?, tool_call_id?}``. Assistant tool
    calls carry the synthesized id so the matching tool turn can echo it.
    """
    message: Dict[str, Any] = {
        "role": turn.role.value,
        "content": turn.text or "",
    }

    if turn.role == TurnRole.ASSISTANT and turn.tool_invocations:
        message["tool_calls"] = [
            {
                "id": invocation.synthesized_id,
                "type": "function",
                "function": {
                    "name": invocation.tool_name,
                    "arguments": invocation.arguments_json(),
                },
            }
            for invocation in turn.tool_invocations
        ]

    if turn.role == TurnRole.TOOL:
        if not turn.tool_result_correlation_id:
            raise ValueError("tool result turn is missing its correlation id")
        message["tool_call_id"] = turn.tool_result_correlation_id

    return message


def build_chat_payload(
    model: str,
    turns: List[ConversationTurn],
    tools: Optional[Sequence[ToolDefinition]] = None,
    params: Optional[GenerationParams] = None,
) -> Dict[str, Any]:
    """Build the request body for ``POST <base>/chat/completions``."""
    payload: Dict[str, Any] = {
        "model": model,
        "messages": [turn_to_message(turn) for turn in turns],
    }

    if tools:
        payload["tools"] = [tool.to_wire() for tool in tools]

    if params is not None:
        if params.temperature is not None:
            payload["temperature"] = params.temperature
        if params.max_tokens is not None:
            payload["max_tokens"] = params.max_tokens

    return payload

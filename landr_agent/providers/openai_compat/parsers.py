from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from ...models.conversation_types import ConversationTurn, ToolInvocation
from ...reliability.error_classifier import ErrorCategory
from ..base import ProviderError
from ..correlation import ToolCallIdAllocator

logger = logging.getLogger(__name__)


def decode_arguments(raw: Optional[str]) -> Tuple[Dict[str, Any], Optional[str]]:
    """Decode a tool-call argument string.

    Returns the decoded arguments and, when decoding failed, the raw string
    so the failure can be reported back to the model.
    """
    if raw is None or not raw.strip():
        return {}, None
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return {}, raw
    if not isinstance(decoded, dict):
        return {}, raw
    return decoded, None


def strip_json_fence(text: str) -> str:
    """Remove a markdown code fence some models wrap around JSON answers."""
    cleaned = text.strip()
    for prefix in ("```json", "```"):
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_tool_calls(tool_calls: Any) -> List[ToolInvocation]:
    """Convert vendor tool calls into invocations with synthesized ids."""
    allocator = ToolCallIdAllocator()
    invocations = []
    for call in tool_calls or []:
        function = getattr(call, "function", None)
        name = getattr(function, "name", None)
        if not name:
            logger.warning("Skipping tool call without a function name")
            continue
        raw = getattr(function, "arguments", None)
        arguments, undecodable = decode_arguments(raw)
        invocations.append(
            ToolInvocation(
                synthesized_id=allocator.allocate(name),
                tool_name=name,
                arguments=arguments,
                raw_arguments=undecodable,
            )
        )
    return invocations


def parse_chat_completion(completion: Any, provider: str) -> Tuple[ConversationTurn, Optional[str], Dict[str, Any]]:
    """Extract the response turn, finish reason and usage from a chat completion.

    Raises:
        ProviderError: If the completion has no choices
    """
    choices = getattr(completion, "choices", None)
    if not choices:
        raise ProviderError(
            "no choices in response",
            provider=provider,
            category=ErrorCategory.MALFORMED_RESPONSE,
        )

    choice = choices[0]
    message = choice.message
    invocations = parse_tool_calls(getattr(message, "tool_calls", None))

    turn = ConversationTurn.assistant(
        text=message.content,
        tool_invocations=invocations or None,
    )

    usage: Dict[str, Any] = {}
    if getattr(completion, "usage", None) is not None:
        usage = completion.usage.model_dump(exclude_none=True)

    return turn, choice.finish_reason, usage

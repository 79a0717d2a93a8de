from __future__ import annotations

import logging
from typing import List

from ..config import constants
from ..models.conversation_types import ConversationTurn

logger = logging.getLogger(__name__)


def total_chars(turns: List[ConversationTurn]) -> int:
    return sum(len(turn.text or "") for turn in turns)


def enforce_token_budget(
    turns: List[ConversationTurn],
    max_input_chars: int = constants.DEFAULT_MAX_INPUT_CHARS
) -> List[ConversationTurn]:
    """
    Fit the conversation into an input budget.

    When the summed text length exceeds ``max_input_chars`` every turn longer
    than an equal per-turn share is cut to that share and marked. Role order
    is preserved and the input turns are not modified.
    """
    if not turns:
        return []

    current = total_chars(turns)
    if current <= max_input_chars:
        return list(turns)

    share = max_input_chars // len(turns)
    logger.warning(
        f"Input too large ({current} chars, ~{current // constants.CHARS_PER_TOKEN} tokens), "
        f"truncating turns to {share} chars each",
        extra={"max_input_chars": max_input_chars, "turns": len(turns)}
    )

    result = []
    for turn in turns:
        text = turn.text or ""
        if len(text) > share:
            turn = turn.model_copy(update={"text": text[:share] + constants.TRUNCATION_MARKER})
        result.append(turn)
    return result

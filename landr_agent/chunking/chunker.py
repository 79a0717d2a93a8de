"""
Boundary-aware content chunking.

Oversized text is cut into overlapping ``[start, end)`` windows. Each cut
prefers a paragraph break, then a sentence break, found in the second half
of the window; without one the naive cut is kept.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from ..config import constants

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"
SENTENCE_BREAK = ". "


@dataclass(frozen=True)
class ChunkConfig:
    """Static chunking configuration."""
    max_chunk_chars: int
    overlap_chars: int
    max_total_chars: int
    max_chunks: Optional[int] = None

    def __post_init__(self):
        if self.max_chunk_chars <= 0:
            raise ValueError("max_chunk_chars must be positive")
        if self.overlap_chars < 0:
            raise ValueError("overlap_chars must not be negative")
        if self.overlap_chars >= self.max_chunk_chars:
            raise ValueError(
                f"overlap_chars ({self.overlap_chars}) must be smaller than "
                f"max_chunk_chars ({self.max_chunk_chars})"
            )
        if self.max_chunks is not None and self.max_chunks < 1:
            raise ValueError("max_chunks must be at least 1")

    @classmethod
    def default(cls) -> "ChunkConfig":
        """Sizing used for flashcard extraction."""
        return cls(
            max_chunk_chars=constants.CHUNK_SIZE,
            overlap_chars=constants.CHUNK_OVERLAP,
            max_total_chars=constants.CHUNK_SIZE,
            max_chunks=constants.CHUNK_MAX_COUNT,
        )

    @classmethod
    def for_summary(cls) -> "ChunkConfig":
        """Sizing used for article summarisation."""
        return cls(
            max_chunk_chars=constants.SUMMARY_CHUNK_SIZE,
            overlap_chars=constants.SUMMARY_CHUNK_OVERLAP,
            max_total_chars=constants.SUMMARY_MAX_TOTAL_CHARS,
        )


@dataclass
class Chunk:
    """One contiguous slice of the input plus its processing outcome."""
    index: int
    text: str
    start: int
    end: int
    result: Any = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.result is not None


def estimate_tokens(text: str) -> int:
    """Rough token estimate (4 characters per token)."""
    return len(text) // constants.CHARS_PER_TOKEN


def split_into_chunks(content: str, config: ChunkConfig) -> List[Chunk]:
    """
    Split content into overlapping chunks.

    Content that fits within ``max_total_chars`` comes back as a single
    chunk equal to the input. ``config.max_chunks`` caps the count when set.
    """
    if len(content) <= config.max_total_chars:
        return [Chunk(index=0, text=content, start=0, end=len(content))]
    return _split(content, config, config.max_chunks)


def split_into_chunks_bounded(content: str, config: ChunkConfig, max_chunks: int) -> List[Chunk]:
    """Same as :func:`split_into_chunks` with a hard cap on the chunk count."""
    if max_chunks < 1:
        raise ValueError("max_chunks must be at least 1")
    if len(content) <= config.max_total_chars:
        return [Chunk(index=0, text=content, start=0, end=len(content))]
    if config.max_chunks is not None:
        max_chunks = min(max_chunks, config.max_chunks)
    return _split(content, config, max_chunks)


def _split(content: str, config: ChunkConfig, max_chunks: Optional[int]) -> List[Chunk]:
    length = len(content)
    size = config.max_chunk_chars
    chunks: List[Chunk] = []
    start = 0

    while start < length:
        if max_chunks is not None and len(chunks) >= max_chunks:
            logger.warning(
                "Chunk limit reached, dropping remaining content",
                extra={"max_chunks": max_chunks, "dropped_chars": length - start}
            )
            break

        end = min(start + size, length)
        if end < length:
            end = _find_boundary(content, start, end, size)

        chunks.append(Chunk(index=len(chunks), text=content[start:end], start=start, end=end))

        if end >= length:
            break

        next_start = max(end - config.overlap_chars, 0)
        # No real progress: skip the overlap so the loop always terminates
        if next_start <= start or next_start <= end - size:
            next_start = end
        start = next_start

    logger.debug(f"Split {length} chars into {len(chunks)} chunks")
    return chunks


def _find_boundary(content: str, start: int, end: int, size: int) -> int:
    """Move ``end`` back to a paragraph or sentence break past the chunk midpoint."""
    midpoint = start + size // 2
    for delimiter in (PARAGRAPH_BREAK, SENTENCE_BREAK):
        position = content.rfind(delimiter, midpoint, end)
        if position != -1:
            return position + len(delimiter)
    return end

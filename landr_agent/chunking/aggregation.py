"""
Chunk processing and result aggregation.

Chunks are processed one after another through the retry engine so a
single vendor rate limit is respected; a failing chunk is recorded on
the chunk and does not stop its siblings.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TypeVar

from ..config import constants
from ..reliability.retry import RetryManager, RetryPolicy
from .chunker import Chunk
from .errors import ChunkProcessingError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUMMARY_SEPARATOR = "\n\n---\n\n"
DEFAULT_SEPARATOR = "\n"


def aggregate_results(chunks: Iterable[Chunk], mode: str = "default") -> str:
    """
    Merge successful chunk outputs in chunk order.

    Args:
        chunks: Processed chunks
        mode: ``"summary"`` separates segments with a visible rule,
            ``"default"`` joins them with newlines

    Returns:
        The merged text; empty if no chunk produced output
    """
    if mode not in ("default", "summary"):
        raise ValueError(f"Unknown aggregation mode: {mode}")

    parts = []
    for chunk in sorted(chunks, key=lambda c: c.index):
        if chunk.error is not None or chunk.result is None:
            continue
        text = str(chunk.result).strip()
        if text:
            parts.append(text)

    separator = SUMMARY_SEPARATOR if mode == "summary" else DEFAULT_SEPARATOR
    return separator.join(parts)


def normalize_key(value: str, prefix_len: int = constants.DEDUP_KEY_PREFIX_LEN) -> str:
    return value.strip().casefold()[:prefix_len]


def deduplicate_records(
    records: Iterable[T],
    key: Callable[[T], str],
    prefix_len: int = constants.DEDUP_KEY_PREFIX_LEN
) -> List[T]:
    """Drop records whose normalized key was already seen, keeping first-seen order."""
    seen = set()
    unique: List[T] = []
    for record in records:
        normalized = normalize_key(key(record) or "", prefix_len)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique.append(record)
    return unique


async def process_chunks(
    chunks: List[Chunk],
    fn: Callable[[Chunk], Awaitable[Any]],
    *,
    retry_manager: Optional[RetryManager] = None,
    operation: str = "process_chunk",
    policy: Optional[RetryPolicy] = None,
    inter_chunk_delay: float = constants.INTER_CHUNK_DELAY_SECONDS
) -> List[Chunk]:
    """
    Run ``fn`` over each chunk sequentially, storing results on the chunks.

    Raises:
        ChunkProcessingError: If every chunk failed
        asyncio.CancelledError: If the caller is cancelled; pending sleeps stop immediately
    """
    retry_manager = retry_manager or RetryManager()

    for position, chunk in enumerate(chunks):
        if position > 0 and inter_chunk_delay > 0:
            logger.debug(f"Waiting {inter_chunk_delay}s before chunk {chunk.index + 1}/{len(chunks)}")
            await asyncio.sleep(inter_chunk_delay)

        label = f"{operation}.chunk{chunk.index}"
        try:
            chunk.result = await retry_manager.execute_with_retry(
                lambda c=chunk: fn(c),
                operation=label,
                policy=policy,
            )
        except Exception as e:  # noqa: BLE001
            chunk.error = e
            logger.warning(
                f"Chunk {chunk.index + 1}/{len(chunks)} failed: {e}",
                extra={"operation": operation, "chunk_index": chunk.index}
            )

    failures = [c.error for c in chunks if c.error is not None]
    if chunks and len(failures) == len(chunks):
        raise ChunkProcessingError(
            f"all {len(chunks)} chunks failed for {operation}: {failures[-1]}",
            operation=operation,
            errors=failures,
        )

    logger.info(
        f"Processed {len(chunks) - len(failures)}/{len(chunks)} chunks",
        extra={"operation": operation, "failed": len(failures)}
    )
    return chunks

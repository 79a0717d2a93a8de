"""Content chunking, per-chunk processing and result aggregation."""

from .aggregation import aggregate_results, deduplicate_records, process_chunks
from .chunker import (
    Chunk,
    ChunkConfig,
    estimate_tokens,
    split_into_chunks,
    split_into_chunks_bounded,
)
from .errors import ChunkProcessingError

__all__ = [
    "Chunk",
    "ChunkConfig",
    "ChunkProcessingError",
    "aggregate_results",
    "deduplicate_records",
    "estimate_tokens",
    "process_chunks",
    "split_into_chunks",
    "split_into_chunks_bounded",
]

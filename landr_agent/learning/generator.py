"""
Flashcard, summary and search-query generation for learning materials.

Long material is cut with ``ChunkConfig.default()`` and processed one chunk
at a time so a single rate-limited vendor is not flooded. Chunk outputs are
merged into one set: the first non-empty title wins, tags are unioned and
cards with the same question are dropped.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from pydantic import ValidationError

from ..chunking import ChunkConfig, deduplicate_records, estimate_tokens, process_chunks, split_into_chunks
from ..chunking.chunker import Chunk
from ..config import constants
from ..config.settings import RuntimeSettings
from ..orchestration.dispatcher import build_provider_from_settings
from ..providers.base import ProviderAdapter
from ..providers.openai_compat.parsers import strip_json_fence
from ..reliability.retry import RetryManager, RetryPolicy
from . import prompts
from .errors import FlashcardFormatError
from .models import FlashcardSet, MaterialResult

logger = logging.getLogger(__name__)


@dataclass
class MaterialConfig:
    """Sizing and pacing for material processing."""
    chunk_config: ChunkConfig = field(default_factory=ChunkConfig.default)
    chunking_token_threshold: int = constants.FLASHCARD_CHUNKING_TOKEN_THRESHOLD
    max_content_chars: int = constants.FLASHCARD_MAX_CONTENT_CHARS
    summary_max_content_chars: int = constants.MATERIAL_SUMMARY_MAX_CONTENT_CHARS
    inter_chunk_delay_seconds: float = constants.INTER_CHUNK_DELAY_SECONDS
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy.default)


def parse_flashcards(raw: str) -> FlashcardSet:
    """
    Parse a flashcard answer.

    Raises:
        FlashcardFormatError: If the answer is not a JSON object with the
            expected title, tags and flashcards fields
    """
    try:
        data = json.loads(strip_json_fence(raw))
    except json.JSONDecodeError:
        raise FlashcardFormatError("flashcard answer is not valid JSON", raw=raw) from None
    if not isinstance(data, dict):
        raise FlashcardFormatError("flashcard answer is not a JSON object", raw=raw)
    try:
        return FlashcardSet.model_validate(data)
    except ValidationError as e:
        raise FlashcardFormatError(f"flashcard answer has unexpected fields: {e.error_count()} errors", raw=raw) from e


def merge_flashcard_sets(sets: Iterable[FlashcardSet]) -> FlashcardSet:
    title = ""
    tags: List[str] = []
    cards = []
    for item in sets:
        if not title and item.title:
            title = item.title
        for tag in item.tags:
            if tag not in tags:
                tags.append(tag)
        cards.extend(item.flashcards)

    unique = deduplicate_records(cards, key=lambda card: card.question)
    if len(unique) < len(cards):
        logger.debug(f"Dropped {len(cards) - len(unique)} duplicate flashcards")
    return FlashcardSet(title=title, tags=tags, flashcards=unique)


class MaterialGenerator:
    """
    Generates study aids for a piece of material.

    ``summary_provider`` lets summaries go to a different vendor than
    flashcards so both requests do not share one rate limit.
    """

    def __init__(
        self,
        provider: ProviderAdapter,
        summary_provider: Optional[ProviderAdapter] = None,
        config: Optional[MaterialConfig] = None
    ):
        self.provider = provider
        self.summary_provider = summary_provider or provider
        self.config = config or MaterialConfig()
        self.retry_manager = RetryManager(self.config.retry_policy)

    @classmethod
    def from_settings(cls, settings: Optional[RuntimeSettings] = None, config: Optional[MaterialConfig] = None):
        """Build a generator over the provider stack configured in the environment."""
        settings = settings or RuntimeSettings.from_env()
        return cls(build_provider_from_settings(settings), config=config)

    async def generate_flashcards(self, content: str, existing_tags: Optional[List[str]] = None) -> FlashcardSet:
        """One flashcard request for ``content``, truncated to the configured size."""
        if len(content) > self.config.max_content_chars:
            logger.info(f"Truncating flashcard content from {len(content)} to {self.config.max_content_chars} chars")
            content = content[:self.config.max_content_chars]

        prompt = prompts.FLASHCARDS.format(existing_tags=", ".join(existing_tags or []), content=content)
        result = parse_flashcards(await self.provider.complete(prompt))
        logger.info(
            f"Parsed flashcards: title='{result.title}', tags={len(result.tags)}, cards={len(result.flashcards)}",
            extra={"provider": self.provider.name}
        )
        return result

    async def generate_flashcards_from_chunks(
        self,
        content: str,
        existing_tags: Optional[List[str]] = None
    ) -> FlashcardSet:
        """
        Chunk ``content`` and merge per-chunk flashcards.

        Raises:
            ChunkProcessingError: If every chunk failed
        """
        chunks = split_into_chunks(content, self.config.chunk_config)
        if len(chunks) == 1:
            return await self.retry_manager.execute_with_retry(
                lambda: self.generate_flashcards(content, existing_tags),
                operation="flashcards",
            )

        logger.info(f"Generating flashcards from {len(chunks)} chunks sequentially")

        async def flashcards_for(chunk: Chunk) -> FlashcardSet:
            return await self.generate_flashcards(chunk.text, existing_tags)

        await process_chunks(
            chunks,
            flashcards_for,
            retry_manager=self.retry_manager,
            operation="flashcards",
            inter_chunk_delay=self.config.inter_chunk_delay_seconds,
        )
        merged = merge_flashcard_sets(c.result for c in chunks if c.succeeded)
        logger.info(f"Generated {len(merged.flashcards)} unique flashcards from {len(chunks)} chunks")
        return merged

    async def generate_summary(self, content: str) -> str:
        """Whole-material study summary."""
        if not content.strip():
            raise ValueError("no content to summarise")
        limit = self.config.summary_max_content_chars
        if len(content) > limit:
            logger.info(f"Truncating summary content from {len(content)} to {limit} chars")
            content = content[:limit]
        summary = await self.summary_provider.complete(prompts.MATERIAL_SUMMARY.format(content=content))
        return summary.strip()

    async def optimize_search_query(self, interests: str) -> str:
        """Turn free-form interests into a single news search query."""
        if not interests.strip():
            raise ValueError("interests must not be empty")
        answer = await self.provider.complete(prompts.QUERY_OPTIMIZATION.format(interests=interests))
        query = answer.strip().strip('"')[:constants.SEARCH_QUERY_MAX_CHARS]
        logger.info(f"Generated search query: {query}")
        return query

    async def process_material(self, content: str, existing_tags: Optional[List[str]] = None) -> MaterialResult:
        """
        Generate flashcards and the summary concurrently.

        Material above the token threshold is chunked; smaller material is
        sent in one retried request. A failed summary leaves ``summary``
        unset, a failed flashcard generation fails the whole call.
        """
        if not content.strip():
            raise ValueError("material has no content")

        if estimate_tokens(content) > self.config.chunking_token_threshold:
            flashcards = self.generate_flashcards_from_chunks(content, existing_tags)
        else:
            flashcards = self.retry_manager.execute_with_retry(
                lambda: self.generate_flashcards(content, existing_tags),
                operation="flashcards",
            )

        cards, summary = await asyncio.gather(flashcards, self.generate_summary(content), return_exceptions=True)
        if isinstance(cards, BaseException):
            raise cards
        if isinstance(summary, BaseException):
            logger.warning(f"Summary generation failed, continuing without one: {summary}")
            summary = None

        return MaterialResult(title=cards.title, tags=cards.tags, flashcards=cards.flashcards, summary=summary)

"""
Tools exposed to the daily-feed agent.

Handlers raise plain exceptions for bad input or backend failures; the
executor turns those into error results for the model. Only
configuration errors abort the run.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from ...chunking import ChunkConfig, aggregate_results, process_chunks, split_into_chunks
from ...chunking.chunker import Chunk
from ...config import constants
from ...config.errors import ConfigurationError
from ...providers.openai_compat.parsers import strip_json_fence
from ...reliability.retry import RetryManager, RetryPolicy
from ..tools.tool_definition import Tool
from . import prompts
from .dependencies import AgentDependencies, DailyArticle

logger = logging.getLogger(__name__)

DEFAULT_EVAL_CRITERIA = "Ensure the article is informative, relevant to their interests, and not clickbait."
FEED_DISABLED_MESSAGE = "Feed is disabled or no interests set."


@dataclass
class FeedToolConfig:
    """Limits and pacing for the feed tools."""
    query_delay_seconds: float = constants.FEED_QUERY_DELAY_SECONDS
    max_search_chars: int = constants.FEED_MAX_SEARCH_CHARS
    max_search_articles: int = constants.FEED_MAX_SEARCH_ARTICLES
    results_per_query: int = constants.FEED_RESULTS_PER_QUERY
    snippet_chars: int = constants.FEED_SNIPPET_CHARS
    scrape_preview_chars: int = constants.FEED_SCRAPE_PREVIEW_CHARS
    eval_batch_size: int = constants.FEED_EVAL_BATCH_SIZE
    eval_batch_delay_seconds: float = constants.FEED_EVAL_BATCH_DELAY_SECONDS
    inter_chunk_delay_seconds: float = constants.INTER_CHUNK_DELAY_SECONDS
    chunk_config: ChunkConfig = field(default_factory=ChunkConfig.for_summary)
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy.default)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def clean_url(url: str) -> str:
    """Drop the query string to save tokens."""
    return url.split("?", 1)[0]


def normalize_provider(provider: Optional[str]) -> str:
    value = (provider or "").lower()
    if value not in constants.FEED_ARTICLE_PROVIDERS:
        return constants.FEED_DEFAULT_ARTICLE_PROVIDER
    return value


def normalize_score(score: float) -> float:
    """Map 0-100 style scores onto 0-1 and cap absurd values at 1."""
    if score > 1.0:
        if score <= 100.0:
            return score / 100.0
        return 1.0
    return score


class FeedTools:
    """Handlers for the daily-feed tool set."""

    def __init__(self, deps: AgentDependencies, config: Optional[FeedToolConfig] = None):
        self.deps = deps
        self.config = config or FeedToolConfig()
        self.retry_manager = RetryManager(self.config.retry_policy)

    async def get_user_preferences(self, user_id: str = "") -> Dict[str, str]:
        logger.info(f"Fetching feed preferences for user {user_id}")
        if not user_id:
            raise ValueError("missing user_id")

        try:
            prefs = await self.deps.store.get_feed_preferences(user_id)
        except ConfigurationError:
            raise
        except Exception as e:
            raise RuntimeError(f"failed to get prefs: {e}") from e

        if not prefs.feed_enabled or not prefs.interest_prompt:
            return {"interests": FEED_DISABLED_MESSAGE, "eval_criteria": ""}

        return {
            "interests": prefs.interest_prompt,
            "eval_criteria": prefs.feed_eval_prompt or DEFAULT_EVAL_CRITERIA,
        }

    async def search_news(self, queries: List[str]) -> Dict[str, str]:
        cfg = self.config
        articles: List[str] = []
        total_chars = 0

        logger.info(f"Searching {len(queries)} queries across {len(self.deps.search_providers)} providers")
        for position, query in enumerate(queries):
            if len(articles) >= cfg.max_search_articles:
                break
            if position > 0 and cfg.query_delay_seconds > 0:
                await asyncio.sleep(cfg.query_delay_seconds)

            for provider in self.deps.search_providers:
                if len(articles) >= cfg.max_search_articles or total_chars >= cfg.max_search_chars:
                    break
                try:
                    results = await provider.search_news(query, cfg.results_per_query)
                except ConfigurationError:
                    raise
                except Exception as e:
                    logger.warning(f"Search provider {provider.name} failed for '{query}': {e}")
                    continue

                for result in results:
                    if len(articles) >= cfg.max_search_articles or total_chars >= cfg.max_search_chars:
                        break
                    entry = (
                        f"Title: {result.title}\n"
                        f"URL: {result.url}\n"
                        f"Content: {truncate(result.snippet, cfg.snippet_chars)}\n"
                        f"Source: {result.provider.upper()} (Set provider='{result.provider}')\n"
                        f"---"
                    )
                    articles.append(entry)
                    total_chars += len(entry)

        if not articles:
            return {"articles": "No articles found."}
        logger.info(f"Collected {len(articles)} articles")
        return {"articles": f"Found {len(articles)} articles:\n\n" + "\n\n".join(articles)}

    async def scrape_content(self, url: str) -> Dict[str, Any]:
        if not url:
            raise ValueError("missing url")
        text = await self.deps.scraper.scrape(url)
        return {
            "url": url,
            "length": len(text),
            "content": truncate(text, self.config.scrape_preview_chars),
        }

    async def summarize_content(self, url: str = "", content: str = "") -> Dict[str, Any]:
        """Scrape (when given a URL) and summarise chunk by chunk."""
        if not content:
            if not url:
                raise ValueError("either url or content is required")
            content = await self.deps.scraper.scrape(url)
        if not content.strip():
            raise ValueError("no content to summarise")

        chunks = split_into_chunks(content, self.config.chunk_config)

        async def summarize_chunk(chunk: Chunk) -> str:
            return await self.deps.provider.complete(prompts.CHUNK_SUMMARY.format(content=chunk.text))

        await process_chunks(
            chunks,
            summarize_chunk,
            retry_manager=self.retry_manager,
            operation="summarize_content",
            inter_chunk_delay=self.config.inter_chunk_delay_seconds,
        )
        failed = sum(1 for c in chunks if c.error is not None)
        return {
            "url": url,
            "summary": aggregate_results(chunks, mode="summary"),
            "chunks": len(chunks),
            "failed_chunks": failed,
        }

    async def evaluate_urls_batch(
        self,
        urls: List[Dict[str, Any]],
        interests: str = "",
        eval_criteria: str = ""
    ) -> Dict[str, Any]:
        cfg = self.config
        if not urls:
            return {"scores": []}
        criteria = eval_criteria or DEFAULT_EVAL_CRITERIA

        scores: List[Dict[str, Any]] = []
        batch_size = max(cfg.eval_batch_size, 1)
        for start in range(0, len(urls), batch_size):
            if start > 0 and cfg.eval_batch_delay_seconds > 0:
                await asyncio.sleep(cfg.eval_batch_delay_seconds)
            batch = urls[start:start + batch_size]
            batch_scores = await self._score_batch(batch, interests, criteria)
            for item in batch:
                scores.append({
                    "url": item.get("url", ""),
                    "title": item.get("title", ""),
                    "snippet": item.get("snippet", ""),
                    "provider": item.get("provider", ""),
                    "score": batch_scores.get(clean_url(item.get("url", "")), constants.FEED_DEFAULT_SCORE),
                })

        logger.info(f"Evaluated {len(scores)} URLs")
        return {"scores": scores}

    async def _score_batch(self, batch: List[Dict[str, Any]], interests: str, criteria: str) -> Dict[str, float]:
        lines = []
        for number, item in enumerate(batch, start=1):
            lines.append(f"{number}. {item.get('title', '')} | {clean_url(item.get('url', ''))}")
            snippet = truncate(item.get("snippet", ""), constants.FEED_EVAL_SNIPPET_CHARS)
            if snippet:
                lines.append(f"   {snippet}")
        prompt = prompts.URL_BATCH_EVALUATION.format(
            interests=interests, criteria=criteria, urls="\n".join(lines) + "\n"
        )

        try:
            response = await self.deps.provider.complete(prompt)
        except Exception as e:
            logger.warning(f"URL batch scoring failed, using default scores: {e}")
            return {}

        try:
            parsed = json.loads(strip_json_fence(response))
        except json.JSONDecodeError:
            logger.warning("URL batch scoring returned invalid JSON, using default scores")
            return {}
        if not isinstance(parsed, list):
            return {}

        result: Dict[str, float] = {}
        for entry in parsed:
            if isinstance(entry, dict) and "url" in entry:
                try:
                    result[clean_url(str(entry["url"]))] = float(entry.get("score", constants.FEED_DEFAULT_SCORE))
                except (TypeError, ValueError):
                    continue
        return result

    async def store_articles(self, user_id: str = "", articles: Optional[List[Dict[str, Any]]] = None) -> Dict[str, str]:
        articles = articles or []
        logger.info(f"Storing {len(articles)} articles for user {user_id}")
        if not user_id:
            raise ValueError("missing user_id")

        stored = 0
        today = date.today()
        for item in articles:
            article = DailyArticle(
                title=item.get("title", ""),
                url=item.get("url", ""),
                snippet=item.get("snippet", ""),
                relevance_score=normalize_score(float(item.get("score", 0.0))),
                suggested_date=today,
                provider=normalize_provider(item.get("provider")),
            )
            try:
                await self.deps.store.store_daily_article(user_id, article)
            except ConfigurationError:
                raise
            except Exception as e:
                logger.warning(f"Failed to store article {article.url}: {e}")
                continue
            stored += 1

        return {"message": f"Successfully stored {stored} articles."}

    def build_tools(self) -> List[Tool]:
        article_item = {
            "type": "object",
            "properties": {
                "url": {"type": "string"},
                "title": {"type": "string"},
                "snippet": {"type": "string"},
                "provider": {"type": "string"},
            },
            "required": ["url"],
        }
        return [
            Tool(
                name="get_user_preferences",
                description=prompts.TOOL_GET_PREFERENCES_DESC,
                parameters={
                    "type": "object",
                    "properties": {"user_id": {"type": "string"}},
                    "required": ["user_id"],
                },
                handler=self.get_user_preferences,
            ),
            Tool(
                name="search_news",
                description=prompts.TOOL_SEARCH_NEWS_DESC,
                parameters={
                    "type": "object",
                    "properties": {"queries": {"type": "array", "items": {"type": "string"}}},
                    "required": ["queries"],
                },
                handler=self.search_news,
            ),
            Tool(
                name="scrape_content",
                description=prompts.TOOL_SCRAPE_CONTENT_DESC,
                parameters={
                    "type": "object",
                    "properties": {"url": {"type": "string"}},
                    "required": ["url"],
                },
                handler=self.scrape_content,
            ),
            Tool(
                name="summarize_content",
                description=prompts.TOOL_SUMMARIZE_CONTENT_DESC,
                parameters={
                    "type": "object",
                    "properties": {
                        "url": {"type": "string"},
                        "content": {"type": "string"},
                    },
                },
                handler=self.summarize_content,
            ),
            Tool(
                name="evaluate_urls_batch",
                description=prompts.TOOL_EVALUATE_URLS_BATCH_DESC,
                parameters={
                    "type": "object",
                    "properties": {
                        "urls": {"type": "array", "items": article_item},
                        "interests": {"type": "string"},
                        "eval_criteria": {"type": "string"},
                    },
                    "required": ["urls"],
                },
                handler=self.evaluate_urls_batch,
            ),
            Tool(
                name="store_articles",
                description=prompts.TOOL_STORE_ARTICLES_DESC,
                parameters={
                    "type": "object",
                    "properties": {
                        "user_id": {"type": "string"},
                        "articles": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "title": {"type": "string"},
                                    "url": {"type": "string"},
                                    "snippet": {"type": "string"},
                                    "score": {"type": "number"},
                                    "provider": {"type": "string"},
                                },
                                "required": ["url"],
                            },
                        },
                    },
                    "required": ["user_id", "articles"],
                },
                handler=self.store_articles,
            ),
        ]

"""
Collaborators injected into the daily-feed agent.

Storage, search and scraping backends live outside this package; the
agent only relies on the protocols below.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Protocol

from ...providers.base import ProviderAdapter


@dataclass
class FeedPreferences:
    interest_prompt: str = ""
    feed_enabled: bool = False
    feed_eval_prompt: str = ""


@dataclass
class SearchArticle:
    title: str
    url: str
    snippet: str = ""
    provider: str = ""


@dataclass
class DailyArticle:
    title: str
    url: str
    snippet: str
    relevance_score: float
    suggested_date: date
    provider: str


class FeedStore(Protocol):
    """Protocol for the persistence backend."""

    async def get_feed_preferences(self, user_id: str) -> FeedPreferences:
        """Load a user's feed preferences."""
        ...

    async def store_daily_article(self, user_id: str, article: DailyArticle) -> None:
        """Persist one suggested article."""
        ...


class SearchProvider(Protocol):
    """Protocol for news search backends."""

    @property
    def name(self) -> str:
        ...

    async def search_news(self, query: str, max_results: int) -> List[SearchArticle]:
        ...


class Scraper(Protocol):
    """Protocol for article scrapers."""

    async def scrape(self, url: str) -> str:
        """Return the readable text of the page at ``url``."""
        ...


@dataclass
class AgentDependencies:
    """
    Everything the daily-feed agent needs, injected at construction.

    ``provider`` answers the free-form prompts issued by tools (summaries,
    URL scoring). ``agent_provider`` drives the reasoning loop; when it is
    not given one is built from the runtime settings, with ``api_keys``
    taking precedence over keys found in the environment.
    """
    store: FeedStore
    search_providers: List[SearchProvider]
    scraper: Scraper
    provider: ProviderAdapter
    agent_provider: Optional[ProviderAdapter] = None
    api_keys: Dict[str, str] = field(default_factory=dict)

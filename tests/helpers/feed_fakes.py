"""In-memory collaborators for the daily-feed agent."""

from typing import Dict, List, Optional

from landr_agent.agents.feed import DailyArticle, FeedPreferences, SearchArticle


class InMemoryFeedStore:

    def __init__(
        self,
        preferences: Optional[Dict[str, FeedPreferences]] = None,
        fail_urls: Optional[List[str]] = None,
        error: Optional[Exception] = None
    ):
        self.preferences = preferences or {}
        self.fail_urls = set(fail_urls or [])
        self.error = error
        self.stored: List[tuple] = []

    async def get_feed_preferences(self, user_id: str) -> FeedPreferences:
        if self.error is not None:
            raise self.error
        return self.preferences.get(user_id, FeedPreferences())

    async def store_daily_article(self, user_id: str, article: DailyArticle) -> None:
        if article.url in self.fail_urls:
            raise RuntimeError(f"duplicate article {article.url}")
        self.stored.append((user_id, article))


class StaticSearchProvider:

    def __init__(self, name: str, results: Optional[Dict[str, List[SearchArticle]]] = None, error: Optional[Exception] = None):
        self._name = name
        self.results = results or {}
        self.error = error
        self.queries: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def search_news(self, query: str, max_results: int) -> List[SearchArticle]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.results.get(query, [])[:max_results]


class StaticScraper:

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages = pages or {}
        self.scraped: List[str] = []

    async def scrape(self, url: str) -> str:
        self.scraped.append(url)
        if url not in self.pages:
            raise RuntimeError(f"404 fetching {url}")
        return self.pages[url]


def article(title: str, url: str, provider: str = "google", snippet: str = "") -> SearchArticle:
    return SearchArticle(title=title, url=url, snippet=snippet or f"About {title}", provider=provider)

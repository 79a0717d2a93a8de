"""Daily-feed agent: dependency bundle, tool set and entry point."""

from .agent import DailyFeedAgent, run_daily_feed
from .dependencies import (
    AgentDependencies,
    DailyArticle,
    FeedPreferences,
    FeedStore,
    Scraper,
    SearchArticle,
    SearchProvider,
)
from .tools import FeedToolConfig, FeedTools

__all__ = [
    "DailyFeedAgent",
    "run_daily_feed",
    "AgentDependencies",
    "DailyArticle",
    "FeedPreferences",
    "FeedStore",
    "Scraper",
    "SearchArticle",
    "SearchProvider",
    "FeedToolConfig",
    "FeedTools",
]

"""End-to-end daily-feed runs over scripted providers.

The agent provider is a real dispatcher stack (race of two providers, one
of them rate limited) and the tool provider answers scoring prompts, so
every layer between the entry point and the store is exercised.
"""

import json

import pytest
from unittest.mock import AsyncMock, Mock

from landr_agent import AgentDependencies, DailyFeedAgent, RaceDispatcher, RuntimeSettings
from landr_agent.agents.feed import FeedPreferences, FeedToolConfig
from landr_agent.orchestration import BudgetExceeded, FallbackDispatcher
from landr_agent.providers.base import ProviderError
from landr_agent.providers.openai_compat import OpenAICompatibleConfig, OpenAICompatibleProvider
from landr_agent.reliability.error_classifier import ErrorCategory
from landr_agent.reliability.retry import RetryPolicy
from tests.helpers.feed_fakes import InMemoryFeedStore, StaticScraper, StaticSearchProvider, article
from tests.helpers.mock_exceptions import make_rate_limit_error
from tests.helpers.providers import ScriptedProvider, make_completion, tool_call_turn

pytestmark = pytest.mark.integration

USER_ID = "user-42"

SCORES = json.dumps([
    {"url": "https://news.example/rust", "score": 0.92},
    {"url": "https://db.example/pg18", "score": 0.81},
    {"url": "https://spam.example/top10", "score": 0.1},
])


def feed_script():
    return [
        tool_call_turn(("get_user_preferences", {"user_id": USER_ID})),
        tool_call_turn(("search_news", {"queries": ["rust language", "postgres release"]})),
        tool_call_turn(("evaluate_urls_batch", {
            "urls": [
                {"url": "https://news.example/rust?ref=rss", "title": "Rust 2.0 released", "provider": "google"},
                {"url": "https://db.example/pg18", "title": "Postgres 18", "provider": "tavily"},
                {"url": "https://spam.example/top10", "title": "Top 10 languages", "provider": "google"},
            ],
            "interests": "Systems programming and databases",
            "eval_criteria": "In-depth technical coverage",
        })),
        tool_call_turn(("store_articles", {
            "user_id": USER_ID,
            "articles": [
                {"title": "Rust 2.0 released", "url": "https://news.example/rust?ref=rss",
                 "snippet": "Major release", "score": 0.92, "provider": "google"},
                {"title": "Postgres 18", "url": "https://db.example/pg18",
                 "snippet": "New planner", "score": 81, "provider": "tavily"},
            ],
        })),
        "Stored 2 articles about Rust and Postgres.",
    ]


@pytest.fixture
def deps():
    store = InMemoryFeedStore({
        USER_ID: FeedPreferences(
            interest_prompt="Systems programming and databases",
            feed_enabled=True,
            feed_eval_prompt="In-depth technical coverage",
        ),
    })
    search = [
        StaticSearchProvider("google", {
            "rust language": [article("Rust 2.0 released", "https://news.example/rust?ref=rss")],
            "postgres release": [article("Top 10 languages", "https://spam.example/top10")],
        }),
        StaticSearchProvider("tavily", {
            "postgres release": [article("Postgres 18", "https://db.example/pg18", provider="tavily")],
        }),
    ]
    return AgentDependencies(
        store=store,
        search_providers=search,
        scraper=StaticScraper(),
        provider=ScriptedProvider("scoring", [SCORES]),
    )


@pytest.fixture
def tool_config():
    return FeedToolConfig(query_delay_seconds=0, eval_batch_delay_seconds=0, inter_chunk_delay_seconds=0)


class TestDailyFeedEndToEnd:

    @pytest.mark.asyncio
    async def test_race_with_rate_limited_vendor(self, deps, tool_config):
        limited = ProviderError("rate limit", provider="groq", status_code=429, category=ErrorCategory.RATE_LIMIT)
        groq = ScriptedProvider("groq", [limited])
        cerebras = ScriptedProvider("cerebras", feed_script(), delay=0.01)
        deps.agent_provider = RaceDispatcher([groq, cerebras], deadline_seconds=5.0)

        agent = DailyFeedAgent(deps, settings=RuntimeSettings(), tool_config=tool_config)
        result = await agent.run(USER_ID)

        assert result.content == "Stored 2 articles about Rust and Postgres."
        assert result.provider == "cerebras"
        assert result.iterations == 5
        assert result.tool_calls == 4

        stored = [a for _, a in deps.store.stored]
        assert [a.url for a in stored] == ["https://news.example/rust?ref=rss", "https://db.example/pg18"]
        assert [a.relevance_score for a in stored] == [0.92, 0.81]
        assert [a.provider for a in stored] == ["google", "tavily"]

        tool_turns = [t for t in result.transcript if t.tool_result_correlation_id]
        assert [t.tool_result_correlation_id for t in tool_turns] == [
            "call_get_user_preferences",
            "call_search_news",
            "call_evaluate_urls_batch",
            "call_store_articles",
        ]
        scores = json.loads(tool_turns[2].text)["scores"]
        assert [s["score"] for s in scores] == [0.92, 0.81, 0.1]
        assert json.loads(tool_turns[3].text) == {"message": "Successfully stored 2 articles."}

    @pytest.mark.asyncio
    async def test_disabled_feed_stops_early(self, deps, tool_config):
        deps.store.preferences[USER_ID] = FeedPreferences(interest_prompt="", feed_enabled=False)
        agent_llm = ScriptedProvider("groq", [
            tool_call_turn(("get_user_preferences", {"user_id": USER_ID})),
            "Feed is disabled for this user.",
        ])
        deps.agent_provider = agent_llm

        result = await DailyFeedAgent(deps, settings=RuntimeSettings(), tool_config=tool_config).run(USER_ID)

        assert "Feed is disabled or no interests set." in agent_llm.calls[1]["turns"][-1].text
        assert deps.store.stored == []
        assert result.iterations == 2

    @pytest.mark.asyncio
    async def test_runaway_model_hits_iteration_ceiling(self, deps, tool_config):
        deps.agent_provider = ScriptedProvider("groq", [tool_call_turn(("search_news", {"queries": ["rust language"]}))])
        settings = RuntimeSettings(agent_max_iterations=3)

        with pytest.raises(BudgetExceeded) as exc_info:
            await DailyFeedAgent(deps, settings=settings, tool_config=tool_config).run(USER_ID)

        assert exc_info.value.budget_type == "iterations"
        assert deps.agent_provider.call_count == 3

    @pytest.mark.asyncio
    async def test_vendor_adapters_with_fallback(self, deps, tool_config):
        """Real adapters behind a fallback: groq stays rate limited, cerebras answers."""
        policy = RetryPolicy(max_attempts=2, base_delay=0.0, max_delay=0.0, jitter=False)

        def adapter(name):
            config = OpenAICompatibleConfig(name=name, base_url=f"https://{name}.example/v1", api_key="k", model="m")
            provider = OpenAICompatibleProvider(config, retry_policy=policy)
            provider._client = Mock()
            return provider

        groq, cerebras = adapter("groq"), adapter("cerebras")
        groq._client.chat.completions.create = AsyncMock(side_effect=make_rate_limit_error())
        cerebras._client.chat.completions.create = AsyncMock(side_effect=[
            make_completion(content=None, tool_calls=[("get_user_preferences", json.dumps({"user_id": USER_ID}))]),
            make_completion("Preferences checked, nothing stored."),
        ])
        deps.agent_provider = FallbackDispatcher(groq, cerebras)

        result = await DailyFeedAgent(deps, settings=RuntimeSettings(), tool_config=tool_config).run(USER_ID)

        assert result.content == "Preferences checked, nothing stored."
        assert groq._client.chat.completions.create.await_count == 4
        second_request = cerebras._client.chat.completions.create.call_args_list[1].kwargs
        tool_message = second_request["messages"][-1]
        assert tool_message["role"] == "tool"
        assert tool_message["tool_call_id"] == "call_get_user_preferences"
        assert second_request["messages"][-2]["tool_calls"][0]["id"] == "call_get_user_preferences"

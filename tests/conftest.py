"""Shared pytest fixtures for Landr Agent tests."""

import pytest
from dotenv import load_dotenv
from unittest.mock import Mock, AsyncMock

# Load environment variables from .env file for tests
load_dotenv()

from landr_agent.config.settings import RuntimeSettings
from landr_agent.models.conversation_types import ConversationTurn
from landr_agent.models.generation import GenerationParams
from landr_agent.providers.openai_compat import OpenAICompatibleConfig, OpenAICompatibleProvider
from landr_agent.reliability.retry import RetryPolicy
from tests.helpers.providers import make_completion


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: end-to-end runs over scripted providers")
    config.addinivalue_line("markers", "slow: tests that take noticeably long")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable RuntimeSettings reads.

    Each variable is registered with monkeypatch first so values loaded from
    a .env file during the test are removed on teardown.
    """
    for name in (
        "GROQ_API_KEY",
        "CEREBRAS_API_KEY",
        "LANDR_DISPATCH_POLICY",
        "LANDR_AGENT_MODEL",
        "LANDR_AGENT_MAX_ITERATIONS",
        "LANDR_AGENT_TIMEOUT_SECONDS",
        "LANDR_RACE_DEADLINE_SECONDS",
        "LANDR_REQUEST_TIMEOUT_SECONDS",
        "LANDR_MAX_INPUT_CHARS",
    ):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def settings_without_keys():
    return RuntimeSettings()


@pytest.fixture
def fast_retry_policy():
    """Retry policy that never sleeps."""
    return RetryPolicy(max_attempts=3, base_delay=0.0, max_delay=0.0, pre_attempt_delay=0.0, jitter=False)


@pytest.fixture
def sample_turns():
    return [
        ConversationTurn.system("You are a helpful assistant."),
        ConversationTurn.user("What happened in tech news today?"),
    ]


@pytest.fixture
def sample_generation_params():
    return GenerationParams(model="test-model", max_tokens=100, temperature=0.2)


@pytest.fixture
def mock_openai_client():
    """Mock AsyncOpenAI client answering with a plain text completion."""
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=make_completion("Test response"))
    return client


@pytest.fixture
def groq_provider(fast_retry_policy, mock_openai_client):
    """Groq adapter wired to the mock client."""
    config = OpenAICompatibleConfig(
        name="groq",
        base_url="https://api.groq.com/openai/v1",
        api_key="test-groq-key",
        model="openai/gpt-oss-120b",
    )
    provider = OpenAICompatibleProvider(config, retry_policy=fast_retry_policy)
    provider._client = mock_openai_client
    return provider

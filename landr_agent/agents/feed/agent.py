"""
Daily-feed agent.

Single entry point used by the scheduler: ``DailyFeedAgent(deps).run(user_id)``.
"""

import logging
from typing import Optional

from ...config.settings import RuntimeSettings
from ...orchestration.dispatcher import build_provider_from_settings
from ...orchestration.tool_registry import ToolRegistry
from ...providers.base import ProviderAdapter
from ..models.agent_options import AgentOptions
from ..models.agent_result import AgentResult
from ..runner.agent_runner import AgentRunner
from . import prompts
from .dependencies import AgentDependencies
from .tools import FeedToolConfig, FeedTools

logger = logging.getLogger(__name__)


class DailyFeedAgent:
    """Curates and stores a user's daily articles through the tool loop."""

    name = "daily_feed_agent"

    def __init__(
        self,
        deps: AgentDependencies,
        settings: Optional[RuntimeSettings] = None,
        tool_config: Optional[FeedToolConfig] = None
    ):
        self.deps = deps
        self.settings = settings or RuntimeSettings.from_env()
        self.tools = FeedTools(deps, tool_config)

    def build_registry(self) -> ToolRegistry:
        return ToolRegistry(self.tools.build_tools())

    def build_options(self) -> AgentOptions:
        return AgentOptions(
            max_iterations=self.settings.agent_max_iterations,
            timeout_seconds=self.settings.agent_timeout_seconds,
            system_prompt=prompts.AGENT_DAILY_FEED,
        )

    def resolve_provider(self) -> ProviderAdapter:
        """Provider for the reasoning loop.

        Raises:
            ConfigurationError: No provider could be configured
        """
        if self.deps.agent_provider is not None:
            return self.deps.agent_provider

        settings = self.settings
        if self.deps.api_keys:
            settings = settings.model_copy(update={
                "groq_api_key": self.deps.api_keys.get("groq") or settings.groq_api_key,
                "cerebras_api_key": self.deps.api_keys.get("cerebras") or settings.cerebras_api_key,
            })
        return build_provider_from_settings(settings)

    async def run(self, user_id: str) -> AgentResult:
        """Generate the daily feed for ``user_id`` and return the agent's final summary."""
        if not user_id:
            raise ValueError("user_id is required")

        provider = self.resolve_provider()
        runner = AgentRunner(provider, self.build_registry(), self.build_options(), name=self.name)

        logger.info(f"Starting daily feed run for user {user_id} with {provider.name}")
        result = await runner.run(f"Generate daily feed for user_id: {user_id}")
        logger.info(
            f"Daily feed run completed for user {user_id}",
            extra={"iterations": result.iterations, "tool_calls": result.tool_calls}
        )
        return result


async def run_daily_feed(
    deps: AgentDependencies,
    user_id: str,
    settings: Optional[RuntimeSettings] = None
) -> AgentResult:
    return await DailyFeedAgent(deps, settings).run(user_id)

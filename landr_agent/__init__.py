"""
Landr Agent - LLM orchestration and tool-calling agent runtime.

This package turns a vendor-neutral "ask a model, optionally call tools"
contract into reliable calls against rate-limited OpenAI-compatible
vendors (Groq, Cerebras) and drives a multi-turn agent loop:

- Boundary-aware content chunking and aggregation
- Unified retry engine with per-call error classification
- Provider adapters with token budgets and tool-call correlation
- Race, fallback and rotating multi-provider dispatch
- Agent reasoning loop and the daily-feed agent
- Flashcard and study-summary generation for learning materials
"""

__version__ = "0.1.0"

from .agents import AgentOptions, AgentResult, AgentRunner, Tool
from .agents.feed import AgentDependencies, DailyFeedAgent, run_daily_feed
from .config import ConfigurationError, RuntimeSettings
from .learning import MaterialGenerator, MaterialResult
from .models.conversation_types import ConversationTurn, ToolDefinition, ToolInvocation, TurnRole
from .models.generation import GenerationParams, GenerationResponse
from .orchestration import (
    AllProvidersFailedError,
    BudgetExceeded,
    DispatchTimeoutError,
    FallbackDispatcher,
    RaceDispatcher,
    RotatingDispatcher,
    ToolRegistry,
    build_dispatcher,
    build_provider_from_settings,
)
from .providers import ProviderAdapter, ProviderError, create_provider

__all__ = [
    # Entry point
    "DailyFeedAgent",
    "AgentDependencies",
    "run_daily_feed",
    "MaterialGenerator",
    "MaterialResult",

    # Agent loop
    "AgentRunner",
    "AgentOptions",
    "AgentResult",
    "Tool",
    "ToolRegistry",

    # Providers and dispatch
    "ProviderAdapter",
    "ProviderError",
    "create_provider",
    "RaceDispatcher",
    "FallbackDispatcher",
    "RotatingDispatcher",
    "build_dispatcher",
    "build_provider_from_settings",

    # Models
    "ConversationTurn",
    "ToolDefinition",
    "ToolInvocation",
    "TurnRole",
    "GenerationParams",
    "GenerationResponse",

    # Errors and configuration
    "AllProvidersFailedError",
    "BudgetExceeded",
    "DispatchTimeoutError",
    "ConfigurationError",
    "RuntimeSettings",
]

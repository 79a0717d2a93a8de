"""Multi-provider dispatch, tool registry and orchestration errors."""

from .dispatcher import (
    FallbackDispatcher,
    RaceDispatcher,
    RotatingDispatcher,
    build_dispatcher,
    build_provider_from_settings,
)
from .errors import (
    AllProvidersFailedError,
    BudgetExceeded,
    DispatchTimeoutError,
    OrchestratorError,
    ToolExecutionError,
)
from .tool_registry import ToolRegistry

__all__ = [
    "FallbackDispatcher",
    "RaceDispatcher",
    "RotatingDispatcher",
    "build_dispatcher",
    "build_provider_from_settings",
    "AllProvidersFailedError",
    "BudgetExceeded",
    "DispatchTimeoutError",
    "OrchestratorError",
    "ToolExecutionError",
    "ToolRegistry",
]

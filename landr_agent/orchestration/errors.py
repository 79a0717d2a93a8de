"""Orchestration-specific error definitions."""

from typing import List, Optional, Tuple


class OrchestratorError(Exception):
    """Base exception for orchestration errors."""
    pass


class AllProvidersFailedError(OrchestratorError):
    """Every provider behind a dispatcher failed.

    ``errors`` keeps one ``(provider_name, error)`` pair per failed attempt
    in the order the failures were observed.
    """

    def __init__(self, policy: str, errors: List[Tuple[str, Exception]]):
        self.policy = policy
        self.errors = list(errors)

        details = "; ".join(f"{name}: {error}" for name, error in self.errors)
        super().__init__(f"all providers failed ({policy}): {details}")

    @property
    def last_error(self) -> Optional[Exception]:
        return self.errors[-1][1] if self.errors else None

    @property
    def providers(self) -> List[str]:
        return [name for name, _ in self.errors]


class DispatchTimeoutError(OrchestratorError):
    """The shared dispatch deadline elapsed before any provider succeeded."""

    def __init__(
        self,
        deadline_seconds: float,
        errors: Optional[List[Tuple[str, Exception]]] = None
    ):
        self.deadline_seconds = deadline_seconds
        self.errors = list(errors or [])

        message = f"all providers timed out after {deadline_seconds}s"
        if self.errors:
            name, error = self.errors[-1]
            message += f" (last failure from {name}: {error})"
        super().__init__(message)

    @property
    def last_error(self) -> Optional[Exception]:
        return self.errors[-1][1] if self.errors else None


class ToolExecutionError(OrchestratorError):
    """Exception raised when a tool execution fails."""

    def __init__(self, tool_name: str, original_error: Exception):
        self.tool_name = tool_name
        self.original_error = original_error

        message = f"Tool '{tool_name}' failed: {str(original_error)}"
        super().__init__(message)


class BudgetExceeded(OrchestratorError):
    """Exception raised when an agent run exceeds its iteration or time budget."""

    def __init__(
        self,
        budget_type: str,  # "iterations", "time"
        limit: float,
        actual: float,
        agent: Optional[str] = None
    ):
        self.budget_type = budget_type
        self.limit = limit
        self.actual = actual
        self.agent = agent

        message = f"Budget exceeded: {budget_type} limit {limit}, actual {actual}"
        if agent:
            message += f" (agent: {agent})"
        super().__init__(message)

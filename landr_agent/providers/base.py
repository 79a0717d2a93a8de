"""
Base Provider Adapter Interface

This module defines the abstract base class for everything that can answer
a conversation: single-vendor adapters and the multi-provider dispatchers
that wrap them. Callers (the agent loop, the feed tools) only ever see
this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models.conversation_types import ConversationTurn, ToolDefinition
from ..models.generation import GenerationParams, GenerationResponse
from ..reliability.error_classifier import ErrorCategory


class ProviderAdapter(ABC):
    """
    Abstract base class for chat-completion providers.

    The adapter is responsible for:
    - Translating turns and tool definitions to the vendor wire format
    - Making the API call (with transport retry)
    - Normalizing the response to a single ConversationTurn
    - Raising ProviderError with its own name attached
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name used in logs and errors (e.g. "groq")."""

    @abstractmethod
    async def generate(
        self,
        turns: List[ConversationTurn],
        tools: Optional[Sequence[ToolDefinition]] = None,
        params: Optional[GenerationParams] = None
    ) -> GenerationResponse:
        """
        Produce one response turn for the conversation.

        Args:
            turns: Ordered conversation history
            tools: Tools the model may invoke
            params: Per-call overrides

        Returns:
            GenerationResponse whose turn carries either text or tool invocations

        Raises:
            ProviderError: For terminal provider failures
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured and usable."""

    async def complete(self, prompt: str, params: Optional[GenerationParams] = None) -> str:
        """Free-form single prompt completion returning the response text."""
        response = await self.generate([ConversationTurn.user(prompt)], params=params)
        return response.text


class ProviderError(Exception):
    """
    Base exception for provider-related errors.

    Attributes:
        message: Error message
        provider: Provider name
        status_code: HTTP status code if applicable
        category: ErrorCategory of the underlying failure
        retry_after: Seconds to wait before retry if applicable
        is_retryable: Whether this error should be retried
        original_error: The original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        retry_after: Optional[float] = None,
        is_retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.category = category
        self.retry_after = retry_after
        self.is_retryable = is_retryable
        self.original_error = original_error

    @property
    def is_rate_limit(self) -> bool:
        return self.category == ErrorCategory.RATE_LIMIT

    def __str__(self) -> str:
        return f"[{self.provider}] {self.message}"

"""
Error classification for retry and fallback decisions.

``ErrorClassifier`` holds the generic transient-failure rules used by the
retry engine. ``VendorErrorClassifier`` layers the chat-completion vendor
quirks on top (rate-limit cool-down, rejected tool calls, terminal 4xx)
so the adapter can reuse the same retry loop with different rules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set

import httpx
import openai

from ..config import constants
from ..config.errors import ConfigurationError


class ErrorCategory(Enum):
    """Standard error categories across all providers."""
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK = "network"
    TIMEOUT = "timeout"
    TOOL_REJECTED = "tool_rejected"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    MALFORMED_RESPONSE = "malformed_response"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


@dataclass
class ErrorClassification:
    """Detailed error classification."""
    category: ErrorCategory
    is_retryable: bool
    suggested_delay: Optional[float] = None
    user_message: Optional[str] = None


class ErrorClassifier:
    """Generic classification by status code, exception type and message text."""

    RETRYABLE_STATUS_CODES: Set[int] = {429, 500, 502, 503, 504}

    # Fixed transient signatures, checked against the lowercased error text
    TRANSIENT_PATTERNS = (
        ("429", ErrorCategory.RATE_LIMIT),
        ("500", ErrorCategory.SERVER_ERROR),
        ("502", ErrorCategory.SERVER_ERROR),
        ("503", ErrorCategory.SERVER_ERROR),
        ("timeout", ErrorCategory.TIMEOUT),
        ("connection refused", ErrorCategory.NETWORK),
    )

    @classmethod
    def classify_error(cls, error: Exception) -> ErrorClassification:
        """
        Classify an error with retry metadata.

        Args:
            error: The exception to classify

        Returns:
            ErrorClassification with category and retry info
        """
        if isinstance(error, ConfigurationError):
            return ErrorClassification(
                category=ErrorCategory.CONFIGURATION,
                is_retryable=False,
                user_message="Configuration error"
            )

        # Errors that already carry a classification (ProviderError)
        category = getattr(error, "category", None)
        if isinstance(category, ErrorCategory):
            return ErrorClassification(
                category=category,
                is_retryable=bool(getattr(error, "is_retryable", False)),
                suggested_delay=getattr(error, "retry_after", None)
            )

        if isinstance(error, (openai.APITimeoutError, httpx.TimeoutException)):
            return ErrorClassification(
                category=ErrorCategory.TIMEOUT,
                is_retryable=True,
                user_message="Request timed out"
            )
        if isinstance(error, (openai.APIConnectionError, httpx.ConnectError, httpx.NetworkError)):
            return ErrorClassification(
                category=ErrorCategory.NETWORK,
                is_retryable=True,
                user_message="Network connection error"
            )

        status_code = cls.get_status_code(error)
        if status_code is not None:
            category = cls.categorize_status_code(status_code)
            return ErrorClassification(
                category=category,
                is_retryable=status_code in cls.RETRYABLE_STATUS_CODES,
                suggested_delay=cls.get_retry_after(error)
            )

        error_str = str(error).lower()
        for pattern, category in cls.TRANSIENT_PATTERNS:
            if pattern in error_str:
                return ErrorClassification(category=category, is_retryable=True)

        return ErrorClassification(
            category=ErrorCategory.UNKNOWN,
            is_retryable=False,
            user_message="An unknown error occurred"
        )

    @staticmethod
    def get_status_code(error: Exception) -> Optional[int]:
        status_code = getattr(error, "status_code", None)
        if isinstance(status_code, int):
            return status_code
        if isinstance(error, httpx.HTTPStatusError):
            return error.response.status_code
        return None

    @staticmethod
    def categorize_status_code(status_code: int) -> ErrorCategory:
        """Categorize error based on HTTP status code."""
        if status_code in (401, 403):
            return ErrorCategory.AUTHENTICATION
        elif status_code == 429:
            return ErrorCategory.RATE_LIMIT
        elif status_code >= 500:
            return ErrorCategory.SERVER_ERROR
        elif status_code >= 400:
            return ErrorCategory.VALIDATION
        return ErrorCategory.UNKNOWN

    @staticmethod
    def get_retry_after(error: Exception) -> Optional[float]:
        """Extract a Retry-After value from the error if available."""
        retry_after = getattr(error, "retry_after", None)
        if retry_after is not None:
            return float(retry_after)

        response = getattr(error, "response", None)
        headers = getattr(response, "headers", None)
        if headers is not None:
            value = headers.get("retry-after") or headers.get("Retry-After")
            if value:
                try:
                    return float(value)
                except ValueError:
                    pass
        return None


class VendorErrorClassifier(ErrorClassifier):
    """
    Classifier for OpenAI-compatible chat-completion vendors.

    Rules:
    - explicit rate limit: retryable after the rate-limit cool-down
      (or the vendor's Retry-After, whichever is longer)
    - rejected tool call (``tool_use_failed``): retryable after its own cool-down
    - 5xx, timeouts and network failures: retryable with normal backoff
    - any other 4xx: terminal
    """

    RATE_LIMIT_COOLDOWN: float = constants.RATE_LIMIT_COOLDOWN_SECONDS
    TOOL_REJECTED_COOLDOWN: float = constants.TOOL_REJECTED_COOLDOWN_SECONDS

    TOOL_REJECTED_PATTERNS = ("tool_use_failed", "failed to call a function")

    @classmethod
    def classify_error(cls, error: Exception) -> ErrorClassification:
        if cls.is_tool_rejection(error):
            return ErrorClassification(
                category=ErrorCategory.TOOL_REJECTED,
                is_retryable=True,
                suggested_delay=cls.TOOL_REJECTED_COOLDOWN,
                user_message="The vendor rejected a generated tool call"
            )

        status_code = cls.get_status_code(error)
        if isinstance(error, openai.RateLimitError) or status_code == 429:
            retry_after = cls.get_retry_after(error) or 0.0
            return ErrorClassification(
                category=ErrorCategory.RATE_LIMIT,
                is_retryable=True,
                suggested_delay=max(retry_after, cls.RATE_LIMIT_COOLDOWN),
                user_message="Rate limit exceeded, please wait before retrying"
            )

        if status_code is not None and 400 <= status_code < 500:
            return ErrorClassification(
                category=cls.categorize_status_code(status_code),
                is_retryable=False,
                user_message=f"Request rejected with status {status_code}"
            )

        classification = super().classify_error(error)
        if classification.category in (ErrorCategory.SERVER_ERROR, ErrorCategory.TIMEOUT, ErrorCategory.NETWORK):
            classification.is_retryable = True
        return classification

    @classmethod
    def is_tool_rejection(cls, error: Exception) -> bool:
        if getattr(error, "code", None) == "tool_use_failed":
            return True
        if getattr(error, "category", None) == ErrorCategory.TOOL_REJECTED:
            return True
        error_str = str(error).lower()
        return any(pattern in error_str for pattern in cls.TOOL_REJECTED_PATTERNS)

"""
Error mapping utilities for provider adapters.

This module converts SDK, transport and retry-engine exceptions into
standardized ProviderError instances carrying the provider name.
"""

from ..reliability.error_classifier import VendorErrorClassifier
from ..reliability.retry import RetryExhaustedError
from .base import ProviderError


class ErrorMapper:
    """Maps provider-specific errors to standardized ProviderError."""

    @staticmethod
    def map_error(error: Exception, provider: str) -> ProviderError:
        """
        Map an exception raised while calling ``provider``.

        Retry exhaustion keeps the category of the last underlying failure,
        so a rate limit that outlived the transport retries is still seen as
        a rate limit by the dispatcher.

        Args:
            error: The exception to map
            provider: Provider name to attach

        Returns:
            ProviderError with appropriate metadata
        """
        if isinstance(error, ProviderError):
            return error

        if isinstance(error, RetryExhaustedError):
            inner = ErrorMapper.map_error(error.last_error, provider)
            return ProviderError(
                message=f"max retries exceeded after {error.attempts} attempts: {inner.message}",
                provider=provider,
                status_code=inner.status_code,
                category=inner.category,
                retry_after=inner.retry_after,
                is_retryable=False,
                original_error=error,
            )

        classification = VendorErrorClassifier.classify_error(error)
        status_code = VendorErrorClassifier.get_status_code(error)

        detail = getattr(error, "message", None) or str(error)
        if classification.user_message:
            message = f"{classification.user_message}: {detail}"
        else:
            message = detail

        return ProviderError(
            message=message,
            provider=provider,
            status_code=status_code,
            category=classification.category,
            retry_after=classification.suggested_delay,
            is_retryable=classification.is_retryable,
            original_error=error,
        )

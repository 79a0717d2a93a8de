"""Reliability layer for error classification, retries and input budgets.

This layer handles:
- Error classification (generic and vendor-specific rules)
- Retry logic with exponential backoff and cool-downs
- Token budget enforcement for model input
"""

from .budget import enforce_token_budget
from .error_classifier import (
    ErrorCategory,
    ErrorClassification,
    ErrorClassifier,
    VendorErrorClassifier,
)
from .retry import RetryExhaustedError, RetryManager, RetryPolicy, RetryState

__all__ = [
    "enforce_token_budget",
    "ErrorCategory",
    "ErrorClassification",
    "ErrorClassifier",
    "VendorErrorClassifier",
    "RetryExhaustedError",
    "RetryManager",
    "RetryPolicy",
    "RetryState",
]

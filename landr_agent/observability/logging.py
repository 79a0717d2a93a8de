"""
Structured log lines for vendor calls.

Every line is prefixed with ``[provider=... model=... request_id=...]`` so
a single agent run can be followed across retries and providers.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional


class ProviderLogger:
    """Logger bound to one vendor under ``landr_agent.providers.<name>``."""

    def __init__(self, provider_name: str):
        self.provider = provider_name
        self.logger = logging.getLogger(f"landr_agent.providers.{provider_name.lower()}")

    def _format(self, message: str, **fields) -> str:
        parts = [f"provider={self.provider}"]
        parts.extend(f"{key}={value}" for key, value in fields.items() if value is not None)
        return f"[{' '.join(parts)}] {message}"

    def debug(self, message: str, **fields):
        self.logger.debug(self._format(message, **fields))

    def info(self, message: str, **fields):
        self.logger.info(self._format(message, **fields))

    def error(self, message: str, error: Optional[Exception] = None, **fields):
        if error is not None:
            fields["error_type"] = type(error).__name__
            fields["error_msg"] = str(error)[:200]
        self.logger.error(self._format(message, **fields))

    @contextmanager
    def track_request(self, method: str, model: str, request_id: Optional[str] = None):
        """
        Time one vendor request and log how it ended.

        Args:
            method: Adapter method being called (e.g. "generate")
            model: Model the request targets
            request_id: Caller supplied id, generated when omitted

        Yields:
            Dict with ``request_id``, ``model``, ``method`` and ``start_time``
        """
        request_id = request_id or str(uuid.uuid4())[:8]
        start_time = time.time()
        self.debug(f"Starting {method} request", model=model, request_id=request_id)

        try:
            yield {
                "request_id": request_id,
                "model": model,
                "method": method,
                "start_time": start_time,
            }
        except Exception as e:
            self.error(
                f"Failed {method} request",
                error=e,
                model=model,
                request_id=request_id,
                duration_ms=int((time.time() - start_time) * 1000),
            )
            raise

        self.info(
            f"Completed {method} request",
            model=model,
            request_id=request_id,
            duration_ms=int((time.time() - start_time) * 1000),
        )

    def log_usage(self, usage: Dict[str, Any], model: str, request_id: str):
        self.info(
            "Token usage",
            model=model,
            request_id=request_id,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0),
        )

"""
Multi-provider dispatch.

Dispatchers wrap several provider adapters and are adapters themselves,
so callers cannot tell a single vendor from a composed one.

- ``RaceDispatcher``: all providers at once under a shared deadline; the
  first success wins and the remaining calls are cancelled.
- ``FallbackDispatcher``: primary first; the secondary is only tried when
  the primary failed with a rate limit.
- ``RotatingDispatcher``: one provider at a time from a start index that
  advances on every call.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import constants
from ..config.errors import ConfigurationError
from ..config.settings import RuntimeSettings
from ..models.conversation_types import ConversationTurn, ToolDefinition
from ..models.generation import GenerationParams, GenerationResponse, ProviderResult
from ..providers.base import ProviderAdapter
from ..providers.factory import create_provider
from ..reliability.error_classifier import ErrorCategory, ErrorClassifier
from .errors import AllProvidersFailedError, DispatchTimeoutError

logger = logging.getLogger(__name__)


def _compose_name(policy: str, providers: Sequence[ProviderAdapter]) -> str:
    return f"{policy}[{'+'.join(p.name for p in providers)}]"


RATE_LIMIT_PATTERNS = ("rate limit", "rate_limit")


def is_rate_limit_error(error: Exception) -> bool:
    if ErrorClassifier.classify_error(error).category == ErrorCategory.RATE_LIMIT:
        return True
    # Adapters outside this package may only report the limit in the message
    message = str(error).lower()
    return any(pattern in message for pattern in RATE_LIMIT_PATTERNS)


def _task_result(provider: ProviderAdapter, task: asyncio.Task) -> ProviderResult:
    if task.cancelled():
        return ProviderResult(
            provider_name=provider.name,
            error=asyncio.CancelledError(f"{provider.name} call was cancelled"),
        )
    error = task.exception()
    if error is not None:
        return ProviderResult(provider_name=provider.name, error=error)
    return ProviderResult(provider_name=provider.name, response=task.result())


class RaceDispatcher(ProviderAdapter):
    """Invoke every provider concurrently and keep the first success."""

    def __init__(
        self,
        providers: Sequence[ProviderAdapter],
        deadline_seconds: float = constants.RACE_DEADLINE_SECONDS
    ):
        if not providers:
            raise ConfigurationError("RaceDispatcher requires at least one provider")
        if deadline_seconds <= 0:
            raise ConfigurationError("deadline_seconds must be positive")
        self.providers = list(providers)
        self.deadline_seconds = deadline_seconds

    @property
    def name(self) -> str:
        return _compose_name("Race", self.providers)

    def is_available(self) -> bool:
        return any(p.is_available() for p in self.providers)

    async def generate(
        self,
        turns: List[ConversationTurn],
        tools: Optional[Sequence[ToolDefinition]] = None,
        params: Optional[GenerationParams] = None
    ) -> GenerationResponse:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.deadline_seconds

        tasks: Dict[asyncio.Task, ProviderAdapter] = {
            asyncio.create_task(p.generate(turns, tools, params), name=f"race:{p.name}"): p
            for p in self.providers
        }
        pending = set(tasks)
        errors: List[Tuple[str, Exception]] = []

        logger.debug(f"Racing {len(tasks)} providers", extra={"dispatcher": self.name})
        try:
            while pending:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                done, pending = await asyncio.wait(
                    pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    result = _task_result(tasks[task], task)
                    if result.ok:
                        logger.info(
                            f"{result.provider_name} won the race",
                            extra={"dispatcher": self.name, "failed_before_win": len(errors)}
                        )
                        return result.response
                    logger.warning(f"{result.provider_name} failed during race: {result.error}")
                    errors.append((result.provider_name, result.error))

            if pending:
                logger.error(f"Race deadline of {self.deadline_seconds}s elapsed", extra={"dispatcher": self.name})
                raise DispatchTimeoutError(self.deadline_seconds, errors)
            raise AllProvidersFailedError("race", errors)
        finally:
            # Losers are cancelled instead of being left to finish
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)


class FallbackDispatcher(ProviderAdapter):
    """Primary provider with a secondary used only on rate limits."""

    def __init__(self, primary: ProviderAdapter, secondary: ProviderAdapter):
        self.primary = primary
        self.secondary = secondary

    @property
    def name(self) -> str:
        return _compose_name("Fallback", [self.primary, self.secondary])

    def is_available(self) -> bool:
        return self.primary.is_available() or self.secondary.is_available()

    async def generate(
        self,
        turns: List[ConversationTurn],
        tools: Optional[Sequence[ToolDefinition]] = None,
        params: Optional[GenerationParams] = None
    ) -> GenerationResponse:
        try:
            return await self.primary.generate(turns, tools, params)
        except Exception as e:
            if not is_rate_limit_error(e):
                raise
            primary_error = e

        logger.warning(
            f"{self.primary.name} is rate limited, falling back to {self.secondary.name}",
            extra={"dispatcher": self.name}
        )
        try:
            return await self.secondary.generate(turns, tools, params)
        except Exception as secondary_error:
            raise AllProvidersFailedError(
                "fallback",
                [(self.primary.name, primary_error), (self.secondary.name, secondary_error)],
            ) from secondary_error


class RotatingDispatcher(ProviderAdapter):
    """Try providers sequentially, starting one further along on each call."""

    def __init__(self, providers: Sequence[ProviderAdapter], start_index: int = 0):
        if not providers:
            raise ConfigurationError("RotatingDispatcher requires at least one provider")
        self.providers = list(providers)
        self._next_index = start_index % len(self.providers)

    @property
    def name(self) -> str:
        return _compose_name("Rotate", self.providers)

    def is_available(self) -> bool:
        return any(p.is_available() for p in self.providers)

    def _advance(self) -> int:
        start = self._next_index
        self._next_index = (start + 1) % len(self.providers)
        return start

    async def generate(
        self,
        turns: List[ConversationTurn],
        tools: Optional[Sequence[ToolDefinition]] = None,
        params: Optional[GenerationParams] = None
    ) -> GenerationResponse:
        start = self._advance()
        errors: List[Tuple[str, Exception]] = []
        count = len(self.providers)

        for offset in range(count):
            provider = self.providers[(start + offset) % count]
            logger.info(f"Trying {provider.name} (attempt {offset + 1}/{count})", extra={"dispatcher": self.name})
            try:
                return await provider.generate(turns, tools, params)
            except Exception as e:
                logger.warning(f"{provider.name} failed: {e}")
                errors.append((provider.name, e))

        raise AllProvidersFailedError("rotate", errors)


def build_dispatcher(
    policy: str,
    providers: Sequence[ProviderAdapter],
    deadline_seconds: float = constants.RACE_DEADLINE_SECONDS
) -> ProviderAdapter:
    """
    Combine providers under a dispatch policy.

    ``fallback`` with more than two providers cascades: each provider falls
    back to the chain built from the ones after it.

    Raises:
        ConfigurationError: No providers or unknown policy
    """
    providers = list(providers)
    if not providers:
        raise ConfigurationError("no LLM provider configured")

    if policy == "single" or len(providers) == 1:
        return providers[0]
    if policy == "race":
        return RaceDispatcher(providers, deadline_seconds=deadline_seconds)
    if policy == "rotate":
        return RotatingDispatcher(providers)
    if policy == "fallback":
        chain = providers[-1]
        for provider in reversed(providers[:-1]):
            chain = FallbackDispatcher(provider, chain)
        return chain
    raise ConfigurationError(f"unknown dispatch policy '{policy}'")


def build_provider_from_settings(settings: RuntimeSettings) -> ProviderAdapter:
    """
    Build the provider stack described by ``settings``.

    Providers without an API key are skipped.

    Raises:
        ConfigurationError: If no provider has a key
    """
    keys = settings.api_keys()
    providers = []
    for name in settings.provider_order:
        if name not in keys:
            logger.info(f"Skipping {name}: no API key configured")
            continue
        providers.append(
            create_provider(
                name,
                keys[name],
                model=settings.model_for(name),
                timeout_seconds=settings.request_timeout_seconds,
                max_input_chars=settings.max_input_chars,
            )
        )

    provider = build_dispatcher(
        settings.dispatch_policy,
        providers,
        deadline_seconds=settings.race_deadline_seconds,
    )
    logger.info(f"Using provider {provider.name}")
    return provider

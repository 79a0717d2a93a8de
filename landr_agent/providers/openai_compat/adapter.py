from typing import List, Optional, Sequence

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from ...config import constants
from ...config.errors import ConfigurationError
from ...models.conversation_types import ConversationTurn, ToolDefinition
from ...models.generation import GenerationParams, GenerationResponse
from ...observability.logging import ProviderLogger
from ...reliability.budget import enforce_token_budget
from ...reliability.error_classifier import VendorErrorClassifier
from ...reliability.retry import RetryManager, RetryPolicy
from ..base import ProviderAdapter
from ..errors import ErrorMapper
from .parsers import parse_chat_completion
from .payloads import build_chat_payload


class OpenAICompatibleConfig(BaseModel):
    """Connection settings for one OpenAI-compatible vendor."""
    name: str = Field(..., description="Provider name used in logs and errors")
    base_url: str = Field(..., description="API base URL; requests go to <base_url>/chat/completions")
    api_key: Optional[str] = Field(None, description="Bearer token")
    model: str = Field(..., description="Default model identifier")
    timeout_seconds: float = Field(constants.DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    max_input_chars: int = Field(constants.DEFAULT_MAX_INPUT_CHARS, ge=1)


class OpenAICompatibleProvider(ProviderAdapter):
    """Chat-completions provider for vendors that speak the OpenAI wire format."""

    def __init__(
        self,
        config: OpenAICompatibleConfig,
        retry_manager: Optional[RetryManager] = None,
        retry_policy: Optional[RetryPolicy] = None
    ):
        if not config.api_key:
            raise ConfigurationError(f"{config.name}: API key is not configured")

        self.config = config
        self._logger = ProviderLogger(config.name)
        # Retries are owned by RetryManager, not by the SDK client
        self._client = AsyncOpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            max_retries=0,
            timeout=config.timeout_seconds,
        )
        self._retry_policy = retry_policy or RetryPolicy.transport()
        self._retry_manager = retry_manager or RetryManager(self._retry_policy, VendorErrorClassifier)

    @property
    def name(self) -> str:
        return self.config.name

    def is_available(self) -> bool:
        return bool(self.config.api_key)

    async def generate(
        self,
        turns: List[ConversationTurn],
        tools: Optional[Sequence[ToolDefinition]] = None,
        params: Optional[GenerationParams] = None
    ) -> GenerationResponse:
        """Send the conversation and return the vendor's response turn."""
        params = params or GenerationParams()
        model = params.model or self.config.model
        max_input_chars = params.max_input_chars or self.config.max_input_chars
        request_id = (params.metadata or {}).get("request_id")

        with self._logger.track_request("generate", model, request_id) as request_info:
            payload = build_chat_payload(
                model,
                enforce_token_budget(turns, max_input_chars),
                tools,
                params,
            )

            try:
                completion = await self._retry_manager.execute_with_retry(
                    lambda: self._client.chat.completions.create(**payload),
                    operation=f"{self.name}.generate",
                    policy=self._retry_policy,
                    classifier=VendorErrorClassifier,
                )
            except Exception as e:
                mapped = ErrorMapper.map_error(e, self.name)
                if mapped is e:
                    raise
                raise mapped from e

            turn, finish_reason, usage = parse_chat_completion(completion, self.name)

            if usage:
                self._logger.log_usage(usage, model, request_info["request_id"])
            if turn.has_tool_invocations:
                self._logger.debug(
                    "Model requested tools",
                    model=model,
                    request_id=request_info["request_id"],
                    tools=",".join(i.tool_name for i in turn.tool_invocations),
                )

            return GenerationResponse(
                turn=turn,
                provider=self.name,
                model=getattr(completion, "model", None) or model,
                usage=usage,
                finish_reason=finish_reason,
            )

import logging
from typing import Optional

from ..config import constants
from ..config.errors import ConfigurationError
from .openai_compat import OpenAICompatibleConfig, OpenAICompatibleProvider

logger = logging.getLogger(__name__)

PROVIDER_BASE_URLS = {
    "groq": constants.GROQ_BASE_URL,
    "cerebras": constants.CEREBRAS_BASE_URL,
}


def create_provider(
    name: str,
    api_key: Optional[str],
    model: Optional[str] = None,
    timeout_seconds: float = constants.DEFAULT_REQUEST_TIMEOUT_SECONDS,
    max_input_chars: int = constants.DEFAULT_MAX_INPUT_CHARS
) -> OpenAICompatibleProvider:
    """
    Create a provider adapter for a known vendor.

    Raises:
        ConfigurationError: Unknown vendor or missing API key
    """
    key = name.lower()
    if key not in PROVIDER_BASE_URLS:
        raise ConfigurationError(
            f"unknown provider '{name}' (expected one of: {', '.join(sorted(PROVIDER_BASE_URLS))})"
        )
    if not api_key:
        raise ConfigurationError(f"{key}: API key is not configured")

    config = OpenAICompatibleConfig(
        name=key,
        base_url=PROVIDER_BASE_URLS[key],
        api_key=api_key,
        model=model or constants.DEFAULT_MODELS[key],
        timeout_seconds=timeout_seconds,
        max_input_chars=max_input_chars,
    )
    logger.debug(f"Created {key} provider with model {config.model}")
    return OpenAICompatibleProvider(config)

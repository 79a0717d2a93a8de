from .base import ProviderAdapter, ProviderError
from .correlation import ToolCallIdAllocator
from .errors import ErrorMapper
from .factory import create_provider
from .openai_compat import OpenAICompatibleConfig, OpenAICompatibleProvider

__all__ = [
    "ProviderAdapter",
    "ProviderError",
    "ToolCallIdAllocator",
    "ErrorMapper",
    "create_provider",
    "OpenAICompatibleConfig",
    "OpenAICompatibleProvider",
]

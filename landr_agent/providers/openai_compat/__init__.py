from .adapter import OpenAICompatibleConfig, OpenAICompatibleProvider

__all__ = ["OpenAICompatibleConfig", "OpenAICompatibleProvider"]

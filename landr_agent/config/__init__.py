"""Configuration: named defaults, settings and configuration errors."""

from . import constants
from .errors import ConfigurationError
from .settings import RuntimeSettings

__all__ = [
    "constants",
    "ConfigurationError",
    "RuntimeSettings",
]

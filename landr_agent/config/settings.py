"""Runtime settings loaded from the environment.

Settings are resolved once by the caller and passed explicitly into the
objects that need them. Nothing in the runtime reads the environment on
its own after construction.
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from . import constants
from .errors import ConfigurationError

DISPATCH_POLICIES = ("race", "fallback", "rotate", "single")


class RuntimeSettings(BaseModel):
    """Settings for building providers and running agents."""

    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    cerebras_api_key: Optional[str] = Field(default=None, description="Cerebras API key")

    dispatch_policy: str = Field(
        default="race",
        description="How multiple providers are combined: race, fallback, rotate or single"
    )
    provider_order: list = Field(
        default_factory=lambda: ["groq", "cerebras"],
        description="Provider preference order (primary first)"
    )
    models: Dict[str, str] = Field(
        default_factory=lambda: dict(constants.DEFAULT_MODELS),
        description="Model id per provider name"
    )

    request_timeout_seconds: float = Field(default=constants.DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    max_input_chars: int = Field(default=constants.DEFAULT_MAX_INPUT_CHARS, ge=1)
    race_deadline_seconds: float = Field(default=constants.RACE_DEADLINE_SECONDS, gt=0)

    agent_max_iterations: int = Field(default=constants.AGENT_MAX_ITERATIONS, ge=1)
    agent_timeout_seconds: float = Field(default=constants.AGENT_TIMEOUT_SECONDS, gt=0)

    @field_validator("dispatch_policy")
    def validate_policy(cls, v):
        if v not in DISPATCH_POLICIES:
            raise ValueError(f"Unknown dispatch policy '{v}'. Allowed: {DISPATCH_POLICIES}")
        return v

    def api_keys(self) -> Dict[str, str]:
        """Configured API keys by provider name (missing keys omitted)."""
        keys = {
            "groq": self.groq_api_key,
            "cerebras": self.cerebras_api_key,
        }
        return {name: key for name, key in keys.items() if key}

    def model_for(self, provider_name: str) -> str:
        return self.models.get(provider_name) or constants.DEFAULT_MODELS[provider_name]

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "RuntimeSettings":
        """
        Build settings from environment variables.

        Loads a ``.env`` file first (without overriding variables that are
        already set).

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        load_dotenv(env_file)

        values: Dict[str, object] = {
            "groq_api_key": os.getenv("GROQ_API_KEY") or None,
            "cerebras_api_key": os.getenv("CEREBRAS_API_KEY") or None,
        }

        policy = os.getenv("LANDR_DISPATCH_POLICY")
        if policy:
            values["dispatch_policy"] = policy.strip().lower()

        agent_model = os.getenv("LANDR_AGENT_MODEL")
        if agent_model:
            values["models"] = {**constants.DEFAULT_MODELS, "groq": agent_model}

        numeric = {
            "LANDR_AGENT_MAX_ITERATIONS": ("agent_max_iterations", int),
            "LANDR_AGENT_TIMEOUT_SECONDS": ("agent_timeout_seconds", float),
            "LANDR_RACE_DEADLINE_SECONDS": ("race_deadline_seconds", float),
            "LANDR_REQUEST_TIMEOUT_SECONDS": ("request_timeout_seconds", float),
            "LANDR_MAX_INPUT_CHARS": ("max_input_chars", int),
        }
        for env_name, (field_name, cast) in numeric.items():
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            try:
                values[field_name] = cast(raw)
            except ValueError as e:
                raise ConfigurationError(f"{env_name} must be a number, got {raw!r}") from e

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

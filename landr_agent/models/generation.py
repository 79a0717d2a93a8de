from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .conversation_types import ConversationTurn


class GenerationParams(BaseModel):
    """
    Per-call generation parameters.

    Anything left as None falls back to the adapter's configuration.
    """
    model_config = ConfigDict(extra="allow")

    model: Optional[str] = Field(None, description="Model identifier override")
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: Optional[int] = Field(None, ge=1, description="Maximum tokens to generate")
    max_input_chars: Optional[int] = Field(None, ge=1, description="Input budget override in characters")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Additional metadata (request_id, etc.)")


class GenerationResponse(BaseModel):
    """One response turn from a provider plus call metadata."""
    turn: ConversationTurn
    provider: str
    model: str
    usage: Dict[str, Any] = Field(default_factory=dict)
    finish_reason: Optional[str] = None

    @property
    def text(self) -> str:
        return self.turn.text or ""


class ProviderResult(BaseModel):
    """Outcome of one provider call inside a dispatch."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    provider_name: str
    response: Optional[GenerationResponse] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None

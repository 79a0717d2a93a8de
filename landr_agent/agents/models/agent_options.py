from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ...config import constants
from ...models.generation import GenerationParams


class AgentOptions(BaseModel):
    max_iterations: int = Field(constants.AGENT_MAX_ITERATIONS, ge=1, description="Model calls allowed per run")
    timeout_seconds: float = Field(constants.AGENT_TIMEOUT_SECONDS, gt=0, description="Wall-clock limit per run")
    concurrent_tools: bool = True
    system_prompt: Optional[str] = None
    params: Optional[GenerationParams] = None

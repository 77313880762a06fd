from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .messages import ToolCall


class Usage(BaseModel):
    """Token accounting for a single provider call."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class ChatResponse(BaseModel):
    """Normalized response from a provider."""

    model_config = ConfigDict(frozen=True)

    content: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict, repr=False)  # decoded wire body, for capture


__all__ = ["Usage", "ChatResponse"]

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .messages import Message, ToolDef


class ChatRequest(BaseModel):
    """Normalized chat request handed to every provider. Rebuilt on each loop iteration."""

    model_config = ConfigDict(frozen=True)

    messages: List[Message]
    tools: List[ToolDef] = Field(default_factory=list)
    model: Optional[str] = None  # overrides the provider default
    max_tokens: Optional[int] = None


__all__ = ["ChatRequest"]

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


Role = Literal["system", "user", "assistant", "tool"]


class ToolCall(BaseModel):
    """A model-issued request to run one ``tool.command`` with JSON arguments."""

    model_config = ConfigDict(frozen=True)

    id: str  # correlates call with result
    name: str  # "tool.command"
    arguments: str = "{}"  # JSON-encoded object, kept as text


class Message(BaseModel):
    """Canonical conversation turn shared by the loop, the store and every provider."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)  # assistant messages requesting tools
    tool_call_id: Optional[str] = None  # tool result messages

    @model_validator(mode="after")
    def _check_role_fields(self) -> "Message":
        if self.tool_calls and self.role != "assistant":
            raise ValueError(f"tool_calls are only allowed on assistant messages, got role={self.role!r}")
        if self.tool_call_id is not None and self.role != "tool":
            raise ValueError(f"tool_call_id is only allowed on tool messages, got role={self.role!r}")
        if self.role == "tool" and self.tool_call_id is None:
            raise ValueError("tool messages require a tool_call_id")
        return self


class ToolDef(BaseModel):
    """Tool advertised to the model on every turn."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameters: dict = Field(default_factory=lambda: {"type": "object", "properties": {}})


__all__ = ["Role", "Message", "ToolCall", "ToolDef"]

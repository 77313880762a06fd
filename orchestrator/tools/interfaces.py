"""Tool execution interface consumed by the agent loop."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from orchestrator.types.messages import ToolCall


@runtime_checkable
class ToolInvoker(Protocol):
    """Protocol for anything that turns a ToolCall into output text."""

    async def execute(self, call: ToolCall) -> str:
        """Run the call and return its output. Raise ToolError on failure."""
        ...


__all__ = ["ToolInvoker"]

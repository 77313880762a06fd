from __future__ import annotations

from typing import Protocol, runtime_checkable

from orchestrator.types.requests import ChatRequest
from orchestrator.types.responses import ChatResponse


@runtime_checkable
class ChatProvider(Protocol):
    """
    Provider-agnostic chat capability.

    Implementations translate the canonical ChatRequest into one backend's wire
    format and the backend's reply into a ChatResponse. They hold no per-call
    state, so one instance can serve concurrent loop runs.
    """

    name: str

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Run a single non-streaming chat completion."""

        ...


__all__ = ["ChatProvider"]

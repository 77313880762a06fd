from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class RunContext(BaseModel):
    """Per-run context for tracing and capture attribution."""

    run_id: str = Field(default_factory=lambda: str(uuid4()))
    session_key: str = ""
    provider: str = ""
    model: Optional[str] = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        session_key: str = "",
        provider: str = "",
        model: str | None = None,
    ) -> "RunContext":
        return cls(session_key=session_key, provider=provider, model=model)


__all__ = ["RunContext"]

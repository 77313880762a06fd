"""Build the message list for a provider call from workspace files and session history."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from orchestrator.tools.registry import ToolRegistry
from orchestrator.types.messages import Message

TRUNCATION_MARKER = "\n\n[... truncated]"
SECTION_SEPARATOR = "\n\n---\n\n"

BOOTSTRAP_FILES = (
    "AGENTS.md",
    "SOUL.md",
    "USER.md",
    "IDENTITY.md",
    "TOOLS.md",
)


@runtime_checkable
class ContextBuilder(Protocol):
    def build_messages(self, history: Sequence[Message], summary: str, user_text: str) -> List[Message]: ...


@dataclass(frozen=True)
class ContextConfig:
    bootstrap_max_chars: int = 20000  # per file
    bootstrap_total_max_chars: int = 24000  # across all files
    learnings_max_chars: int = 4000


class WorkspaceContextBuilder(ContextBuilder):
    """System prompt from identity, workspace bootstrap files, tools, learnings and summary."""

    def __init__(
        self,
        workspace: str | os.PathLike,
        registry: Optional[ToolRegistry] = None,
        config: Optional[ContextConfig] = None,
    ) -> None:
        self.workspace = Path(workspace)
        self.registry = registry
        self.config = config or ContextConfig()
        self._learnings = ""

    def set_learnings(self, learnings: str) -> None:
        """Inject text from previous sessions into every subsequent system prompt."""
        self._learnings = learnings

    def build_messages(self, history: Sequence[Message], summary: str, user_text: str) -> List[Message]:
        return [
            Message(role="system", content=self.build_system_prompt(summary)),
            *history,
            Message(role="user", content=user_text),
        ]

    def build_system_prompt(self, summary: str = "") -> str:
        parts = [self._identity()]

        bootstrap = self._bootstrap_files()
        if bootstrap:
            parts.append(bootstrap)

        tool_summary = self._tool_summary()
        if tool_summary:
            parts.append(tool_summary)

        if self._learnings:
            learnings = self._learnings
            if len(learnings) > self.config.learnings_max_chars:
                learnings = learnings[: self.config.learnings_max_chars] + TRUNCATION_MARKER
            parts.append(learnings)

        if summary:
            parts.append("## Previous Conversation Summary\n\n" + summary)

        return SECTION_SEPARATOR.join(parts)

    def _identity(self) -> str:
        now = datetime.now().strftime("%Y-%m-%d %H:%M (%A)")
        return (
            "# teeny-orchestrator\n\n"
            "You are an autonomous AI agent that acts through external tools.\n\n"
            f"## Current Time\n{now}\n\n"
            f"## Runtime\n{platform.system().lower()} {platform.machine()}, "
            f"Python {platform.python_version()}\n\n"
            f"## Workspace\n{self.workspace.resolve()}\n\n"
            "## Important Rules\n"
            "1. Use tools to perform actions. Do not pretend to execute commands.\n"
            "2. Record important decisions and learnings to agent-memory.\n"
            "3. When done with a task, mark it complete via todo-mgmt if applicable."
        )

    def _bootstrap_files(self) -> str:
        parts: List[str] = []
        total = 0
        for filename in BOOTSTRAP_FILES:
            if total >= self.config.bootstrap_total_max_chars:
                break
            try:
                content = (self.workspace / filename).read_text(encoding="utf-8")
            except OSError:
                continue

            if len(content) > self.config.bootstrap_max_chars:
                content = content[: self.config.bootstrap_max_chars] + TRUNCATION_MARKER
            remaining = self.config.bootstrap_total_max_chars - total
            if len(content) > remaining:
                content = content[:remaining] + TRUNCATION_MARKER

            parts.append(f"## {filename}\n\n{content}")
            total += len(content)

        if not parts:
            return ""
        return "# Workspace Context\n\n" + "\n\n".join(parts)

    def _tool_summary(self) -> str:
        if self.registry is None:
            return ""
        defs = self.registry.to_tool_defs()
        if not defs:
            return ""
        lines = ["## Available Tools\n\nYou MUST use tools to perform actions.\n"]
        lines.extend(f"- **{d.name}**: {d.description}" for d in defs)
        return "\n".join(lines) + "\n"


__all__ = ["ContextBuilder", "ContextConfig", "WorkspaceContextBuilder", "BOOTSTRAP_FILES"]

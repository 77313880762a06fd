"""
OrchestratorService: facade that wires the agent loop from Django settings.

Use from other code (views, management commands, background workers):

    from orchestrator import get_orchestrator_service

    service = get_orchestrator_service()
    reply = service.run("main", "What's on my todo list?")

From async code:

    reply = await service.arun("cron:daily-report", "Write the daily report")
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from asgiref.sync import async_to_sync

from orchestrator import conf
from orchestrator.context.builder import WorkspaceContextBuilder
from orchestrator.core.registry import ProviderConfig, create_provider
from orchestrator.pipelines.agent_loop import AgentLoop, LoopConfig
from orchestrator.service.capture import CallLogCaptureSink, CaptureSink, TokenEvalCaptureSink
from orchestrator.service.errors import ConfigurationError
from orchestrator.sessions.store import FileSessionStore
from orchestrator.tools.executor import ToolExecutor
from orchestrator.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def build_capture_sink(backend: str) -> Optional[CaptureSink]:
    if backend == "token-eval":
        return TokenEvalCaptureSink(conf.get_eval_binary())
    if backend == "call-log":
        return CallLogCaptureSink()
    if backend in ("none", ""):
        return None
    raise ConfigurationError(
        f"Unknown capture backend: {backend!r}. Supported: {', '.join(conf.CAPTURE_BACKENDS)}"
    )


class OrchestratorService:
    """Owns one provider, tool registry, session store and context builder.

    Accepts an optional prebuilt loop for testability. When omitted the loop
    is assembled lazily from settings on first use.
    """

    def __init__(self, loop: AgentLoop | None = None) -> None:
        self._loop = loop
        self._lock = threading.Lock()

    @property
    def loop(self) -> AgentLoop:
        if self._loop is None:
            with self._lock:
                if self._loop is None:
                    self._loop = self._build_loop()
        return self._loop

    def _build_loop(self) -> AgentLoop:
        provider = create_provider(ProviderConfig(
            name=conf.get_provider_name(),
            api_key=conf.get_api_key(),
            model=conf.get_model(),
            base_url=conf.get_base_url(),
            timeout=conf.get_request_timeout(),
        ))

        registry = ToolRegistry()
        found = registry.discover(conf.get_tool_dirs())
        logger.info("Discovered %d tools for provider %s", found, provider.name)

        return AgentLoop(
            provider=provider,
            executor=ToolExecutor(registry, timeout=conf.get_tool_timeout()),
            context_builder=WorkspaceContextBuilder(conf.get_workspace(), registry),
            sessions=FileSessionStore(conf.get_session_dir()),
            tools=registry.to_tool_defs(),
            config=LoopConfig(
                max_iterations=conf.get_max_iterations(),
                model=conf.get_model(),
                max_tokens=conf.get_max_tokens(),
                auto_capture=conf.get_auto_capture(),
            ),
            capture_sink=build_capture_sink(conf.get_capture_backend()),
        )

    async def arun(self, session_key: str | None, message: str) -> str:
        """Run one user message through the agent loop."""
        return await self.loop.run(session_key or conf.get_default_session_key(), message)

    def run(self, session_key: str | None, message: str) -> str:
        """Blocking wrapper around ``arun()`` for sync callers."""
        return async_to_sync(self.arun)(session_key, message)


_global_service: OrchestratorService | None = None
_global_service_lock = threading.Lock()


def get_orchestrator_service() -> OrchestratorService:
    """Return the process-wide OrchestratorService singleton (thread-safe)."""
    global _global_service
    if _global_service is None:
        with _global_service_lock:
            if _global_service is None:
                _global_service = OrchestratorService()
    return _global_service


__all__ = ["OrchestratorService", "build_capture_sink", "get_orchestrator_service"]

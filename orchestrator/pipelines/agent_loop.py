"""Agent loop: call the provider, run requested tools, feed results back, repeat."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from orchestrator.context.builder import ContextBuilder
from orchestrator.core.interfaces import ChatProvider
from orchestrator.service.capture import CaptureSink, truncate
from orchestrator.service.errors import OrchestratorError, ProviderError, ToolError
from orchestrator.sessions.store import SessionStore
from orchestrator.tools.interfaces import ToolInvoker
from orchestrator.types.context import RunContext
from orchestrator.types.messages import Message, ToolCall, ToolDef
from orchestrator.types.requests import ChatRequest
from orchestrator.types.responses import ChatResponse
from orchestrator.types.transcript import Transcript

logger = logging.getLogger(__name__)

MAX_ITERATIONS_REACHED = "[max iterations reached]"
EMPTY_RESPONSE_FALLBACK = "I've completed processing but have no response to give."
TOOL_CANCELLED_RESULT = "Error: cancelled"


@dataclass(frozen=True)
class LoopConfig:
    max_iterations: int = 20
    model: Optional[str] = None  # None uses the provider default
    max_tokens: Optional[int] = None
    auto_capture: bool = True


class AgentLoop:
    """Drives one conversation turn through the call/execute cycle.

    All collaborators are injected and shared read-only, so several runs may
    execute concurrently as long as each uses its own session key.
    """

    def __init__(
        self,
        provider: ChatProvider,
        executor: ToolInvoker,
        context_builder: ContextBuilder,
        sessions: SessionStore,
        tools: Sequence[ToolDef] = (),
        config: Optional[LoopConfig] = None,
        capture_sink: Optional[CaptureSink] = None,
    ) -> None:
        self.provider = provider
        self.executor = executor
        self.context_builder = context_builder
        self.sessions = sessions
        self.tools = tuple(tools)
        self.config = config or LoopConfig()
        self.capture_sink = capture_sink

    async def run(self, session_key: str, user_message: str) -> str:
        """Process one user message and return the final assistant text.

        Raises ProviderError (or another OrchestratorError) when the provider
        call fails; tool failures are reported back to the model instead.
        """
        context = RunContext.create(
            session_key=session_key,
            provider=self.provider.name,
            model=self.config.model,
        )
        history = self.sessions.get_history(session_key)
        summary = self.sessions.get_summary(session_key)
        transcript = Transcript(self.context_builder.build_messages(history, summary, user_message))

        await self._persist(session_key, Message(role="user", content=user_message))

        final_content = ""
        max_iterations = self.config.max_iterations
        for iteration in range(1, max_iterations + 1):
            logger.debug(
                "[loop %s] iteration %d/%d, %d messages",
                session_key, iteration, max_iterations, len(transcript),
            )
            request = ChatRequest(
                messages=transcript.snapshot(),
                tools=list(self.tools),
                model=self.config.model,
                max_tokens=self.config.max_tokens,
            )
            response = await self._call_provider(request, iteration)

            if self.config.auto_capture and self.capture_sink is not None:
                await self._capture(response, user_message, iteration, context)

            logger.info(
                "[loop %s] response: %d chars, %d tool calls, usage: %d+%d tokens",
                session_key,
                len(response.content),
                len(response.tool_calls),
                response.usage.prompt_tokens,
                response.usage.completion_tokens,
            )

            if not response.tool_calls:
                final_content = response.content
                break

            assistant = Message(role="assistant", content=response.content, tool_calls=response.tool_calls)
            try:
                await self._persist(session_key, transcript.append(assistant))
                for call in response.tool_calls:
                    result = await self._execute(call)
                    tool_message = Message(role="tool", content=result, tool_call_id=call.id)
                    await self._persist(session_key, transcript.append(tool_message))
            finally:
                # A cancelled run must not leave unanswered calls in the stored history.
                closed = transcript.close_pending(TOOL_CANCELLED_RESULT)
                if closed:
                    self._persist_now(session_key, closed)

            if iteration == max_iterations:
                final_content = response.content or MAX_ITERATIONS_REACHED

        if not final_content:
            final_content = EMPTY_RESPONSE_FALLBACK

        await self._persist(session_key, Message(role="assistant", content=final_content))
        return final_content

    async def _call_provider(self, request: ChatRequest, iteration: int) -> ChatResponse:
        try:
            return await self.provider.chat(request)
        except OrchestratorError as exc:
            logger.warning("LLM call failed (iteration %d): %s", iteration, exc)
            raise
        except Exception as exc:
            raise ProviderError(
                f"LLM call failed (iteration {iteration}): {exc}", provider=self.provider.name
            ) from exc

    async def _execute(self, call: ToolCall) -> str:
        logger.info("Executing tool %s(%s)", call.name, truncate(call.arguments, 100))
        try:
            result = await self.executor.execute(call)
        except ToolError as exc:
            logger.warning("Tool %s failed: %s", call.name, exc)
            return f"Error: {exc}"
        except Exception as exc:
            logger.exception("Tool %s raised unexpectedly", call.name)
            return f"Error: {exc}"
        logger.debug("Tool %s result: %s", call.name, truncate(result, 200))
        return result

    async def _capture(self, response: ChatResponse, intent: str, iteration: int, context: RunContext) -> None:
        try:
            await asyncio.to_thread(self.capture_sink.record, response, intent, iteration, context)
        except Exception:
            logger.exception("Capture failed for iteration %d", iteration)

    async def _persist(self, session_key: str, message: Message) -> None:
        self.sessions.add_message(session_key, message)
        try:
            await asyncio.to_thread(self.sessions.save, session_key)
        except OSError:
            logger.exception("Failed to save session %s", session_key)

    def _persist_now(self, session_key: str, messages: Sequence[Message]) -> None:
        """Blocking save, for cleanup paths that may run inside a cancelled task."""
        for message in messages:
            self.sessions.add_message(session_key, message)
        try:
            self.sessions.save(session_key)
        except OSError:
            logger.exception("Failed to save session %s", session_key)


__all__ = [
    "AgentLoop",
    "LoopConfig",
    "MAX_ITERATIONS_REACHED",
    "EMPTY_RESPONSE_FALLBACK",
    "TOOL_CANCELLED_RESULT",
]

"""
Best-effort call capture.

A capture sink receives every provider response together with the user
intent and iteration number. Sinks must never raise: a capture failure is
logged and otherwise ignored so it can never affect a loop run.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from typing import Protocol, runtime_checkable

from orchestrator.types.context import RunContext
from orchestrator.types.responses import ChatResponse

logger = logging.getLogger(__name__)

DEFAULT_EVAL_BINARY = "token-eval"
CAPTURE_TIMEOUT = 10.0


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def capture_intent(intent: str, iteration: int) -> str:
    return f"orchestrator:{truncate(intent, 50)}:iter{iteration}"


@runtime_checkable
class CaptureSink(Protocol):
    def record(self, response: ChatResponse, intent: str, iteration: int, context: RunContext) -> None:
        """Record one provider call. Implementations swallow their own failures."""
        ...


class TokenEvalCaptureSink(CaptureSink):
    """Forward call usage to the ``token-eval record`` command, if it is installed."""

    def __init__(self, binary: str = DEFAULT_EVAL_BINARY, timeout: float = CAPTURE_TIMEOUT) -> None:
        self.binary = binary
        self.timeout = timeout

    def record(self, response: ChatResponse, intent: str, iteration: int, context: RunContext) -> None:
        if not self.binary:
            return
        executable = shutil.which(self.binary)
        if executable is None:
            return

        args = [
            executable,
            "record",
            "--provider", context.provider,
            "--prompt-tokens", str(response.usage.prompt_tokens),
            "--completion-tokens", str(response.usage.completion_tokens),
            "--intent", capture_intent(intent, iteration),
        ]
        payload = json.dumps({"session": context.session_key, "iteration": iteration})
        try:
            subprocess.run(
                args,
                input=payload,
                text=True,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError):
            logger.debug("token-eval capture failed", exc_info=True)


class CallLogCaptureSink(CaptureSink):
    """Write one ModelCallLog row per provider call."""

    def record(self, response: ChatResponse, intent: str, iteration: int, context: RunContext) -> None:
        try:
            from orchestrator.models import ModelCallLog

            usage = response.usage
            ModelCallLog.objects.create(
                run_id=context.run_id,
                session_key=context.session_key,
                provider=context.provider,
                model=response.model or context.model or "",
                iteration=iteration,
                intent=capture_intent(intent, iteration),
                tool_call_count=len(response.tool_calls),
                stop_reason=response.stop_reason or "",
                raw_output=json.dumps(response.raw, default=str),
                input_tokens=usage.prompt_tokens,
                output_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )
        except Exception:
            logger.exception("Failed to write model call log")


__all__ = [
    "CaptureSink",
    "TokenEvalCaptureSink",
    "CallLogCaptureSink",
    "capture_intent",
    "truncate",
]

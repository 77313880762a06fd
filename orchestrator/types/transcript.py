"""Append-only message list for one loop run.

Enforces tool-call correlation: every tool message must answer a pending call
of the latest assistant message, and the conversation cannot move on while
calls from that message are still unanswered.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from orchestrator.service.errors import TranscriptError

from .messages import Message

logger = logging.getLogger(__name__)

UNANSWERED_CALL_RESULT = "Error: no result was recorded for this tool call"


class Transcript:
    def __init__(self, seed: Iterable[Message] = ()) -> None:
        # Seed messages (system prompt, stored history, user input) come from
        # storage and may end mid-turn; dangling calls are closed, orphan
        # results dropped.
        self._messages: List[Message] = []
        self._pending: List[str] = []
        for message in seed:
            if message.role == "tool":
                if message.tool_call_id not in self._pending:
                    logger.warning("Dropping tool result for unknown call %r", message.tool_call_id)
                    continue
            elif self._pending:
                self.close_pending(UNANSWERED_CALL_RESULT)
            self.append(message)

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def pending_call_ids(self) -> List[str]:
        return list(self._pending)

    def append(self, message: Message) -> Message:
        if message.role == "tool":
            if message.tool_call_id not in self._pending:
                raise TranscriptError(
                    f"tool message references tool_call_id={message.tool_call_id!r}, "
                    f"which is not pending (pending={self._pending})"
                )
            self._pending.remove(message.tool_call_id)
        elif self._pending:
            raise TranscriptError(
                f"cannot append a {message.role} message while tool calls are unanswered: {self._pending}"
            )
        if message.role == "assistant":
            self._pending = [tc.id for tc in message.tool_calls]
        self._messages.append(message)
        return message

    def close_pending(self, content: str) -> List[Message]:
        """Answer every pending call with ``content``; returns the messages added."""
        closed = []
        for call_id in list(self._pending):
            logger.warning("Closing unanswered tool call %r", call_id)
            closed.append(self.append(Message(role="tool", content=content, tool_call_id=call_id)))
        return closed

    def snapshot(self) -> List[Message]:
        """Return a copy of the messages; callers may not mutate the transcript through it."""
        return list(self._messages)


__all__ = ["Transcript", "UNANSWERED_CALL_RESULT"]

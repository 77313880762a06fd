"""
Conversation history persistence.

Each session lives in memory and in one JSON file under the store directory.
Writes go to a temporary file in the same directory that is then renamed over
the target, so a reader never sees a partially written transcript.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Protocol, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

from orchestrator.types.messages import Message

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[:/\\]")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Session(BaseModel):
    key: str
    messages: List[Message] = Field(default_factory=list)
    summary: str = ""
    created: datetime = Field(default_factory=_now)
    updated: datetime = Field(default_factory=_now)


@runtime_checkable
class SessionStore(Protocol):
    """What the agent loop needs from a session store."""

    def get_history(self, key: str) -> List[Message]: ...

    def get_summary(self, key: str) -> str: ...

    def add_message(self, key: str, message: Message) -> None: ...

    def save(self, key: str) -> None: ...


def sanitize_key(key: str) -> str:
    """Filesystem-safe file stem for a session key."""
    return _UNSAFE_KEY_CHARS.sub("_", key)


class FileSessionStore(SessionStore):
    """Directory-backed session store, safe for concurrent use across keys."""

    def __init__(self, directory: str | os.PathLike) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._load_all()

    def get_history(self, key: str) -> List[Message]:
        with self._lock:
            session = self._sessions.get(key)
            return list(session.messages) if session else []

    def get_summary(self, key: str) -> str:
        with self._lock:
            session = self._sessions.get(key)
            return session.summary if session else ""

    def add_message(self, key: str, message: Message) -> None:
        with self._lock:
            session = self._get_or_create(key)
            session.messages.append(message)
            session.updated = _now()

    def set_summary(self, key: str, summary: str, keep_last: int = 0) -> None:
        """Store a compaction summary and keep only the last ``keep_last`` messages."""
        with self._lock:
            session = self._get_or_create(key)
            session.summary = summary
            if keep_last > 0 and len(session.messages) > keep_last:
                session.messages = session.messages[-keep_last:]
            session.updated = _now()

    def message_count(self, key: str) -> int:
        with self._lock:
            session = self._sessions.get(key)
            return len(session.messages) if session else 0

    def save(self, key: str) -> None:
        """Persist one session atomically. Saving an unknown key does nothing."""
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                return
            data = session.model_dump_json(indent=2)

        path = self.directory / f"{sanitize_key(key)}.json"
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix="session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(data)
            os.replace(tmp_path, path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def _get_or_create(self, key: str) -> Session:
        session = self._sessions.get(key)
        if session is None:
            session = Session(key=key)
            self._sessions[key] = session
        return session

    def _load_all(self) -> None:
        for path in sorted(self.directory.glob("*.json")):
            try:
                session = Session.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValidationError) as exc:
                logger.warning("Skipping unreadable session file %s: %s", path, exc)
                continue
            self._sessions[session.key] = session


__all__ = ["Session", "SessionStore", "FileSessionStore", "sanitize_key"]

from .store import FileSessionStore, Session, SessionStore, sanitize_key

__all__ = ["FileSessionStore", "Session", "SessionStore", "sanitize_key"]

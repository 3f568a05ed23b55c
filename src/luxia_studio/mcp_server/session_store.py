"""
Gemini API keys supplied by SSE clients.

Each SSE connection gets its own session id, bound to a context variable
for the duration of the connection so tool calls served on it can find
the key its client sent. Keys never leak between connections.
"""

import uuid
from contextvars import ContextVar

current_session_id: ContextVar[str | None] = ContextVar("luxia_session_id", default=None)

# Key: session id, Value: Gemini API key
session_api_keys: dict[str, str] = {}


def open_session(api_key: str | None = None) -> str:
    """Start a session for one connection and bind it to the current context."""
    session_id = uuid.uuid4().hex
    if api_key:
        set_session_api_key(session_id, api_key)
    current_session_id.set(session_id)
    return session_id


def close_session(session_id: str) -> None:
    """Forget the key stored for a session."""
    session_api_keys.pop(session_id, None)


def get_session_api_key(session_id: str | None = None) -> str | None:
    """Get the key stored for a session, or for the session bound to this context."""
    session_id = session_id or current_session_id.get()
    if session_id is None:
        return None
    return session_api_keys.get(session_id)


def set_session_api_key(session_id: str, api_key: str) -> None:
    """Store an API key for a session."""
    session_api_keys[session_id] = api_key

"""
Session overlay store.

Holds each session's NotificationOverlay, keyed by the X-Session-Id header.
This is the only mutable state the service shares between requests.

Requests without the header see derived state only: reads get an empty
overlay and writes are rejected with 400, so one client's read and dismiss
marks never show up for another.
"""

import threading
from collections import OrderedDict
from typing import Callable, Optional

from fastapi import Header, HTTPException

from rtwpilot.models import NotificationOverlay

# Least recently used sessions are evicted beyond this count
MAX_SESSIONS = 1024


class OverlayStore:
    """Thread-safe, size-bounded map of session id to overlay."""

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._lock = threading.Lock()
        self._overlays: OrderedDict[str, NotificationOverlay] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._overlays)

    def get(self, session_id: Optional[str]) -> NotificationOverlay:
        if session_id is None:
            return NotificationOverlay()
        with self._lock:
            overlay = self._overlays.get(session_id)
            if overlay is None:
                return NotificationOverlay()
            self._overlays.move_to_end(session_id)
            return overlay

    def update(
        self,
        session_id: str,
        change: Callable[[NotificationOverlay], NotificationOverlay],
    ) -> NotificationOverlay:
        """Apply `change` to the session's overlay and store the result."""
        with self._lock:
            overlay = change(self._overlays.get(session_id, NotificationOverlay()))
            self._overlays[session_id] = overlay
            self._overlays.move_to_end(session_id)
            while len(self._overlays) > self.max_sessions:
                self._overlays.popitem(last=False)
            return overlay

    def clear(self) -> None:
        with self._lock:
            self._overlays.clear()


def optional_session(x_session_id: Optional[str] = Header(None)) -> Optional[str]:
    """Session id for read endpoints; None when the header is absent."""
    return x_session_id or None


def require_session(x_session_id: Optional[str] = Header(None)) -> str:
    """Session id for endpoints that change the overlay."""
    if not x_session_id:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "RTW_SESSION_REQUIRED",
                "message": "X-Session-Id header is required to change read or dismissed state",
            },
        )
    return x_session_id

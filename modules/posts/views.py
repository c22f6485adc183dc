"""
Per-session view markers.

A post's view counter is incremented at most once per browsing session.
Sessions are identified by an opaque key carried in a cookie.
"""

import threading
from collections import OrderedDict


class ViewMarkerStore:
    """
    In-process record of which posts each session has viewed.

    Least recently active sessions are evicted past max_sessions.
    """

    def __init__(self, max_sessions: int = 10_000):
        self._max_sessions = max_sessions
        self._viewed: OrderedDict[str, set[str]] = OrderedDict()
        self._lock = threading.Lock()

    def mark_viewed(self, session_key: str, post_id: str) -> bool:
        """Record a view; True only the first time for this session and post."""
        with self._lock:
            viewed = self._viewed.setdefault(session_key, set())
            self._viewed.move_to_end(session_key)
            if post_id in viewed:
                return False
            viewed.add(post_id)
            while len(self._viewed) > self._max_sessions:
                self._viewed.popitem(last=False)
            return True

    def has_viewed(self, session_key: str, post_id: str) -> bool:
        with self._lock:
            return post_id in self._viewed.get(session_key, ())

    def clear(self) -> None:
        with self._lock:
            self._viewed.clear()

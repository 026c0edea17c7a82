"""
Latest-request guards for rapid re-uploads.

Each session hands out monotonically increasing tokens. A result is committed only
if its token is still the newest one issued, so a slow extraction that finishes
after a newer upload never overwrites the newer result.
"""

from collections import OrderedDict
from threading import Lock
from typing import Any, Optional


class RequestGuard:
    """Token counter and last committed result for one session."""

    def __init__(self):
        self._lock = Lock()
        self._latest_token = 0
        self._committed_token = 0
        self._result: Optional[Any] = None

    def begin(self) -> int:
        """Issue a new token; every earlier token becomes stale."""
        with self._lock:
            self._latest_token += 1
            return self._latest_token

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest_token

    def commit(self, token: int, result: Any) -> bool:
        """Store result if token is still the latest. Returns whether it was stored."""
        with self._lock:
            if token != self._latest_token:
                return False
            self._committed_token = token
            self._result = result
            return True

    @property
    def latest(self) -> Optional[Any]:
        with self._lock:
            return self._result

    @property
    def committed_token(self) -> int:
        with self._lock:
            return self._committed_token


class SessionRegistry:
    """
    One RequestGuard per session id; sessions share nothing.

    At most ``max_sessions`` guards are kept. The least recently used session is
    evicted first, together with its committed result.
    """

    def __init__(self, max_sessions: int = 1000):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be >= 1, got {max_sessions}")
        self.max_sessions = max_sessions
        self._lock = Lock()
        self._guards: "OrderedDict[str, RequestGuard]" = OrderedDict()

    def guard(self, session_id: str) -> RequestGuard:
        with self._lock:
            guard = self._guards.get(session_id)
            if guard is None:
                guard = self._guards[session_id] = RequestGuard()
                while len(self._guards) > self.max_sessions:
                    self._guards.popitem(last=False)
            else:
                self._guards.move_to_end(session_id)
            return guard

    def latest(self, session_id: str) -> Optional[Any]:
        with self._lock:
            guard = self._guards.get(session_id)
            if guard is not None:
                self._guards.move_to_end(session_id)
        return guard.latest if guard is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._guards)

    def clear(self) -> None:
        with self._lock:
            self._guards.clear()

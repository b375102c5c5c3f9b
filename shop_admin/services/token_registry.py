from __future__ import annotations

import os
import secrets
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from shop_admin.utils.logging_config import get_logger
from shop_admin.utils.timeutils import utcnow

DEFAULT_TOKEN_TTL = timedelta(hours=float(os.getenv("SHOP_ADMIN_TOKEN_TTL_HOURS", "24")))

logger = get_logger(__name__)


class SessionToken:
    """A registered bearer token. Holds only the subject id, never the user."""

    __slots__ = ("token", "subject_id", "expires_at")

    def __init__(self, token: str, subject_id: str, expires_at: datetime):
        self.token = token
        self.subject_id = subject_id
        self.expires_at = expires_at

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class SessionTokenRegistry:
    """In-memory mapping of opaque token -> (subject id, expiry).

    Nothing is persisted: a process restart drops every session. Expired
    entries are only removed when they are looked up again; tokens that are
    never presented after expiry stay until restart.

    Sync FastAPI handlers run on a thread pool, so every access to the map
    goes through one lock.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens: Dict[str, SessionToken] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, subject_id: str, ttl: Optional[timedelta] = None) -> str:
        expires_at = self._clock() + (ttl if ttl is not None else self._ttl)
        with self._lock:
            token = secrets.token_hex(32)
            while token in self._tokens:
                token = secrets.token_hex(32)
            self._tokens[token] = SessionToken(token, subject_id, expires_at)
        return token

    def validate(self, token: str) -> Optional[str]:
        """Return the subject id for a live token, ``None`` otherwise.

        An expired entry is evicted as part of the lookup.
        """
        now = self._clock()
        with self._lock:
            entry = self._tokens.get(token)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._tokens[token]
                logger.info(f"Evicted expired token for subject {entry.subject_id}")
                return None
            return entry.subject_id

    def revoke(self, token: str) -> None:
        with self._lock:
            self._tokens.pop(token, None)

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._tokens

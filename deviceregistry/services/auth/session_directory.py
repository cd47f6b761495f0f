"""In-memory directory of authenticated sessions."""
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional
from uuid import UUID

from deviceregistry.services.exceptions import SessionNotFoundOrExpiredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """An authenticated identity bound to a bearer token until ``expires_at``."""

    token: str
    subject_id: UUID
    subject_label: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        # A non-positive lifetime is expired from the instant it is created
        return self.expires_at <= self.created_at or now > self.expires_at


class SessionDirectory:
    """
    Process-local, thread-safe mapping of session tokens to sessions.

    Expired sessions are never returned, but they stay in memory until they
    are deleted or swept. A sweep runs inside ``create`` once the directory
    holds ``sweep_threshold`` entries; ``purge_expired`` can also be called
    directly.

    One lock covers every operation, so readers never see a half-written entry.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        sweep_threshold: int = 1024,
    ):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sweep_threshold = sweep_threshold
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _generate_token(self) -> str:
        """Generate a cryptographically secure session token."""
        return secrets.token_urlsafe(32)

    def create(self, subject_id: UUID, subject_label: str, duration: timedelta) -> str:
        """
        Record a new session and return its token.

        A zero or negative ``duration`` is allowed and yields a session that
        is already expired.
        """
        created_at = self._clock()
        expires_at = created_at + duration

        with self._lock:
            if len(self._sessions) >= self._sweep_threshold:
                self._purge_expired_locked()

            token = self._generate_token()
            while token in self._sessions:
                token = self._generate_token()

            self._sessions[token] = Session(
                token=token,
                subject_id=subject_id,
                subject_label=subject_label,
                expires_at=expires_at,
                created_at=created_at,
            )

        logger.info("Session created for %s (expires %s)", subject_label, expires_at.isoformat())
        return token

    def get(self, token: str) -> Optional[Session]:
        """Return the session for ``token``, or None if it is unknown or expired."""
        with self._lock:
            session = self._sessions.get(token)
        if session is None or session.is_expired(self._clock()):
            return None
        return session

    def require(self, token: str) -> Session:
        """Like ``get`` but raises SessionNotFoundOrExpiredError instead of returning None."""
        session = self.get(token)
        if session is None:
            raise SessionNotFoundOrExpiredError()
        return session

    def delete(self, token: str) -> None:
        """Remove a session. Unknown tokens are ignored."""
        with self._lock:
            removed = self._sessions.pop(token, None)
        if removed is not None:
            logger.info("Session revoked for %s", removed.subject_label)

    def purge_expired(self) -> int:
        """Drop every expired session and return how many were removed."""
        with self._lock:
            return self._purge_expired_locked()

    def _purge_expired_locked(self) -> int:
        now = self._clock()
        expired = [token for token, session in self._sessions.items() if session.is_expired(now)]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug("Purged %d expired sessions", len(expired))
        return len(expired)

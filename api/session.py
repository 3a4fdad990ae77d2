"""Table sessions: signed session IDs and an in-memory store with expiry."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from random import Random
from typing import Awaitable, Callable
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from api.timers import RestartTimer
from config import config
from core.cards import Deck
from core.game import BlackjackRound, Phase, RoundSnapshot

logger = logging.getLogger(__name__)

RestartListener = Callable[[RoundSnapshot], Awaitable[None]]


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds, or None for no age limit

        Returns:
            The session ID if valid, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


@dataclass
class TableSession:
    """One player's table: the round controller and its auto-restart timer."""

    session_id: str
    game: BlackjackRound
    restart_timer: RestartTimer
    expires_at: datetime
    listeners: list[RestartListener] = field(default_factory=list)

    def deal(self) -> RoundSnapshot:
        """Deal a new round; any pending auto-restart is dropped."""
        if not self.game.can_deal:
            return self.game.snapshot()
        self.restart_timer.cancel()
        return self._after_action(self.game.deal())

    def hit(self) -> RoundSnapshot:
        return self._after_action(self.game.hit())

    def stand(self) -> RoundSnapshot:
        return self._after_action(self.game.stand())

    def restart(self) -> RoundSnapshot:
        """Manual restart; supersedes a pending auto-restart."""
        self.restart_timer.cancel()
        return self.game.restart()

    def _after_action(self, snapshot: RoundSnapshot) -> RoundSnapshot:
        if snapshot.phase == Phase.RESOLVED and not self.restart_timer.pending:
            self.restart_timer.schedule(self._auto_restart)
        return snapshot

    async def _auto_restart(self) -> None:
        logger.info("Auto-restarting table %s", self.session_id)
        snapshot = self.game.restart()
        for listener in list(self.listeners):
            await listener(snapshot)


class SessionStore:
    """In-memory table store keyed by raw session ID."""

    def __init__(
        self,
        restart_delay: float | None = None,
        deck_factory: Callable[[], Deck] | None = None,
    ) -> None:
        self._sessions: dict[str, TableSession] = {}
        self.restart_delay = (
            config.game.auto_restart_seconds if restart_delay is None else restart_delay
        )
        self.deck_factory = deck_factory

    def create(self) -> tuple[str, TableSession]:
        """
        Create a table.

        Returns:
            The signed session token and the new table
        """
        self.cleanup_expired()
        session_id = str(uuid4())
        rng = Random(config.game.seed) if config.game.seed is not None else None
        table = TableSession(
            session_id=session_id,
            game=BlackjackRound(rng=rng, deck_factory=self.deck_factory),
            restart_timer=RestartTimer(self.restart_delay),
            expires_at=self._expiry(),
        )
        self._sessions[session_id] = table
        logger.debug("Created table %s", session_id)
        return get_session_signer().sign(session_id), table

    def get(self, session_id: str) -> TableSession | None:
        """Get a live table and extend its expiry."""
        table = self._sessions.get(session_id)
        if table is None:
            return None

        if table.expires_at < datetime.now():
            self.delete(session_id)
            return None

        table.expires_at = self._expiry()
        return table

    def delete(self, session_id: str) -> bool:
        """Delete a table, cancelling its timer."""
        table = self._sessions.pop(session_id, None)
        if table is None:
            return False
        table.restart_timer.cancel()
        return True

    def cleanup_expired(self) -> int:
        """Remove expired tables."""
        now = datetime.now()
        expired = [
            sid for sid, table in self._sessions.items() if table.expires_at < now
        ]
        for sid in expired:
            self.delete(sid)
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    @staticmethod
    def _expiry() -> datetime:
        return datetime.now() + timedelta(seconds=config.session_ttl)


# Global session store instance
_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Only the signature is checked here. Tables expire through the store's
    sliding TTL, so a token stays usable for as long as its table is in use.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    signer = get_session_signer()
    return signer.unsign(token)

"""
Session Manager - Creates and manages match sessions.

LIFECYCLE:
1. The UI starts a session → a match is set up with the chosen opponent
2. During the match:
   - The UI submits player commands (plays, cheats, items)
   - The engine validates and applies them
   - The scripted opponent answers until it is the player's move
3. The match ends → the session stays around so the player can restart
4. The UI ends the session (or it goes stale) → ALL state deleted

PERSISTENCE RULES:
- NO database; sessions live in memory only
- One match per session
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..bots import BotPolicy, DEFAULT_OPPONENT, get_opponent
from ..engine_core.config import MatchConfig
from ..engine_core.setup import create_match
from ..engine_core.state import MatchState

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    ACTIVE = "active"  # Match in progress
    GAME_OVER = "game_over"  # Match ended, restart possible
    ENDED = "ended"  # Session closed


@dataclass
class Session:
    """
    An ephemeral match session.

    Contains:
    - The match config and current match state
    - The scripted opponent's policy
    - Every event produced so far (for late-joining UIs)

    The session is destroyed when the UI ends it. State is NOT persisted.
    """
    session_id: str
    config: MatchConfig
    opponent_name: str
    bot: BotPolicy
    match: MatchState
    created_at: float
    last_active: float = 0.0

    state: SessionState = SessionState.ACTIVE
    event_log: list = field(default_factory=list)

    def is_active(self) -> bool:
        """Check if the match is still being played."""
        return self.state == SessionState.ACTIVE

    def touch(self):
        self.last_active = time.time()


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions with a fresh match
    - Track sessions
    - Clean up idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        config: MatchConfig | None = None,
        opponent: str = DEFAULT_OPPONENT,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new session with a freshly dealt match.

        Args:
            config: Match rules (defaults to the standard game)
            opponent: Name of the scripted opponent
            seed: Seed for opponents that play randomly

        Raises:
            KeyError: unknown opponent name
        """
        opponent_spec = get_opponent(opponent)
        config = config or MatchConfig()
        session_id = str(uuid.uuid4())
        match, events = create_match(config, match_id=session_id)

        now = time.time()
        session = Session(
            session_id=session_id,
            config=config,
            opponent_name=opponent_spec.name,
            bot=opponent_spec.create_policy(seed),
            match=match,
            created_at=now,
            last_active=now,
            state=SessionState.GAME_OVER if match.is_over else SessionState.ACTIVE,
            event_log=list(events),
        )
        self._sessions[session_id] = session
        logger.info(
            "Session %s created against %s (%s)",
            session_id, opponent_spec.name, session.bot.get_name(),
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The session is removed from memory. Returns False for unknown ids.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.state = SessionState.ENDED
        session.event_log.clear()
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions."""
        return list(self._sessions)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions with a match in progress."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions idle for longer than max_age_seconds.

        Called periodically to free memory. Returns the number removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)

"""
Session Module - Manages ephemeral match sessions.

A session represents one opponent matchup:
- Created when the UI starts a game
- Holds the current match state
- Drives the scripted opponent
- Destroyed when the UI ends it

Sessions are EPHEMERAL: no persistence, in-memory only.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
]

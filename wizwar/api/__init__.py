"""
API Module - Local HTTP bridge for UI front-ends.

Exposes the engine via a REST API. A front-end:
1. Creates a match session against a scripted opponent
2. Submits player commands (plays, cheats, items, restart)
3. Renders the returned events and the player's view of the table

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    CommandRequest,
    # Responses
    SessionResponse,
    MatchStateResponse,
    CommandResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    ParticipantInfo,
    EventInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "CommandRequest",
    # Responses
    "SessionResponse",
    "MatchStateResponse",
    "CommandResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "ParticipantInfo",
    "EventInfo",
    # Service
    "APIService",
    "create_app",
]

"""
Engine Core - Deterministic match state management and round resolution.

The engine is the runtime that:
1. Sets up a MatchState from a MatchConfig
2. Generates legal commands
3. Applies commands via the reducer
4. Resolves rounds, wars, words of power and cheats
5. Reports everything that happened as events
"""

from .cards import Card, CardColor, Word, BattleOutcome, compare_ranks, parse_deck, format_deck
from .config import MatchConfig
from .state import (
    MatchState,
    ParticipantState,
    Participant,
    Observer,
    TurnPhase,
    EndReason,
    CheatKind,
)
from .command import Command, CommandType, CommandPayload, CommandResult, CheatTarget, ErrorCode
from .events import CheatResult, GameEvent
from .errors import WizwarError, HandCapacityError, PileExhausted, DeckParseError
from .reducer import Reducer, apply_command
from .command_generator import CommandGenerator, legal_commands
from .setup import create_match

__all__ = [
    "Card",
    "CardColor",
    "Word",
    "BattleOutcome",
    "compare_ranks",
    "parse_deck",
    "format_deck",
    "MatchConfig",
    "MatchState",
    "ParticipantState",
    "Participant",
    "Observer",
    "TurnPhase",
    "EndReason",
    "CheatKind",
    "Command",
    "CommandType",
    "CommandPayload",
    "CommandResult",
    "CheatTarget",
    "ErrorCode",
    "CheatResult",
    "GameEvent",
    "WizwarError",
    "HandCapacityError",
    "PileExhausted",
    "DeckParseError",
    "Reducer",
    "apply_command",
    "CommandGenerator",
    "legal_commands",
    "create_match",
]

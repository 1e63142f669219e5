"""
Command System - Commands, payloads, and results.

Commands represent:
1. Card plays by either side
2. Player cheats and table item use
3. Match restart

All state changes flow through commands.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import CheatKind, Participant


class CommandType(Enum):
    """Types of commands the engine accepts."""
    PLAY_CARD = "play_card"
    ATTEMPT_CHEAT = "attempt_cheat"
    USE_ITEM = "use_item"
    RESTART = "restart"


class ErrorCode(Enum):
    """Why a command was rejected."""
    INVALID_PHASE = "invalid_phase"
    NOT_YOUR_TURN = "not_your_turn"
    INVALID_TARGET = "invalid_target"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    CHEAT_LOCKED = "cheat_locked"
    NOT_PLAYER_WINDOW = "not_player_window"
    ITEM_UNAVAILABLE = "item_unavailable"
    GAME_OVER = "game_over"
    UNKNOWN_COMMAND = "unknown_command"


@dataclass(frozen=True)
class CheatTarget:
    """
    Cards a cheat acts on.

    hand_index points into the player's hand, opponent_index into the
    opponent's. Cheats ignore the fields they do not use.
    """
    hand_index: int | None = None
    opponent_index: int | None = None


@dataclass
class CommandPayload:
    """
    Payload for a command - contains the command parameters.

    Different command types use different fields; validation happens in
    the reducer.
    """
    participant: Participant = Participant.PLAYER
    hand_index: int | None = None
    cheat_id: CheatKind | None = None
    target: CheatTarget = field(default_factory=CheatTarget)
    item_id: str | None = None


@dataclass
class Command:
    """A complete command to be applied to the match state."""
    command_type: CommandType
    payload: CommandPayload = field(default_factory=CommandPayload)

    @classmethod
    def play_card(cls, participant: Participant, hand_index: int) -> Command:
        """Factory for a card play."""
        return cls(
            command_type=CommandType.PLAY_CARD,
            payload=CommandPayload(participant=participant, hand_index=hand_index),
        )

    @classmethod
    def attempt_cheat(
        cls,
        cheat_id: CheatKind | str,
        hand_index: int | None = None,
        opponent_index: int | None = None,
    ) -> Command:
        """Factory for a cheat attempt. Only the player cheats."""
        return cls(
            command_type=CommandType.ATTEMPT_CHEAT,
            payload=CommandPayload(
                cheat_id=CheatKind(cheat_id),
                target=CheatTarget(hand_index=hand_index, opponent_index=opponent_index),
            ),
        )

    @classmethod
    def use_item(cls, item_id: str) -> Command:
        """Factory for using a table item."""
        return cls(
            command_type=CommandType.USE_ITEM,
            payload=CommandPayload(item_id=item_id),
        )

    @classmethod
    def restart(cls) -> Command:
        return cls(command_type=CommandType.RESTART)


@dataclass
class CommandResult:
    """
    Result of applying a command.

    Contains:
    - Whether the command was accepted
    - New state (if accepted)
    - Error and error code (if rejected)
    - Events, for UI updates (rejected cheats report one too)
    """
    success: bool
    new_state: Any | None = None  # MatchState
    error: str | None = None
    error_code: ErrorCode | None = None
    events: list[Any] = field(default_factory=list)  # GameEvent

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: ErrorCode | None = None,
        events: list[Any] | None = None,
    ) -> CommandResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, events=events or [])

    @classmethod
    def success_with_state(cls, state: Any, events: list[Any] | None = None) -> CommandResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, events=events or [])

"""
Game Loop - The command-driven match loop.

The loop:
1. The player submits a command
2. The engine validates and applies it
3. If the round moved on, the scripted opponent plays until it is the
   player's move again (or the match ends)
4. All events are returned to the UI
5. Repeat
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.command import Command, CommandType, ErrorCode
from ..engine_core.command_generator import legal_commands
from ..engine_core.reducer import apply_command
from ..engine_core.state import Participant
from .manager import Session, SessionState

if TYPE_CHECKING:
    from ..engine_core.state import EndReason

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_PLAYER = "waiting_player"
    RUNNING_OPPONENT = "running_opponent"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a player command.

    Contains every event produced by the command and the opponent's
    answers, in order.
    """
    success: bool
    loop_state: LoopState

    events: list = field(default_factory=list)

    # Opponent moves taken (explanations)
    opponent_moves: list[str] = field(default_factory=list)

    # Errors
    error: str | None = None
    error_code: ErrorCode | None = None

    # Game over info
    winner: Participant | None = None
    reason: EndReason | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)
        result = loop.submit(Command.play_card(Participant.PLAYER, 0))
        render(result.events)
    """

    # Safety limit on opponent moves per player command
    MAX_OPPONENT_MOVES = 4

    def __init__(self, session: Session):
        self.session = session
        self.state = LoopState.GAME_OVER if session.match.is_over else LoopState.WAITING_PLAYER

    def start(self) -> TurnResult:
        """Let the opponent move first when it holds the initiative."""
        return self._run_opponent([])

    def submit(self, command: Command) -> TurnResult:
        """
        Apply a player command, then run the opponent.

        Card plays are always made on the player's behalf.
        """
        if (
            command.command_type == CommandType.PLAY_CARD
            and command.payload.participant is not Participant.PLAYER
        ):
            return TurnResult(
                success=False,
                loop_state=self.state,
                error="Only the player's cards can be played from the UI",
                error_code=ErrorCode.NOT_YOUR_TURN,
            )

        self.session.touch()
        result = apply_command(self.session.match, command)
        if not result.success:
            self.session.event_log.extend(result.events)
            return TurnResult(
                success=False,
                loop_state=self.state,
                events=list(result.events),
                error=result.error,
                error_code=result.error_code,
            )

        self.session.match = result.new_state
        self.session.event_log.extend(result.events)
        if command.command_type == CommandType.RESTART:
            self.session.state = SessionState.ACTIVE

        return self._run_opponent(list(result.events))

    def _run_opponent(self, events: list) -> TurnResult:
        """Run opponent moves until it's the player's move again."""
        self.state = LoopState.RUNNING_OPPONENT
        moves: list[str] = []

        for _ in range(self.MAX_OPPONENT_MOVES):
            match = self.session.match
            if match.is_over or match.to_play is not Participant.OPPONENT:
                break

            legal = legal_commands(match, include_cheats=False)
            decision = self.session.bot.select_command(match, legal)
            result = apply_command(match, decision.command)
            if not result.success:
                # Bots only choose among legal commands
                raise RuntimeError(f"Opponent command rejected: {result.error}")

            self.session.match = result.new_state
            self.session.event_log.extend(result.events)
            events.extend(result.events)
            moves.append(decision.explanation)
            logger.debug("Opponent: %s", decision.explanation)

        match = self.session.match
        if match.is_over:
            self.state = LoopState.GAME_OVER
            self.session.state = SessionState.GAME_OVER
        else:
            self.state = LoopState.WAITING_PLAYER

        return TurnResult(
            success=True,
            loop_state=self.state,
            events=events,
            opponent_moves=moves,
            winner=match.winner,
            reason=match.result,
        )

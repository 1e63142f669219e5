"""
Reducer - Applies commands to match state.

The reducer is the single point of state mutation.
All state changes must go through apply_command().

Design principles:
- Pure function: (state, command) -> (new_state, events)
- Validates before applying; the caller's state is never mutated
- Returns CommandResult with success/failure
- Delegates rounds to the resolver and cheats to the cheat engine
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from .cheats import attempt_cheat, player_window_open
from .command import Command, CommandResult, CommandType, ErrorCode
from .distraction import use_item
from .events import CheatResult
from .resolver import play_card
from .setup import create_match
from .state import MatchState

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies commands to match state.

    Stateless - all state is in MatchState.
    """

    def apply(self, state: MatchState, command: Command) -> CommandResult:
        """
        Apply a command to the match state.

        Returns CommandResult with the new state and events, or an error.
        """
        validation_error = self._validate_command(state, command)
        if validation_error:
            error_code, error = validation_error
            logger.debug("Rejected %s: %s", command.command_type.value, error)
            return CommandResult.failure(error, error_code=error_code)

        handler = self._get_handler(command.command_type)
        if not handler:
            return CommandResult.failure(
                f"No handler for command type: {command.command_type}",
                error_code=ErrorCode.UNKNOWN_COMMAND,
            )

        return handler(state.clone(), command)

    def _validate_command(
        self, state: MatchState, command: Command
    ) -> tuple[ErrorCode, str] | None:
        """
        Checks shared by every command type.

        Cheat-specific checks live in the cheat engine so that a rejected
        cheat still reports a CheatOutcome event.
        """
        if command.command_type == CommandType.RESTART:
            return None

        if state.is_over:
            return ErrorCode.GAME_OVER, "The match is over - restart to play again"

        if command.command_type == CommandType.PLAY_CARD:
            participant = command.payload.participant
            if state.to_play is None:
                return ErrorCode.INVALID_PHASE, f"Cannot play a card during {state.phase.value}"
            if participant != state.to_play:
                return ErrorCode.NOT_YOUR_TURN, f"It is not {participant.value}'s turn"
            hand = state.get(participant).hand
            index = command.payload.hand_index
            if index is None or not 0 <= index < len(hand):
                return ErrorCode.INVALID_TARGET, f"No card at hand index {index}"

        if command.command_type == CommandType.USE_ITEM:
            if not player_window_open(state):
                return ErrorCode.NOT_PLAYER_WINDOW, "Items can only be used on your own move"
            if command.payload.item_id not in state.items_available:
                return ErrorCode.ITEM_UNAVAILABLE, f"Item {command.payload.item_id} is not available"

        return None

    def _get_handler(self, command_type: CommandType):
        """Get the handler function for a command type."""
        handlers = {
            CommandType.PLAY_CARD: self._handle_play_card,
            CommandType.ATTEMPT_CHEAT: self._handle_attempt_cheat,
            CommandType.USE_ITEM: self._handle_use_item,
            CommandType.RESTART: self._handle_restart,
        }
        return handlers.get(command_type)

    def _handle_play_card(self, state: MatchState, command: Command) -> CommandResult:
        """Handle a card play (and the round resolution it may trigger)."""
        payload = command.payload
        events = play_card(state, payload.participant, payload.hand_index)
        return CommandResult.success_with_state(state, events)

    def _handle_attempt_cheat(self, state: MatchState, command: Command) -> CommandResult:
        """Handle a cheat attempt. Caught cheats succeed as commands and end the match."""
        verdict = attempt_cheat(state, command.payload.cheat_id, command.payload.target)
        if verdict.result is CheatResult.REJECTED:
            return CommandResult.failure(
                verdict.reason, error_code=verdict.error_code, events=verdict.events
            )
        return CommandResult.success_with_state(state, verdict.events)

    def _handle_use_item(self, state: MatchState, command: Command) -> CommandResult:
        """Handle using a table item."""
        events = use_item(state, command.payload.item_id)
        return CommandResult.success_with_state(state, events)

    def _handle_restart(self, state: MatchState, command: Command) -> CommandResult:
        """Rebuild the match with the same config and id."""
        new_state, events = create_match(state.config, match_id=state.match_id)
        logger.info("Match %s restarted", state.match_id)
        return CommandResult.success_with_state(new_state, events)


def apply_command(state: MatchState, command: Command) -> CommandResult:
    """
    Convenience function to apply a command.

    Uses a default Reducer instance.
    """
    return Reducer().apply(state, command)

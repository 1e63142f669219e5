"""
Bot Policy - Interface for scripted opponents.

A BotPolicy takes a match state and the legal commands and returns a
decision. Policies only ever choose among the commands they are given;
they never build commands of their own.
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.cards import BattleOutcome
from ..engine_core.command import CommandType

if TYPE_CHECKING:
    from ..engine_core.cards import Card
    from ..engine_core.command import Command
    from ..engine_core.state import MatchState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The command to apply
    - Explanation (for UI/debugging)
    - Confidence in the decision
    """
    command: Command
    explanation: str = ""
    confidence: float = 1.0
    evaluated_commands: int = 0


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects commands.
    """

    @abstractmethod
    def select_command(self, state: MatchState, legal_commands: list[Command]) -> BotDecision:
        """
        Select a command from the legal commands.

        Args:
            state: Current match state
            legal_commands: Commands the bot may choose from

        Returns:
            BotDecision with the selected command
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


def _plays(legal_commands: list[Command]) -> list[Command]:
    plays = [c for c in legal_commands if c.command_type == CommandType.PLAY_CARD]
    if not plays:
        raise ValueError("No legal card plays available")
    return plays


class RandomPolicy(BotPolicy):
    """
    Random policy - plays a card uniformly at random.

    Used for:
    - Simulations
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_command(self, state: MatchState, legal_commands: list[Command]) -> BotDecision:
        plays = _plays(legal_commands)
        command = self.rng.choice(plays)
        return BotDecision(
            command=command,
            explanation="Selected randomly",
            confidence=1.0 / len(plays),
            evaluated_commands=len(plays),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always plays the first card in hand.

    The apprentice opponent. Fully deterministic.
    """

    def select_command(self, state: MatchState, legal_commands: list[Command]) -> BotDecision:
        return BotDecision(
            command=_plays(legal_commands)[0],
            explanation="Played the first card in hand",
            evaluated_commands=1,
        )


class HighestCardPolicy(BotPolicy):
    """
    The archmage: answers with the weakest card that still wins.

    When leading, plays its strongest card. When answering and no card
    wins, throws away its lowest card.
    """

    def select_command(self, state: MatchState, legal_commands: list[Command]) -> BotDecision:
        plays = _plays(legal_commands)
        participant = plays[0].payload.participant
        hand = state.get(participant).hand
        indexed = sorted(
            ((cmd, hand[cmd.payload.hand_index]) for cmd in plays),
            key=lambda pair: pair[1].rank,
        )

        table_card = state.table_card(participant.other)
        if table_card is None:
            command, card = indexed[-1]
            return BotDecision(
                command=command,
                explanation=f"Led with strongest card {card}",
                evaluated_commands=len(plays),
            )

        for command, card in indexed:
            if self._wins(state, card, table_card):
                return BotDecision(
                    command=command,
                    explanation=f"Answered {table_card} with {card}",
                    evaluated_commands=len(plays),
                )

        command, card = indexed[0]
        return BotDecision(
            command=command,
            explanation=f"Nothing beats {table_card}; discarded {card}",
            confidence=0.0,
            evaluated_commands=len(plays),
        )

    @staticmethod
    def _wins(state: MatchState, card: Card, table_card: Card) -> bool:
        outcome = card.beats(table_card)
        if state.ordering_inverted:
            outcome = outcome.invert()
        return outcome is BattleOutcome.WIN

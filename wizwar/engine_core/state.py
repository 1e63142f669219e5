"""
Match State - The complete state of one Wizard's War match.

Design principles:
- One explicit state object, owned by the reducer
- Mutations happen on a clone, so a caller's state never changes
- Serializable through the API schemas
"""

from __future__ import annotations
from collections import Counter
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum

from .cards import Card
from .config import MatchConfig


class Participant(Enum):
    """The two sides of the duel."""
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> Participant:
        return Participant.OPPONENT if self is Participant.PLAYER else Participant.PLAYER


class Observer(Enum):
    """Who can catch the player cheating."""
    BIRD = "bird"  # watches physical cheats
    MAGICIAN = "magician"  # watches magic cheats


class TurnPhase(Enum):
    """Phases of a round."""
    AWAITING_INITIATIVE_PLAY = "awaiting_initiative_play"
    AWAITING_RESPONSE_PLAY = "awaiting_response_play"
    COMPARING = "comparing"
    WAR_ESCALATION = "war_escalation"
    ROUND_COMPLETE = "round_complete"
    GAME_OVER = "game_over"


class EndReason(Enum):
    """Why a match ended, from the player's viewpoint."""
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"
    CAUGHT_CHEATING = "caught_cheating"
    RAN_OUT_OF_CARDS_DURING_WAR = "ran_out_of_cards_during_war"


class CheatKind(Enum):
    """Every cheat the player can attempt."""
    PULL_SEEDS = "pull_seeds"
    SLEEVE = "sleeve"
    SWAP_CARD = "swap_card"
    PEEK = "peek"
    LOOK_OVER_SHOULDER = "look_over_shoulder"
    INNER_EYE = "inner_eye"
    HACK_ORDERING = "hack_ordering"
    DEJA_VU = "deja_vu"
    DUPLICATE = "duplicate"
    INVISIBILITY = "invisibility"


@dataclass
class DistractionTimer:
    active: bool = False
    rounds_remaining: int = 0


@dataclass
class StakedCard:
    """A card on the table or in the war stake, with its owner."""
    card: Card
    owner: Participant
    face_up: bool = True


@dataclass
class ParticipantState:
    """
    Cards and resources of one side.

    Piles are ordered top first: draw_pile[0] is drawn next.
    """
    participant: Participant
    hand: list[Card] = field(default_factory=list)
    draw_pile: list[Card] = field(default_factory=list)
    win_pile: list[Card] = field(default_factory=list)
    sleeve: list[Card] = field(default_factory=list)

    seeds: int = 0
    mana: int = 0
    points: int = 0

    unlocked_cheats: set[CheatKind] = field(default_factory=set)
    hand_capacity: int = 3

    @property
    def cards_in_play(self) -> int:
        """Cards this side can still play (hand, pile and sleeve)."""
        return len(self.hand) + len(self.draw_pile) + len(self.sleeve)

    def all_cards(self) -> list[Card]:
        return self.hand + self.draw_pile + self.win_pile + self.sleeve


@dataclass
class MatchState:
    """
    Complete match state at a point in time.

    All state changes go through the reducer.
    """
    match_id: str
    config: MatchConfig = field(default_factory=MatchConfig)

    player: ParticipantState = field(
        default_factory=lambda: ParticipantState(participant=Participant.PLAYER)
    )
    opponent: ParticipantState = field(
        default_factory=lambda: ParticipantState(participant=Participant.OPPONENT)
    )

    phase: TurnPhase = TurnPhase.AWAITING_INITIATIVE_PLAY
    initiative: Participant = Participant.PLAYER
    round_number: int = 1

    # Cards played this round, not yet resolved
    table: list[StakedCard] = field(default_factory=list)
    # Cards accumulated by war ties
    stake: list[StakedCard] = field(default_factory=list)

    distractions: dict[Observer, DistractionTimer] = field(
        default_factory=lambda: {observer: DistractionTimer() for observer in Observer}
    )
    items_available: list[str] = field(default_factory=list)

    # Pending cheat effects
    ordering_inverted: bool = False
    deja_vu_pending: bool = False

    # Terminal outcome
    result: EndReason | None = None
    winner: Participant | None = None

    # Card conservation bookkeeping
    universe_size: int = 0
    conjured: int = 0
    vanished: int = 0

    def get(self, participant: Participant) -> ParticipantState:
        """Get the state of one side."""
        if participant is Participant.PLAYER:
            return self.player
        return self.opponent

    @property
    def is_over(self) -> bool:
        return self.phase == TurnPhase.GAME_OVER

    @property
    def to_play(self) -> Participant | None:
        """Who must play a card next, or None outside the play phases."""
        if self.phase == TurnPhase.AWAITING_INITIATIVE_PLAY:
            return self.initiative
        if self.phase == TurnPhase.AWAITING_RESPONSE_PLAY:
            return self.initiative.other
        return None

    def table_card(self, participant: Participant) -> Card | None:
        """The card a side has played this round, if any."""
        for entry in self.table:
            if entry.owner is participant:
                return entry.card
        return None

    def cards_remaining(self) -> int:
        """Cards not yet in a win pile: hands, piles, sleeves, table and stake."""
        return (
            self.player.cards_in_play
            + self.opponent.cards_in_play
            + len(self.table)
            + len(self.stake)
        )

    def card_census(self) -> Counter:
        """Count of every card id across all zones."""
        census = Counter(card.card_id for card in self.player.all_cards())
        census.update(card.card_id for card in self.opponent.all_cards())
        census.update(entry.card.card_id for entry in self.table)
        census.update(entry.card.card_id for entry in self.stake)
        return census

    def expected_card_count(self) -> int:
        return self.universe_size + self.conjured - self.vanished

    def clone(self) -> MatchState:
        """Deep copy the state."""
        return deepcopy(self)

"""
Deck/Pile manager - moves cards between piles and hands.

Draw piles are read from the front (index 0 is the top). Win piles only
grow. A hand never holds more cards than its capacity; breaking that is a
programming error and raises HandCapacityError.
"""

from __future__ import annotations
import logging

from .cards import Card
from .errors import HandCapacityError, PileExhausted
from .events import CardsDrawn
from .state import MatchState, Participant, ParticipantState

logger = logging.getLogger(__name__)


def add_to_hand(side: ParticipantState, cards: list[Card]) -> None:
    """Put cards into a hand, enforcing its capacity."""
    if len(side.hand) + len(cards) > side.hand_capacity:
        raise HandCapacityError(
            side.participant.value, side.hand_capacity, len(side.hand) + len(cards)
        )
    side.hand.extend(cards)


def draw(state: MatchState, participant: Participant, n: int) -> list[Card]:
    """
    Move up to n cards from the top of the draw pile into the hand.

    Fewer cards are drawn when the pile runs short. Raises PileExhausted
    when both pile and hand are empty.
    """
    side = state.get(participant)
    if not side.draw_pile and not side.hand:
        raise PileExhausted(participant.value)

    count = min(n, len(side.draw_pile))
    drawn = side.draw_pile[:count]
    add_to_hand(side, drawn)
    del side.draw_pile[:count]
    return drawn


def refill_if_empty(state: MatchState, participant: Participant) -> list[CardsDrawn]:
    """
    Refill an empty hand at a round boundary.

    Draws a full hand, then returns the sleeve stash to the hand (capacity
    grows by the stash size until the next refill). Refilling the player's
    hand ends a hack-ordering override.
    """
    side = state.get(participant)
    if side.hand:
        return []

    stash = list(side.sleeve)
    side.hand_capacity = state.config.hand_size + len(stash)

    drawn = []
    if side.draw_pile:
        drawn = draw(state, participant, state.config.hand_size)
    if stash:
        side.sleeve.clear()
        add_to_hand(side, stash)

    cards = drawn + stash
    if not cards:
        return []

    if participant is Participant.PLAYER and state.ordering_inverted:
        state.ordering_inverted = False
        logger.debug("Hack ordering ended on player draw")

    logger.debug(
        "%s refilled hand: %d drawn, %d from sleeve",
        participant.value, len(drawn), len(stash),
    )
    return [CardsDrawn(participant=participant, cards=tuple(cards))]


def take_war_card(state: MatchState, participant: Participant) -> Card:
    """
    Take the next card a side commits to a war.

    The top of the draw pile, else the first card in hand.
    """
    side = state.get(participant)
    if side.draw_pile:
        return side.draw_pile.pop(0)
    if side.hand:
        return side.hand.pop(0)
    raise PileExhausted(participant.value)

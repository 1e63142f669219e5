"""
Match setup - builds the card catalog and the initial match state.

This module handles:
- The built-in two-deck catalog
- The split between the sides (opponent gets the high half)
- Optional seeded shuffle for varied matches
- The initial deal
"""

from __future__ import annotations
import logging
import random
import uuid

from .cards import MAX_RANK, Card, CardColor, Word, parse_deck
from .cheats import STARTING_CHEATS
from .config import MatchConfig
from .deck import draw
from .events import CardsDrawn
from .outcome import evaluate
from .state import MatchState, Participant, ParticipantState

logger = logging.getLogger(__name__)


_COLORS = list(CardColor)
_WORDS = list(Word)


def build_catalog(deck_size: int = 18) -> list[Card]:
    """
    The built-in universe of 2 * deck_size cards.

    Ranks cycle 0..12 and colors cycle through the palette. Every third
    card carries a word of power, cycling through all six words.
    """
    cards = []
    for i in range(2 * deck_size):
        word = _WORDS[(i // 3) % len(_WORDS)] if i % 3 == 0 else None
        cards.append(
            Card(
                rank=i % (MAX_RANK + 1),
                color=_COLORS[i % len(_COLORS)],
                word=word,
                card_id=f"c{i:02d}",
            )
        )
    return cards


def split_catalog(catalog: list[Card]) -> tuple[list[Card], list[Card]]:
    """
    Split the catalog into (player pile, opponent pile).

    The opponent gets the high half, strongest card on top. The player
    gets the low half, weakest card on top.
    """
    ordered = sorted(catalog, key=lambda card: (card.rank, card.card_id))
    half = len(ordered) // 2
    player_pile = ordered[:half]
    opponent_pile = list(reversed(ordered[half:]))
    return player_pile, opponent_pile


def _build_piles(config: MatchConfig) -> tuple[list[Card], list[Card]]:
    if config.player_deck is not None or config.opponent_deck is not None:
        if config.player_deck is None or config.opponent_deck is None:
            raise ValueError("player_deck and opponent_deck must be given together")
        return parse_deck(config.player_deck, "p"), parse_deck(config.opponent_deck, "o")

    return split_catalog(build_catalog(config.deck_size))


def create_match(
    config: MatchConfig | None = None,
    match_id: str | None = None,
) -> tuple[MatchState, list]:
    """
    Set up a new match.

    Returns the initial state (player holds the initiative, both hands
    dealt) and the CardsDrawn events of the deal.
    """
    config = config or MatchConfig()
    player_pile, opponent_pile = _build_piles(config)

    if config.shuffle_seed is not None:
        rng = random.Random(config.shuffle_seed)
        rng.shuffle(player_pile)
        rng.shuffle(opponent_pile)

    state = MatchState(
        match_id=match_id or f"match_{uuid.uuid4().hex[:8]}",
        config=config,
        player=ParticipantState(
            participant=Participant.PLAYER,
            draw_pile=player_pile,
            seeds=config.starting_seeds,
            mana=config.starting_mana,
            unlocked_cheats=set(STARTING_CHEATS),
            hand_capacity=config.hand_size,
        ),
        opponent=ParticipantState(
            participant=Participant.OPPONENT,
            draw_pile=opponent_pile,
            hand_capacity=config.hand_size,
        ),
        initiative=Participant.PLAYER,
        items_available=list(config.table_items),
        universe_size=len(player_pile) + len(opponent_pile),
    )

    events = []
    for participant in (Participant.PLAYER, Participant.OPPONENT):
        if state.get(participant).draw_pile:
            drawn = draw(state, participant, config.hand_size)
            events.append(CardsDrawn(participant=participant, cards=tuple(drawn)))

    # A side dealt no cards at all cannot play a single round
    game_over = evaluate(state)
    if game_over is not None:
        events.append(game_over)

    logger.info(
        "Match %s created: %d player card(s), %d opponent card(s)",
        state.match_id, len(player_pile), len(opponent_pile),
    )
    return state, events

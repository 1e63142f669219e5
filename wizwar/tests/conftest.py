"""
Pytest fixtures for Wizard's War tests.
"""

import pytest

from ..engine_core.cards import parse_deck
from ..engine_core.cheats import STARTING_CHEATS
from ..engine_core.config import MatchConfig
from ..engine_core.state import MatchState, Participant, ParticipantState


def build_state(
    player_hand: str = "",
    opponent_hand: str = "",
    player_pile: str = "",
    opponent_pile: str = "",
    config: MatchConfig | None = None,
    **overrides,
) -> MatchState:
    """
    Build a match state from deck text, player to lead.

    Card ids are prefixed by zone: ph/pp for the player's hand and pile,
    oh/op for the opponent's.
    """
    config = config or MatchConfig()
    player = ParticipantState(
        participant=Participant.PLAYER,
        hand=parse_deck(player_hand, "ph"),
        draw_pile=parse_deck(player_pile, "pp"),
        unlocked_cheats=set(STARTING_CHEATS),
        hand_capacity=config.hand_size,
    )
    opponent = ParticipantState(
        participant=Participant.OPPONENT,
        hand=parse_deck(opponent_hand, "oh"),
        draw_pile=parse_deck(opponent_pile, "op"),
        hand_capacity=config.hand_size,
    )
    state = MatchState(
        match_id="test_match",
        config=config,
        player=player,
        opponent=opponent,
        items_available=list(config.table_items),
        universe_size=len(player.all_cards()) + len(opponent.all_cards()),
    )
    for name, value in overrides.items():
        setattr(state, name, value)
    return state


@pytest.fixture
def state_factory():
    """Factory building match states from deck text."""
    return build_state


@pytest.fixture
def basic_state() -> MatchState:
    """Three cards each, nothing in the piles."""
    return build_state(player_hand="3r 7b 11g", opponent_hand="5r 2b 9g")


@pytest.fixture
def long_state() -> MatchState:
    """Three cards each with full piles behind them, so no round ends the match."""
    return build_state(
        player_hand="3r 7b 11g",
        opponent_hand="5r 2b 9g",
        player_pile="1r 2r 4r 5b 6b 8b 9r 10r 1g",
        opponent_pile="1b 3b 4b 6r 7r 8r 10b 11b 2g",
    )

"""
Tests for round resolution through the reducer.

Tests:
- Plays, turn order and validation
- Comparison, war loop and scoring
- Round completion (initiative, refill)
- Reducer purity and card conservation
"""

import random

import pytest

from ..engine_core.command import Command, ErrorCode
from ..engine_core.command_generator import legal_commands
from ..engine_core.config import MatchConfig
from ..engine_core.events import CardPlayed, GameOver, RoundResolved, WarEscalated
from ..engine_core.reducer import Reducer, apply_command
from ..engine_core.setup import create_match
from ..engine_core.state import EndReason, Participant, TurnPhase

PLAYER = Participant.PLAYER
OPPONENT = Participant.OPPONENT


def play_round(state, player_index, opponent_index):
    """Player leads, opponent answers. Returns (new_state, events)."""
    first = apply_command(state, Command.play_card(PLAYER, player_index))
    assert first.success, first.error
    second = apply_command(first.new_state, Command.play_card(OPPONENT, opponent_index))
    assert second.success, second.error
    return second.new_state, first.events + second.events


def events_of(events, event_class):
    return [event for event in events if isinstance(event, event_class)]


class TestPlays:
    """Tests for playing cards."""

    def test_initiative_play_waits_for_answer(self, basic_state):
        result = apply_command(basic_state, Command.play_card(PLAYER, 2))

        assert result.success
        state = result.new_state
        assert state.phase == TurnPhase.AWAITING_RESPONSE_PLAY
        assert state.to_play is OPPONENT
        assert state.table_card(PLAYER).rank == 11
        assert isinstance(result.events[0], CardPlayed)

    def test_out_of_turn_rejected(self, basic_state):
        result = apply_command(basic_state, Command.play_card(OPPONENT, 0))

        assert not result.success
        assert result.error_code is ErrorCode.NOT_YOUR_TURN

    def test_bad_hand_index_rejected(self, basic_state):
        result = apply_command(basic_state, Command.play_card(PLAYER, 3))

        assert not result.success
        assert result.error_code is ErrorCode.INVALID_TARGET

    def test_rejected_command_leaves_state_untouched(self, basic_state):
        before = basic_state.clone()
        apply_command(basic_state, Command.play_card(OPPONENT, 0))
        assert basic_state == before

    def test_accepted_command_does_not_mutate_input(self, basic_state):
        before = basic_state.clone()
        result = apply_command(basic_state, Command.play_card(PLAYER, 0))
        assert result.success
        assert basic_state == before
        assert result.new_state is not basic_state


class TestScenarios:
    """End-to-end round scenarios."""

    def test_eleven_beats_nine(self, basic_state):
        """Player 11 vs opponent 9: player takes both cards for 2 points."""
        state, events = play_round(basic_state, 2, 2)

        resolved = events_of(events, RoundResolved)[0]
        assert resolved.winner is PLAYER
        assert resolved.cards_transferred == 2
        assert resolved.points_awarded == 2
        assert not resolved.war_occurred
        assert state.player.points == 2
        assert len(state.player.win_pile) == 2
        assert state.table == []

    def test_war_then_zero_beats_twelve(self, state_factory):
        """6 vs 6 goes to war; the war cards 0 vs 12 give the player 4 cards."""
        state = state_factory(
            player_hand="6r", player_pile="0b",
            opponent_hand="6g", opponent_pile="12y",
        )
        state, events = play_round(state, 0, 0)

        assert len(events_of(events, WarEscalated)) == 1
        resolved = events_of(events, RoundResolved)[0]
        assert resolved.winner is PLAYER
        assert resolved.cards_transferred == 4
        assert resolved.war_occurred
        assert state.player.points == 4
        assert state.stake == []

        game_over = events_of(events, GameOver)[0]
        assert game_over.reason is EndReason.WIN
        assert state.phase == TurnPhase.GAME_OVER

    def test_lower_card_loses(self, basic_state):
        state, events = play_round(basic_state, 0, 0)  # 3 vs 5
        assert events_of(events, RoundResolved)[0].winner is OPPONENT
        assert state.opponent.points == 2

    def test_qube_doubles_points(self, state_factory):
        state = state_factory(
            player_hand="10r:Qube 1r", opponent_hand="4b 2b",
            player_pile="1r 1r 1r", opponent_pile="1b 1b 1b",
        )
        state, events = play_round(state, 0, 0)
        resolved = events_of(events, RoundResolved)[0]
        assert resolved.cards_transferred == 2
        assert resolved.points_awarded == 4
        assert state.player.points == 4

    def test_qube_on_losing_card_does_nothing(self, state_factory):
        state = state_factory(
            player_hand="1r 1r", opponent_hand="4b:Qube 2b",
            player_pile="1r 1r 1r", opponent_pile="1b 1b 1b",
        )
        state, events = play_round(state, 0, 1)  # 1 vs 2: opponent wins without Qube
        assert events_of(events, RoundResolved)[0].points_awarded == 2


class TestRoundCompletion:
    """Tests for initiative and refill at round end."""

    def test_initiative_alternates(self, long_state):
        state, _ = play_round(long_state, 0, 0)
        assert state.initiative is OPPONENT
        assert state.to_play is OPPONENT
        assert state.round_number == 2
        assert state.phase == TurnPhase.AWAITING_INITIATIVE_PLAY

        # Opponent leads round 2
        result = apply_command(state, Command.play_card(PLAYER, 0))
        assert result.error_code is ErrorCode.NOT_YOUR_TURN

        first = apply_command(state, Command.play_card(OPPONENT, 0))
        second = apply_command(first.new_state, Command.play_card(PLAYER, 0))
        assert second.new_state.initiative is PLAYER

    def test_empty_hands_refill(self, long_state):
        state = long_state
        for _ in range(3):
            leader = state.to_play
            first = apply_command(state, Command.play_card(leader, 0))
            second = apply_command(first.new_state, Command.play_card(leader.other, 0))
            state = second.new_state

        assert len(state.player.hand) == 3
        assert len(state.opponent.hand) == 3
        assert len(state.player.draw_pile) == 6

    def test_deja_vu_keeps_initiative(self, long_state):
        long_state.deja_vu_pending = True
        state, _ = play_round(long_state, 0, 0)
        assert state.initiative is PLAYER
        assert state.deja_vu_pending is False

    def test_hack_ordering_inverts_comparison(self, long_state):
        long_state.ordering_inverted = True
        state, events = play_round(long_state, 0, 0)  # 3 vs 5, lower wins
        assert events_of(events, RoundResolved)[0].winner is PLAYER


class TestWar:
    """Tests for the war loop."""

    def test_all_equal_decks_terminate(self, state_factory):
        """Every card ties: the war ends when the piles run dry."""
        state = state_factory(
            player_hand="5r 5r 5r", player_pile="5r 5r 5r",
            opponent_hand="5b 5b 5b", opponent_pile="5b 5b 5b",
        )
        state, events = play_round(state, 0, 0)

        game_over = events_of(events, GameOver)[0]
        assert game_over.reason is EndReason.RAN_OUT_OF_CARDS_DURING_WAR
        assert game_over.winner is None
        # Bounded by the cards each side holds
        assert len(events_of(events, WarEscalated)) <= 6
        assert sum(state.card_census().values()) == 12

    def test_side_without_war_card_loses(self, state_factory):
        state = state_factory(
            player_hand="4r", player_pile="9r",
            opponent_hand="4b",
        )
        state, events = play_round(state, 0, 0)

        game_over = events_of(events, GameOver)[0]
        assert game_over.reason is EndReason.RAN_OUT_OF_CARDS_DURING_WAR
        assert game_over.winner is PLAYER
        assert state.winner is PLAYER

    def test_war_draws_from_hand_when_pile_empty(self, state_factory):
        state = state_factory(
            player_hand="4r 9r 1r", opponent_hand="4b 2b 1b",
        )
        state, events = play_round(state, 0, 0)  # 4 vs 4, then 9 vs 2 from hands
        resolved = events_of(events, RoundResolved)[0]
        assert resolved.winner is PLAYER
        assert resolved.cards_transferred == 4

    def test_double_war(self, state_factory):
        state = state_factory(
            player_hand="4r", player_pile="7r 11r 1r",
            opponent_hand="4b", opponent_pile="7b 3b 1b",
        )
        state, events = play_round(state, 0, 0)
        assert len(events_of(events, WarEscalated)) == 2
        resolved = events_of(events, RoundResolved)[0]
        assert resolved.winner is PLAYER
        assert resolved.cards_transferred == 6


class TestConservation:
    """Card conservation over full random matches."""

    @pytest.mark.parametrize("seed", range(10))
    def test_cards_conserved(self, seed):
        rng = random.Random(seed)
        state, _ = create_match(MatchConfig(shuffle_seed=seed), match_id="conservation")
        universe = state.card_census()
        reducer = Reducer()

        while not state.is_over:
            plays = legal_commands(state, include_cheats=False)
            plays = [c for c in plays if c.payload.hand_index is not None]
            result = reducer.apply(state, rng.choice(plays))
            assert result.success, result.error
            state = result.new_state
            assert state.card_census() == universe
            assert len(state.player.hand) <= state.player.hand_capacity
            assert len(state.opponent.hand) <= state.opponent.hand_capacity

        assert state.result in {
            EndReason.WIN, EndReason.LOSE, EndReason.DRAW, EndReason.RAN_OUT_OF_CARDS_DURING_WAR
        }

    def test_game_over_only_accepts_restart(self, state_factory):
        state = state_factory(player_hand="11r", opponent_hand="9b")
        state, _ = play_round(state, 0, 0)
        assert state.is_over

        result = apply_command(state, Command.play_card(PLAYER, 0))
        assert result.error_code is ErrorCode.GAME_OVER

        restarted = apply_command(state, Command.restart())
        assert restarted.success
        assert not restarted.new_state.is_over
        assert restarted.new_state.match_id == state.match_id

"""
Tests for the cheat engine.

Tests:
- Rejections (window, locked, target, resources) and their order
- Detection by the Bird and the Magician
- Every cheat effect
"""

import pytest

from ..engine_core.cheats import (
    CHEAT_CATALOG,
    STARTING_CHEATS,
    CheatClass,
    available_cheats,
)
from ..engine_core.command import Command, ErrorCode
from ..engine_core.distraction import open_window
from ..engine_core.events import CardsRevealed, CheatOutcome, CheatResult, GameOver
from ..engine_core.reducer import apply_command
from ..engine_core.state import CheatKind, EndReason, Observer, Participant, TurnPhase

PLAYER = Participant.PLAYER
OPPONENT = Participant.OPPONENT


def distract(state, *observers):
    for observer in observers:
        open_window(state, observer, 1)
    return state


def cheat(state, cheat_id, hand_index=None, opponent_index=None):
    command = Command.attempt_cheat(cheat_id, hand_index=hand_index, opponent_index=opponent_index)
    return apply_command(state, command)


class TestCatalog:
    """Cheat classes and costs."""

    @pytest.mark.parametrize("kind", list(CheatKind))
    def test_every_cheat_is_cataloged(self, kind):
        assert CHEAT_CATALOG[kind].kind is kind

    def test_observers(self):
        assert CHEAT_CATALOG[CheatKind.SLEEVE].observer is Observer.BIRD
        assert CHEAT_CATALOG[CheatKind.INVISIBILITY].observer is Observer.MAGICIAN
        assert CHEAT_CATALOG[CheatKind.PULL_SEEDS].observer is None

    def test_magic_cheats_cost_mana(self):
        for spec in CHEAT_CATALOG.values():
            if spec.cheat_class is CheatClass.MAGIC:
                assert spec.mana_cost >= 1

    def test_available_at_start(self, basic_state):
        assert available_cheats(basic_state) == [CheatKind.SLEEVE]

    def test_available_with_resources(self, basic_state):
        basic_state.player.seeds = 1
        basic_state.player.mana = 2
        available = set(available_cheats(basic_state))
        locked = {CheatKind.SWAP_CARD, CheatKind.PEEK, CheatKind.LOOK_OVER_SHOULDER}
        assert available == set(CheatKind) - locked


class TestRejections:
    """Rejected attempts report a REJECTED outcome and change nothing."""

    def test_locked_physical_cheat(self, basic_state):
        distract(basic_state, Observer.BIRD)
        before = basic_state.clone()
        result = cheat(basic_state, "swap_card", hand_index=0, opponent_index=0)

        assert not result.success
        assert result.error_code is ErrorCode.CHEAT_LOCKED
        assert result.events == [
            CheatOutcome(
                cheat_id=CheatKind.SWAP_CARD,
                result=CheatResult.REJECTED,
                reason="swap_card is still locked",
            )
        ]
        assert basic_state == before

    def test_locked_checked_before_target(self, basic_state):
        result = cheat(basic_state, "peek")  # locked, and the pile is empty
        assert result.error_code is ErrorCode.CHEAT_LOCKED

    def test_target_checked_before_resources(self, basic_state):
        result = cheat(basic_state, "duplicate", hand_index=0)  # hand full, no mana
        assert result.error_code is ErrorCode.INVALID_TARGET

    def test_insufficient_mana(self, basic_state):
        result = cheat(basic_state, "inner_eye")
        assert result.error_code is ErrorCode.INSUFFICIENT_RESOURCES

    def test_insufficient_seeds(self, basic_state):
        result = cheat(basic_state, "pull_seeds")
        assert result.error_code is ErrorCode.INSUFFICIENT_RESOURCES

    def test_rejection_is_never_caught(self, basic_state):
        """A rejected attempt carries no detection risk, even under watch."""
        result = cheat(basic_state, "inner_eye")
        assert not basic_state.is_over
        assert result.new_state is None

    def test_outside_player_window(self, long_state):
        long_state.initiative = OPPONENT
        long_state.player.mana = 1
        result = cheat(long_state, "inner_eye")
        assert result.error_code is ErrorCode.NOT_PLAYER_WINDOW

    def test_after_game_over(self, basic_state):
        basic_state.phase = TurnPhase.GAME_OVER
        result = cheat(basic_state, "sleeve", hand_index=0)
        assert result.error_code is ErrorCode.GAME_OVER

    def test_sleeve_needs_a_card_to_draw(self, basic_state):
        distract(basic_state, Observer.BIRD)
        result = cheat(basic_state, "sleeve", hand_index=0)
        assert result.error_code is ErrorCode.INVALID_TARGET

    def test_sleeve_full(self, long_state):
        distract(long_state, Observer.BIRD)
        state = cheat(long_state, "sleeve", hand_index=0).new_state
        result = cheat(state, "sleeve", hand_index=0)
        assert result.error_code is ErrorCode.INVALID_TARGET


class TestDetection:
    """A watching observer ends the match."""

    def test_bird_catches_physical_cheat(self, long_state):
        result = cheat(long_state, "sleeve", hand_index=0)

        assert result.success
        assert result.events == [
            CheatOutcome(
                cheat_id=CheatKind.SLEEVE,
                result=CheatResult.CAUGHT,
                reason="the bird was watching",
            ),
            GameOver(reason=EndReason.CAUGHT_CHEATING, winner=OPPONENT),
        ]

    def test_bird_catches_swap(self, basic_state):
        basic_state.player.unlocked_cheats.add(CheatKind.SWAP_CARD)
        result = cheat(basic_state, "swap_card", hand_index=0, opponent_index=0)

        assert result.new_state.result is EndReason.CAUGHT_CHEATING
        assert result.new_state.player.hand == basic_state.player.hand
        assert result.new_state.opponent.hand == basic_state.opponent.hand

    def test_only_the_outcome_changes(self, long_state):
        long_state.player.mana = 1
        result = cheat(long_state, "hack_ordering")

        expected = long_state.clone()
        expected.phase = TurnPhase.GAME_OVER
        expected.result = EndReason.CAUGHT_CHEATING
        expected.winner = OPPONENT
        assert result.new_state == expected
        assert result.new_state.player.mana == 1
        assert not result.new_state.ordering_inverted

    def test_bird_does_not_watch_magic(self, long_state):
        distract(long_state, Observer.BIRD)
        long_state.player.mana = 1
        result = cheat(long_state, "inner_eye")
        assert result.events[0].result is CheatResult.CAUGHT

    def test_magician_does_not_watch_physical(self, long_state):
        distract(long_state, Observer.MAGICIAN)
        result = cheat(long_state, "sleeve", hand_index=0)
        assert result.events[0].result is CheatResult.CAUGHT

    def test_pull_seeds_is_never_caught(self, long_state):
        long_state.player.seeds = 1
        result = cheat(long_state, "pull_seeds")

        assert result.events[0].result is CheatResult.SUCCEEDED
        state = result.new_state
        assert state.player.seeds == 0
        assert state.distractions[Observer.BIRD].active

    def test_pull_seeds_enables_physical_cheat(self, long_state):
        long_state.player.seeds = 1
        state = cheat(long_state, "pull_seeds").new_state
        result = cheat(state, "sleeve", hand_index=0)

        assert result.events[0].result is CheatResult.SUCCEEDED
        assert not result.new_state.is_over


class TestEffects:
    """Effects of successful cheats."""

    def test_sleeve(self, long_state):
        distract(long_state, Observer.BIRD)
        result = cheat(long_state, "sleeve", hand_index=2)
        state = result.new_state

        assert [card.rank for card in state.player.sleeve] == [11]
        assert [card.rank for card in state.player.hand] == [3, 7, 1]
        assert len(state.player.draw_pile) == 8
        assert state.card_census() == long_state.card_census()

    def test_swap_card(self, basic_state):
        distract(basic_state, Observer.BIRD)
        basic_state.player.unlocked_cheats.add(CheatKind.SWAP_CARD)
        state = cheat(basic_state, "swap_card", hand_index=0, opponent_index=2).new_state

        assert [card.rank for card in state.player.hand] == [9, 7, 11]
        assert [card.rank for card in state.opponent.hand] == [5, 2, 3]

    def test_peek_reveals_top(self, long_state):
        distract(long_state, Observer.BIRD)
        long_state.player.unlocked_cheats.add(CheatKind.PEEK)
        result = cheat(long_state, "peek")

        revealed = result.events[1]
        assert isinstance(revealed, CardsRevealed)
        assert revealed.participant is PLAYER
        assert revealed.cards == (long_state.player.draw_pile[0],)
        assert result.new_state.player.hand == long_state.player.hand

    def test_peek_and_swap(self, long_state):
        distract(long_state, Observer.BIRD)
        long_state.player.unlocked_cheats.add(CheatKind.PEEK)
        state = cheat(long_state, "peek", hand_index=0).new_state

        assert state.player.hand[0] == long_state.player.draw_pile[0]
        assert state.player.draw_pile[0] == long_state.player.hand[0]

    @pytest.mark.parametrize("cheat_id,observer", [
        ("look_over_shoulder", Observer.BIRD),
        ("inner_eye", Observer.MAGICIAN),
    ])
    def test_reveal_opponent_hand(self, basic_state, cheat_id, observer):
        distract(basic_state, observer)
        basic_state.player.unlocked_cheats.add(CheatKind.LOOK_OVER_SHOULDER)
        basic_state.player.mana = 1
        result = cheat(basic_state, cheat_id)

        revealed = result.events[1]
        assert revealed.participant is OPPONENT
        assert revealed.cards == tuple(basic_state.opponent.hand)
        assert revealed.source == cheat_id

    def test_hack_ordering(self, basic_state):
        distract(basic_state, Observer.MAGICIAN)
        basic_state.player.mana = 1
        state = cheat(basic_state, "hack_ordering").new_state

        assert state.ordering_inverted
        assert state.player.mana == 0
        assert cheat(distract(state, Observer.MAGICIAN), "hack_ordering").error_code is (
            ErrorCode.INVALID_TARGET
        )

    def test_deja_vu(self, basic_state):
        distract(basic_state, Observer.MAGICIAN)
        basic_state.player.mana = 2
        state = cheat(basic_state, "deja_vu").new_state

        assert state.deja_vu_pending
        assert cheat(state, "deja_vu").error_code is ErrorCode.INVALID_TARGET

    def test_duplicate(self, state_factory):
        state = state_factory(player_hand="7r:Het 2r", opponent_hand="5b 4b")
        distract(state, Observer.MAGICIAN)
        state.player.mana = 2
        state = cheat(state, "duplicate", hand_index=0).new_state

        copy, original = state.player.hand[-1], state.player.hand[0]
        assert (copy.rank, copy.color, copy.word) == (original.rank, original.color, original.word)
        assert copy.card_id == "ph0~1"
        assert state.conjured == 1
        assert sum(state.card_census().values()) == state.expected_card_count() == 5

    def test_duplicate_needs_room(self, basic_state):
        distract(basic_state, Observer.MAGICIAN)
        basic_state.player.mana = 2
        assert cheat(basic_state, "duplicate", hand_index=0).error_code is ErrorCode.INVALID_TARGET

    def test_invisibility(self, basic_state):
        distract(basic_state, Observer.MAGICIAN)
        basic_state.player.mana = 2
        state = cheat(basic_state, "invisibility", opponent_index=1).new_state

        assert [card.rank for card in state.opponent.hand] == [5, 9]
        assert state.vanished == 1
        assert sum(state.card_census().values()) == state.expected_card_count() == 5

    def test_invisibility_spares_the_last_card_to_play(self, state_factory):
        state = state_factory(player_hand="7r 2r", opponent_hand="5b")
        distract(state, Observer.MAGICIAN)
        state.player.mana = 2
        result = cheat(state, "invisibility", opponent_index=0)
        assert result.error_code is ErrorCode.INVALID_TARGET

    def test_cheat_while_answering(self, long_state):
        """The player may cheat after the opponent has led."""
        long_state.initiative = OPPONENT
        state = apply_command(long_state, Command.play_card(OPPONENT, 0)).new_state
        distract(state, Observer.MAGICIAN)
        state.player.mana = 1
        result = cheat(state, "inner_eye")
        assert result.events[0].result is CheatResult.SUCCEEDED


def test_starting_cheats():
    assert STARTING_CHEATS == {CheatKind.SLEEVE}

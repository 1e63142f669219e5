"""
Tests for the card model.

Tests:
- Rank order (0 beats 12, otherwise higher wins)
- Card validation
- Deck text parsing and formatting
"""

import pytest

from ..engine_core.cards import (
    BattleOutcome,
    Card,
    CardColor,
    Word,
    compare_ranks,
    format_deck,
    parse_card,
    parse_deck,
)
from ..engine_core.errors import DeckParseError


class TestRankOrder:
    """Tests for compare_ranks."""

    @pytest.mark.parametrize("rank", range(13))
    def test_rank_against_every_rank(self, rank):
        """Every pair of ranks follows the wrap rule, then numeric order."""
        for other in range(13):
            outcome = compare_ranks(rank, other)
            if rank == other:
                assert outcome is BattleOutcome.TIE
            elif (rank, other) == (0, 12):
                assert outcome is BattleOutcome.WIN
            elif (rank, other) == (12, 0):
                assert outcome is BattleOutcome.LOSS
            elif rank > other:
                assert outcome is BattleOutcome.WIN
            else:
                assert outcome is BattleOutcome.LOSS

    def test_comparison_is_antisymmetric(self):
        """Swapping the cards inverts the outcome."""
        for rank in range(13):
            for other in range(13):
                assert compare_ranks(rank, other) is compare_ranks(other, rank).invert()

    def test_zero_loses_to_middle_ranks(self):
        """0 only beats 12."""
        for other in range(1, 12):
            assert compare_ranks(0, other) is BattleOutcome.LOSS

    def test_card_beats_ignores_color_and_word(self):
        """Comparison only looks at the rank."""
        red = Card(rank=7, color=CardColor.RED, word=Word.QUBE)
        blue = Card(rank=7, color=CardColor.BLUE)
        assert red.beats(blue) is BattleOutcome.TIE


class TestCard:
    """Tests for Card."""

    def test_rank_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            Card(rank=13, color=CardColor.RED)
        with pytest.raises(ValueError):
            Card(rank=-1, color=CardColor.RED)

    def test_cards_are_immutable(self):
        card = Card(rank=5, color=CardColor.GOLD)
        with pytest.raises(AttributeError):
            card.rank = 6

    def test_token(self):
        assert Card(rank=12, color=CardColor.GREEN, word=Word.QUBE).to_token() == "12g:Qube"
        assert str(Card(rank=0, color=CardColor.BLUE)) == "0b"


class TestDeckText:
    """Tests for the .deck text format."""

    def test_parse_card_with_word(self):
        card = parse_card("12g:Qube")
        assert card.rank == 12
        assert card.color is CardColor.GREEN
        assert card.word is Word.QUBE

    def test_word_names_are_case_insensitive(self):
        assert parse_card("3y:zihbm").word is Word.ZIHBM

    def test_parse_deck_assigns_ids_in_order(self):
        cards = parse_deck("7r 12g:Qube\n0b", id_prefix="p")
        assert [card.card_id for card in cards] == ["p0", "p1", "p2"]
        assert [card.rank for card in cards] == [7, 12, 0]

    def test_empty_text_is_empty_deck(self):
        assert parse_deck("   ") == []

    def test_format_is_inverse_of_parse(self):
        text = "7r 12g:Qube 0b 5y:Meb"
        assert format_deck(parse_deck(text)) == text

    @pytest.mark.parametrize("token", ["13r", "7x", "r", "7", "ab", "5r:Abracadabra", "-1r"])
    def test_malformed_tokens_rejected(self, token):
        with pytest.raises(DeckParseError):
            parse_deck(f"1r {token}")

    def test_error_reports_position(self):
        with pytest.raises(DeckParseError) as excinfo:
            parse_deck("1r 2b 99g")
        assert excinfo.value.position == 2
        assert excinfo.value.token == "99g"

    def test_deck_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_card("nope")

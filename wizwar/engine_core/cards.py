"""
Cards - Ranks, colors, words of power and the deck text format.

Card structure:
- Rank (0-12). Higher wins, except 0 beats 12.
- Color (red, blue, green, gold). Cosmetic, never affects comparison.
- Word of power (optional). Triggers an effect when the card wins a round.

Deck text is a whitespace separated list of tokens `<rank><color>[:<Word>]`,
for example `7r 12g:Qube 0b`.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .errors import DeckParseError


MIN_RANK = 0
MAX_RANK = 12


class CardColor(Enum):
    """Card colors, keyed by their one-letter deck code."""
    RED = "r"
    BLUE = "b"
    GREEN = "g"
    GOLD = "y"


class Word(Enum):
    """Words of power printed on some cards."""
    EGEQ = "Egeq"
    GEH = "Geh"
    HET = "Het"
    MEB = "Meb"
    QUBE = "Qube"
    ZIHBM = "Zihbm"

    @property
    def description(self) -> str:
        return _WORD_DESCRIPTIONS[self]


_WORD_DESCRIPTIONS = {
    Word.EGEQ: "gain a seed",
    Word.GEH: "gain mana",
    Word.HET: "unlock a physical cheat",
    Word.MEB: "the magician is distracted next round",
    Word.QUBE: "points for this round are doubled",
    Word.ZIHBM: "no effect",
}


class BattleOutcome(Enum):
    """Result of comparing one card against another, from the first card's side."""
    LOSS = "loss"
    TIE = "tie"
    WIN = "win"

    def invert(self) -> BattleOutcome:
        if self is BattleOutcome.WIN:
            return BattleOutcome.LOSS
        if self is BattleOutcome.LOSS:
            return BattleOutcome.WIN
        return self


def compare_ranks(rank: int, other: int) -> BattleOutcome:
    """
    Compare two ranks.

    The wrap rule is checked first: 0 beats 12 and 12 loses to 0.
    0 loses to every rank from 1 to 11.
    """
    if rank == other:
        return BattleOutcome.TIE
    if rank == MIN_RANK and other == MAX_RANK:
        return BattleOutcome.WIN
    if rank == MAX_RANK and other == MIN_RANK:
        return BattleOutcome.LOSS
    return BattleOutcome.WIN if rank > other else BattleOutcome.LOSS


@dataclass(frozen=True)
class Card:
    """
    An immutable card.

    card_id is unique inside a match so that duplicated cards can be told
    apart from their original.
    """
    rank: int
    color: CardColor
    word: Word | None = None
    card_id: str = ""

    def __post_init__(self):
        if not MIN_RANK <= self.rank <= MAX_RANK:
            raise ValueError(f"Card rank must be in {MIN_RANK}..{MAX_RANK}, got {self.rank}")

    def beats(self, other: Card) -> BattleOutcome:
        return compare_ranks(self.rank, other.rank)

    def to_token(self) -> str:
        """Deck text token for this card."""
        token = f"{self.rank}{self.color.value}"
        if self.word is not None:
            token += f":{self.word.value}"
        return token

    def __str__(self) -> str:
        return self.to_token()


_COLOR_CODES = {color.value: color for color in CardColor}
_WORDS_BY_NAME = {word.value.lower(): word for word in Word}


def parse_card(token: str, card_id: str = "") -> Card:
    """Parse a single `<rank><color>[:<Word>]` token."""
    body, sep, word_name = token.partition(":")
    if not body or len(body) < 2:
        raise DeckParseError(f"Malformed card token: {token!r}", token=token)

    rank_text, color_code = body[:-1], body[-1].lower()
    if not rank_text.isdigit():
        raise DeckParseError(f"Card rank is not a number: {token!r}", token=token)
    rank = int(rank_text)
    if not MIN_RANK <= rank <= MAX_RANK:
        raise DeckParseError(f"Card rank out of range: {token!r}", token=token)

    color = _COLOR_CODES.get(color_code)
    if color is None:
        raise DeckParseError(f"Unknown card color {color_code!r} in {token!r}", token=token)

    word = None
    if sep:
        word = _WORDS_BY_NAME.get(word_name.lower())
        if word is None:
            raise DeckParseError(f"Unknown word of power {word_name!r} in {token!r}", token=token)

    return Card(rank=rank, color=color, word=word, card_id=card_id)


def parse_deck(text: str, id_prefix: str = "c") -> list[Card]:
    """
    Parse deck text into cards, top of the pile first.

    Card ids are assigned as `<id_prefix><position>`.
    """
    cards = []
    for position, token in enumerate(text.split()):
        try:
            cards.append(parse_card(token, card_id=f"{id_prefix}{position}"))
        except DeckParseError as e:
            raise DeckParseError(f"{e} (position {position})", token=token, position=position) from e
    return cards


def format_deck(cards: Iterable[Card]) -> str:
    """Inverse of parse_deck (card ids are not part of the text)."""
    return " ".join(card.to_token() for card in cards)

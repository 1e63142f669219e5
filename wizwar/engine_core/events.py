"""
Event types for the match engine.

Events form a typed log of everything that happens during a match.
UI layers consume them to animate and to update their view of the table;
the engine never reads them back.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Union

from .cards import Card, Word
from .state import CheatKind, EndReason, Observer, Participant


class CheatResult(Enum):
    """How a cheat attempt ended."""
    SUCCEEDED = "succeeded"
    REJECTED = "rejected"
    CAUGHT = "caught"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Card):
        return {
            "card_id": value.card_id,
            "rank": value.rank,
            "color": value.color.value,
            "word": value.word.value if value.word else None,
        }
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class _EventMixin:
    __slots__ = ()

    def to_dict(self) -> dict[str, Any]:
        data = {f.name: _plain(getattr(self, f.name)) for f in fields(self)}
        data["type"] = self.event_type
        return data


# =============================================================================
# Card Events
# =============================================================================


@dataclass(frozen=True, slots=True)
class CardsDrawn(_EventMixin):
    """Cards moved from a draw pile (or the sleeve) into a hand."""

    participant: Participant
    cards: tuple[Card, ...]

    @property
    def event_type(self) -> str:
        return "cards_drawn"


@dataclass(frozen=True, slots=True)
class CardPlayed(_EventMixin):
    """A card was put on the table."""

    participant: Participant
    card: Card
    face_up: bool = True

    @property
    def event_type(self) -> str:
        return "card_played"


@dataclass(frozen=True, slots=True)
class CardsRevealed(_EventMixin):
    """Hidden cards were shown to the player by a cheat."""

    participant: Participant
    """Whose cards were revealed."""

    cards: tuple[Card, ...]
    source: str
    """The cheat that revealed them."""

    @property
    def event_type(self) -> str:
        return "cards_revealed"


# =============================================================================
# Round Events
# =============================================================================


@dataclass(frozen=True, slots=True)
class WarEscalated(_EventMixin):
    """Played cards tied and were staked face-down."""

    depth: int
    stake_size: int

    @property
    def event_type(self) -> str:
        return "war_escalated"


@dataclass(frozen=True, slots=True)
class RoundResolved(_EventMixin):
    """A round was won and the cards moved to the winner's win pile."""

    round_number: int
    winner: Participant
    cards_transferred: int
    points_awarded: int
    war_occurred: bool

    @property
    def event_type(self) -> str:
        return "round_resolved"


@dataclass(frozen=True, slots=True)
class WordEffectApplied(_EventMixin):
    """The winning card's word of power took effect."""

    word: Word
    participant: Participant
    effect: str

    @property
    def event_type(self) -> str:
        return "word_effect_applied"


# =============================================================================
# Distraction and Cheat Events
# =============================================================================


@dataclass(frozen=True, slots=True)
class DistractionChanged(_EventMixin):
    """An observer's distraction window opened, shrank or closed."""

    observer: Observer
    active: bool
    rounds_remaining: int

    @property
    def event_type(self) -> str:
        return "distraction_changed"


@dataclass(frozen=True, slots=True)
class CheatOutcome(_EventMixin):
    """Result of a cheat attempt."""

    cheat_id: CheatKind
    result: CheatResult
    reason: str | None = None

    @property
    def event_type(self) -> str:
        return "cheat_outcome"


@dataclass(frozen=True, slots=True)
class ItemUsed(_EventMixin):
    """A table item was used to distract the bird."""

    item_id: str

    @property
    def event_type(self) -> str:
        return "item_used"


# =============================================================================
# Game Over
# =============================================================================


@dataclass(frozen=True, slots=True)
class GameOver(_EventMixin):
    """The match ended."""

    reason: EndReason
    winner: Participant | None

    @property
    def event_type(self) -> str:
        return "game_over"


GameEvent = Union[
    CardsDrawn,
    CardPlayed,
    CardsRevealed,
    WarEscalated,
    RoundResolved,
    WordEffectApplied,
    DistractionChanged,
    CheatOutcome,
    ItemUsed,
    GameOver,
]

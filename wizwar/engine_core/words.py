"""
Words of power - effects of the winning card's word.

apply_word is pure: it reads the winner's state and returns the resource
deltas the word grants. apply_deltas commits them. Points doubling (Qube)
is read by the resolver when it scores the round, so committing it is a
no-op here apart from the event.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .cards import Word
from .distraction import open_window
from .events import WordEffectApplied
from .state import CheatKind, MatchState, Observer, Participant, ParticipantState

logger = logging.getLogger(__name__)


# Order in which Het unlocks physical cheats. Sleeve is unlocked from the start.
PHYSICAL_UNLOCK_ORDER = (
    CheatKind.SWAP_CARD,
    CheatKind.PEEK,
    CheatKind.LOOK_OVER_SHOULDER,
)


class DeltaKind(Enum):
    SEEDS = "seeds"
    MANA = "mana"
    UNLOCK_CHEAT = "unlock_cheat"
    DISTRACT = "distract"
    DOUBLE_POINTS = "double_points"


@dataclass(frozen=True)
class ResourceDelta:
    """One change a word grants to the round winner."""
    kind: DeltaKind
    participant: Participant
    amount: int = 0
    cheat: CheatKind | None = None
    observer: Observer | None = None

    def describe(self) -> str:
        if self.kind is DeltaKind.SEEDS:
            return f"+{self.amount} seed"
        if self.kind is DeltaKind.MANA:
            return f"+{self.amount} mana"
        if self.kind is DeltaKind.UNLOCK_CHEAT:
            return f"unlocked {self.cheat.value}"
        if self.kind is DeltaKind.DISTRACT:
            return f"{self.observer.value} distracted for {self.amount} round(s)"
        return "points doubled"


def _egeq(winner, winner_state, rounds):
    return [ResourceDelta(DeltaKind.SEEDS, winner, amount=1)]


def _geh(winner, winner_state, rounds):
    return [ResourceDelta(DeltaKind.MANA, winner, amount=1)]


def _het(winner, winner_state, rounds):
    for cheat in PHYSICAL_UNLOCK_ORDER:
        if cheat not in winner_state.unlocked_cheats:
            return [ResourceDelta(DeltaKind.UNLOCK_CHEAT, winner, cheat=cheat)]
    return []


def _meb(winner, winner_state, rounds):
    return [ResourceDelta(DeltaKind.DISTRACT, winner, amount=rounds, observer=Observer.MAGICIAN)]


def _qube(winner, winner_state, rounds):
    return [ResourceDelta(DeltaKind.DOUBLE_POINTS, winner)]


def _zihbm(winner, winner_state, rounds):
    # Printed on cards but has no effect in play
    return []


_WORD_HANDLERS: dict[Word, Callable[..., list[ResourceDelta]]] = {
    Word.EGEQ: _egeq,
    Word.GEH: _geh,
    Word.HET: _het,
    Word.MEB: _meb,
    Word.QUBE: _qube,
    Word.ZIHBM: _zihbm,
}


def apply_word(
    word: Word,
    winner: Participant,
    winner_state: ParticipantState,
    distraction_rounds: int = 1,
) -> list[ResourceDelta]:
    """Deltas granted by a word to the round winner. Does not mutate."""
    return _WORD_HANDLERS[word](winner, winner_state, distraction_rounds)


def doubles_points(deltas: list[ResourceDelta]) -> bool:
    return any(delta.kind is DeltaKind.DOUBLE_POINTS for delta in deltas)


def apply_deltas(
    state: MatchState,
    word: Word,
    winner: Participant,
    deltas: list[ResourceDelta],
) -> list:
    """Commit word deltas to the state. Returns the events they produce."""
    if not deltas:
        # Zihbm, or Het with nothing left to unlock
        effect = word.description if word is Word.ZIHBM else "nothing left to unlock"
        return [WordEffectApplied(word=word, participant=winner, effect=effect)]

    events = []
    for delta in deltas:
        side = state.get(delta.participant)
        if delta.kind is DeltaKind.SEEDS:
            side.seeds += delta.amount
        elif delta.kind is DeltaKind.MANA:
            side.mana += delta.amount
        elif delta.kind is DeltaKind.UNLOCK_CHEAT:
            side.unlocked_cheats.add(delta.cheat)
        elif delta.kind is DeltaKind.DISTRACT:
            events.append(open_window(state, delta.observer, delta.amount))

        events.append(
            WordEffectApplied(word=word, participant=delta.participant, effect=delta.describe())
        )
        logger.debug("%s won with %s: %s", delta.participant.value, word.value, delta.describe())
    return events

"""
Cheat engine - validation, detection and effects of player cheats.

An attempt goes through, in order:
0. Window: only the player cheats, only while it is the player's move.
1. Static checks: unlocked, valid target, affordable. A failure rejects the
   attempt with no state change and no risk of detection.
2. Observer: physical cheats are watched by the Bird, magic ones by the
   Magician, free ones by nobody.
3. A watching observer catches the player: the match ends and nothing
   else changes.
4. Otherwise the cost is paid and the effect applied, all at once.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable

from .command import CheatTarget, ErrorCode
from .deck import add_to_hand, draw
from .distraction import is_distracted, open_window
from .events import CardsDrawn, CardsRevealed, CheatOutcome, CheatResult
from .outcome import end_match
from .state import CheatKind, EndReason, MatchState, Observer, Participant

logger = logging.getLogger(__name__)


class CheatClass(Enum):
    PHYSICAL = "physical"
    MAGIC = "magic"
    FREE = "free"


_OBSERVERS = {
    CheatClass.PHYSICAL: Observer.BIRD,
    CheatClass.MAGIC: Observer.MAGICIAN,
    CheatClass.FREE: None,
}


@dataclass(frozen=True)
class CheatSpec:
    """Static description of a cheat."""
    kind: CheatKind
    cheat_class: CheatClass
    seed_cost: int = 0
    mana_cost: int = 0
    description: str = ""

    @property
    def observer(self) -> Observer | None:
        return _OBSERVERS[self.cheat_class]


CHEAT_CATALOG: dict[CheatKind, CheatSpec] = {
    spec.kind: spec
    for spec in (
        CheatSpec(CheatKind.PULL_SEEDS, CheatClass.FREE, seed_cost=1,
                  description="Throw seeds to distract the bird"),
        CheatSpec(CheatKind.SLEEVE, CheatClass.PHYSICAL,
                  description="Hide a card in your sleeve and draw a new one"),
        CheatSpec(CheatKind.SWAP_CARD, CheatClass.PHYSICAL,
                  description="Exchange a card with the opponent's hand"),
        CheatSpec(CheatKind.PEEK, CheatClass.PHYSICAL,
                  description="Look at the top of your pile, optionally swap it in"),
        CheatSpec(CheatKind.LOOK_OVER_SHOULDER, CheatClass.PHYSICAL,
                  description="See the opponent's hand"),
        CheatSpec(CheatKind.INNER_EYE, CheatClass.MAGIC, mana_cost=1,
                  description="See the opponent's hand with magic"),
        CheatSpec(CheatKind.HACK_ORDERING, CheatClass.MAGIC, mana_cost=1,
                  description="Lower beats higher until your next draw"),
        CheatSpec(CheatKind.DEJA_VU, CheatClass.MAGIC, mana_cost=1,
                  description="Keep the initiative next round"),
        CheatSpec(CheatKind.DUPLICATE, CheatClass.MAGIC, mana_cost=2,
                  description="Copy a card in your hand"),
        CheatSpec(CheatKind.INVISIBILITY, CheatClass.MAGIC, mana_cost=2,
                  description="Make a card in the opponent's hand vanish"),
    )
}

# Physical cheats available before any Het is won
STARTING_CHEATS = frozenset({CheatKind.SLEEVE})


@dataclass
class CheatVerdict:
    """Result of a cheat attempt, with the events it produced."""
    result: CheatResult
    events: list = field(default_factory=list)
    reason: str | None = None
    error_code: ErrorCode | None = None


def player_window_open(state: MatchState) -> bool:
    """Whether the player may act (cheat, use items) right now."""
    return state.to_play is Participant.PLAYER


def is_unlocked(state: MatchState, kind: CheatKind) -> bool:
    if CHEAT_CATALOG[kind].cheat_class is not CheatClass.PHYSICAL:
        return True
    return kind in state.player.unlocked_cheats


def _valid_index(items: list, index: int | None) -> bool:
    return index is not None and 0 <= index < len(items)


def _target_problem(state: MatchState, kind: CheatKind, target: CheatTarget) -> str | None:
    player, opponent = state.player, state.opponent

    if kind is CheatKind.SLEEVE:
        if not _valid_index(player.hand, target.hand_index):
            return "choose a card in your hand to hide"
        if len(player.sleeve) >= state.config.max_sleeve:
            return "your sleeve is full"
        if not player.draw_pile:
            return "no card left to draw in its place"
    elif kind is CheatKind.SWAP_CARD:
        if not _valid_index(player.hand, target.hand_index):
            return "choose a card in your hand to swap"
        if not _valid_index(opponent.hand, target.opponent_index):
            return "choose a card in the opponent's hand"
    elif kind is CheatKind.PEEK:
        if not player.draw_pile:
            return "your pile is empty"
        if target.hand_index is not None and not _valid_index(player.hand, target.hand_index):
            return "no such card in your hand"
    elif kind is CheatKind.HACK_ORDERING:
        if state.ordering_inverted:
            return "the ordering is already hacked"
    elif kind is CheatKind.DEJA_VU:
        if state.deja_vu_pending:
            return "deja vu is already pending"
    elif kind is CheatKind.DUPLICATE:
        if not _valid_index(player.hand, target.hand_index):
            return "choose a card in your hand to copy"
        if len(player.hand) >= player.hand_capacity:
            return "your hand is full"
    elif kind is CheatKind.INVISIBILITY:
        if not _valid_index(opponent.hand, target.opponent_index):
            return "choose a card in the opponent's hand"
        still_to_play = state.table_card(Participant.OPPONENT) is None
        if still_to_play and len(opponent.hand) == 1:
            return "the opponent's last card cannot vanish before it is played"
    return None


def check_cheat(
    state: MatchState, kind: CheatKind, target: CheatTarget
) -> tuple[ErrorCode, str] | None:
    """Steps 0 and 1: returns (error_code, reason) when the attempt is rejected."""
    if state.is_over:
        return ErrorCode.GAME_OVER, "the match is over"
    if not player_window_open(state):
        return ErrorCode.NOT_PLAYER_WINDOW, "you can only cheat on your own move"

    spec = CHEAT_CATALOG.get(kind)
    if spec is None:
        return ErrorCode.UNKNOWN_COMMAND, f"unknown cheat {kind!r}"
    if not is_unlocked(state, kind):
        return ErrorCode.CHEAT_LOCKED, f"{kind.value} is still locked"

    problem = _target_problem(state, kind, target)
    if problem:
        return ErrorCode.INVALID_TARGET, problem

    if state.player.seeds < spec.seed_cost:
        return ErrorCode.INSUFFICIENT_RESOURCES, f"{kind.value} needs {spec.seed_cost} seed(s)"
    if state.player.mana < spec.mana_cost:
        return ErrorCode.INSUFFICIENT_RESOURCES, f"{kind.value} needs {spec.mana_cost} mana"
    return None


def available_cheats(state: MatchState) -> list[CheatKind]:
    """Cheats the player could pay for right now, ignoring targets and observers."""
    if state.is_over or not player_window_open(state):
        return []
    return [
        kind for kind, spec in CHEAT_CATALOG.items()
        if is_unlocked(state, kind)
        and state.player.seeds >= spec.seed_cost
        and state.player.mana >= spec.mana_cost
    ]


# =============================================================================
# Effects
# =============================================================================


def _pull_seeds(state, target):
    return [open_window(state, Observer.BIRD, state.config.seed_distraction_rounds)]


def _sleeve(state, target):
    player = state.player
    card = player.hand.pop(target.hand_index)
    player.sleeve.append(card)
    drawn = draw(state, Participant.PLAYER, 1)
    return [CardsDrawn(participant=Participant.PLAYER, cards=tuple(drawn))]


def _swap_card(state, target):
    player, opponent = state.player, state.opponent
    i, j = target.hand_index, target.opponent_index
    player.hand[i], opponent.hand[j] = opponent.hand[j], player.hand[i]
    return []


def _peek(state, target):
    player = state.player
    revealed = CardsRevealed(
        participant=Participant.PLAYER, cards=(player.draw_pile[0],), source=CheatKind.PEEK.value
    )
    if target.hand_index is not None:
        i = target.hand_index
        player.hand[i], player.draw_pile[0] = player.draw_pile[0], player.hand[i]
    return [revealed]


def _reveal_opponent_hand(kind):
    def effect(state, target):
        return [
            CardsRevealed(
                participant=Participant.OPPONENT,
                cards=tuple(state.opponent.hand),
                source=kind.value,
            )
        ]
    return effect


def _hack_ordering(state, target):
    state.ordering_inverted = True
    return []


def _deja_vu(state, target):
    state.deja_vu_pending = True
    return []


def _duplicate(state, target):
    original = state.player.hand[target.hand_index]
    state.conjured += 1
    copy = replace(original, card_id=f"{original.card_id}~{state.conjured}")
    add_to_hand(state.player, [copy])
    return []


def _invisibility(state, target):
    state.opponent.hand.pop(target.opponent_index)
    state.vanished += 1
    return []


_EFFECTS: dict[CheatKind, Callable[[MatchState, CheatTarget], list]] = {
    CheatKind.PULL_SEEDS: _pull_seeds,
    CheatKind.SLEEVE: _sleeve,
    CheatKind.SWAP_CARD: _swap_card,
    CheatKind.PEEK: _peek,
    CheatKind.LOOK_OVER_SHOULDER: _reveal_opponent_hand(CheatKind.LOOK_OVER_SHOULDER),
    CheatKind.INNER_EYE: _reveal_opponent_hand(CheatKind.INNER_EYE),
    CheatKind.HACK_ORDERING: _hack_ordering,
    CheatKind.DEJA_VU: _deja_vu,
    CheatKind.DUPLICATE: _duplicate,
    CheatKind.INVISIBILITY: _invisibility,
}


def attempt_cheat(
    state: MatchState, kind: CheatKind, target: CheatTarget | None = None
) -> CheatVerdict:
    """
    Attempt a cheat on `state` (mutated in place; the reducer passes a clone).

    Rejected attempts leave the state untouched.
    """
    target = target or CheatTarget()
    problem = check_cheat(state, kind, target)
    if problem is not None:
        error_code, reason = problem
        logger.warning("Cheat %s rejected: %s", kind.value, reason)
        return CheatVerdict(
            result=CheatResult.REJECTED,
            events=[CheatOutcome(cheat_id=kind, result=CheatResult.REJECTED, reason=reason)],
            reason=reason,
            error_code=error_code,
        )

    spec = CHEAT_CATALOG[kind]
    observer = spec.observer
    if observer is not None and not is_distracted(state, observer):
        reason = f"the {observer.value} was watching"
        logger.info("Player caught cheating (%s): %s", kind.value, reason)
        return CheatVerdict(
            result=CheatResult.CAUGHT,
            events=[
                CheatOutcome(cheat_id=kind, result=CheatResult.CAUGHT, reason=reason),
                end_match(state, EndReason.CAUGHT_CHEATING, Participant.OPPONENT),
            ],
            reason=reason,
        )

    state.player.seeds -= spec.seed_cost
    state.player.mana -= spec.mana_cost
    effect_events = _EFFECTS[kind](state, target)
    logger.debug("Cheat %s succeeded", kind.value)
    return CheatVerdict(
        result=CheatResult.SUCCEEDED,
        events=[CheatOutcome(cheat_id=kind, result=CheatResult.SUCCEEDED)] + effect_events,
    )

"""
Outcome evaluator - decides when and how a match ends.

Terminal outcomes:
- Caught cheating (raised by the cheat engine)
- Ran out of cards during a war (raised by the resolver)
- Exhaustion: no side can play another round, highest points wins
- Early decision: one side can no longer reach the other's points
"""

from __future__ import annotations
import logging

from .cards import Word
from .events import GameOver
from .state import EndReason, MatchState, Participant, TurnPhase

logger = logging.getLogger(__name__)


def end_match(state: MatchState, reason: EndReason, winner: Participant | None) -> GameOver:
    """Put the match into GAME_OVER and record the outcome."""
    state.phase = TurnPhase.GAME_OVER
    state.result = reason
    state.winner = winner
    logger.info(
        "Match %s over after %d round(s): %s (winner: %s)",
        state.match_id,
        state.round_number,
        reason.value,
        winner.value if winner else "none",
    )
    return GameOver(reason=reason, winner=winner)


def qube_in_play(state: MatchState) -> bool:
    """Whether a Qube card could still win a round."""
    in_play = (
        state.player.hand + state.player.draw_pile + state.player.sleeve
        + state.opponent.hand + state.opponent.draw_pile + state.opponent.sleeve
        + [entry.card for entry in state.table]
        + [entry.card for entry in state.stake]
    )
    return any(card.word is Word.QUBE for card in in_play)


def max_achievable(state: MatchState, participant: Participant) -> int:
    """
    Upper bound on the points a side can finish with.

    Assumes the side wins every card still in play, doubled when a Qube
    card remains. Cards conjured by future cheats are not counted.
    """
    remaining = state.cards_remaining()
    if qube_in_play(state):
        remaining *= 2
    return state.get(participant).points + remaining


def is_exhausted(state: MatchState) -> bool:
    """No further round can be played: a side has no card to lead or answer with."""
    return not state.player.hand or not state.opponent.hand


def _points_result(state: MatchState) -> tuple[EndReason, Participant | None]:
    player, opponent = state.player.points, state.opponent.points
    if player > opponent:
        return EndReason.WIN, Participant.PLAYER
    if player < opponent:
        return EndReason.LOSE, Participant.OPPONENT
    return EndReason.DRAW, None


def evaluate(state: MatchState) -> GameOver | None:
    """
    Check for a terminal outcome after a completed round.

    Expects hands to be refilled already. Returns the GameOver event when
    the match ended, None otherwise.
    """
    if state.is_over:
        return None

    if is_exhausted(state):
        reason, winner = _points_result(state)
        return end_match(state, reason, winner)

    if not state.config.early_decision:
        return None

    if max_achievable(state, Participant.PLAYER) < state.opponent.points:
        return end_match(state, EndReason.LOSE, Participant.OPPONENT)
    if max_achievable(state, Participant.OPPONENT) < state.player.points:
        return end_match(state, EndReason.WIN, Participant.PLAYER)
    return None

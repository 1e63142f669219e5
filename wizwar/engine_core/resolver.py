"""
Turn resolver - plays, comparison, war and round completion.

Round flow:
1. The initiative holder plays a card, the other side answers.
2. The two cards are compared (an active hack-ordering override inverts it).
3. Ties escalate to war: the tied cards are staked face-down and each side
   adds its next card face-up, until the comparison is decided or a side
   runs out of cards.
4. The winner takes the table and the stake; points equal the cards taken,
   doubled by Qube.
5. Round completion: distractions tick, the winning word applies,
   initiative flips (unless deja vu is pending), hands refill, and the
   outcome evaluator runs.
"""

from __future__ import annotations
import logging

from .cards import BattleOutcome, Card
from .deck import refill_if_empty, take_war_card
from .distraction import tick
from .errors import PileExhausted
from .events import CardPlayed, RoundResolved, WarEscalated
from .outcome import end_match, evaluate
from .state import EndReason, MatchState, Participant, StakedCard, TurnPhase
from .words import apply_deltas, apply_word, doubles_points

logger = logging.getLogger(__name__)


def compare_table(state: MatchState) -> BattleOutcome:
    """Compare the two cards on the table, from the player's side."""
    player_card = state.table_card(Participant.PLAYER)
    opponent_card = state.table_card(Participant.OPPONENT)
    outcome = player_card.beats(opponent_card)
    if state.ordering_inverted:
        outcome = outcome.invert()
    return outcome


def play_card(state: MatchState, participant: Participant, hand_index: int) -> list:
    """
    Put a card from hand on the table.

    The caller has checked that it is this side's turn and that the index
    is valid. Resolves the round when this was the answering card.
    """
    card = state.get(participant).hand.pop(hand_index)
    state.table.append(StakedCard(card=card, owner=participant, face_up=True))
    events = [CardPlayed(participant=participant, card=card)]
    logger.debug("%s played %s", participant.value, card)

    if state.phase == TurnPhase.AWAITING_INITIATIVE_PLAY:
        state.phase = TurnPhase.AWAITING_RESPONSE_PLAY
        return events

    events.extend(resolve_round(state))
    return events


def resolve_round(state: MatchState) -> list:
    """Compare the table, run the war loop, and score the round."""
    state.phase = TurnPhase.COMPARING
    events = []
    depth = 0
    outcome = compare_table(state)

    while outcome is BattleOutcome.TIE:
        state.phase = TurnPhase.WAR_ESCALATION
        depth += 1
        for entry in state.table:
            state.stake.append(StakedCard(card=entry.card, owner=entry.owner, face_up=False))
        state.table.clear()
        events.append(WarEscalated(depth=depth, stake_size=len(state.stake)))
        logger.debug("War (depth %d), %d card(s) at stake", depth, len(state.stake))

        war_cards: dict[Participant, Card] = {}
        out_of_cards = []
        for participant in (state.initiative, state.initiative.other):
            try:
                war_cards[participant] = take_war_card(state, participant)
            except PileExhausted:
                out_of_cards.append(participant)

        for participant, card in war_cards.items():
            state.table.append(StakedCard(card=card, owner=participant, face_up=True))
            events.append(CardPlayed(participant=participant, card=card))

        if out_of_cards:
            winner = None if len(out_of_cards) == 2 else out_of_cards[0].other
            events.append(end_match(state, EndReason.RAN_OUT_OF_CARDS_DURING_WAR, winner))
            return events

        state.phase = TurnPhase.COMPARING
        outcome = compare_table(state)

    winner = Participant.PLAYER if outcome is BattleOutcome.WIN else Participant.OPPONENT
    winning_card = state.table_card(winner)
    winner_state = state.get(winner)

    transferred = [entry.card for entry in state.stake] + [entry.card for entry in state.table]
    state.stake.clear()
    state.table.clear()
    winner_state.win_pile.extend(transferred)

    deltas = []
    if winning_card.word is not None:
        deltas = apply_word(
            winning_card.word, winner, winner_state, state.config.meb_distraction_rounds
        )
    points = len(transferred) * (2 if doubles_points(deltas) else 1)
    winner_state.points += points

    events.append(
        RoundResolved(
            round_number=state.round_number,
            winner=winner,
            cards_transferred=len(transferred),
            points_awarded=points,
            war_occurred=depth > 0,
        )
    )
    logger.debug(
        "Round %d won by %s: %d card(s), %d point(s)",
        state.round_number, winner.value, len(transferred), points,
    )

    state.phase = TurnPhase.ROUND_COMPLETE
    events.extend(complete_round(state, winning_card, winner, deltas))
    return events


def complete_round(state: MatchState, winning_card: Card, winner: Participant, deltas) -> list:
    """Round boundary bookkeeping, in order."""
    events = list(tick(state))

    if winning_card.word is not None:
        events.extend(apply_deltas(state, winning_card.word, winner, deltas))

    if state.deja_vu_pending:
        state.deja_vu_pending = False
        logger.debug("Deja vu: %s keeps the initiative", state.initiative.value)
    else:
        state.initiative = state.initiative.other

    for participant in (state.initiative, state.initiative.other):
        events.extend(refill_if_empty(state, participant))

    game_over = evaluate(state)
    if game_over is not None:
        events.append(game_over)
        return events

    state.round_number += 1
    state.phase = TurnPhase.AWAITING_INITIATIVE_PLAY
    return events

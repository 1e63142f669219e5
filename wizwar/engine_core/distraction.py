"""
Distraction tracker - when the Bird and the Magician look away.

Each observer has a timer counted in rounds. Opening a window on an
already distracted observer extends it. Timers tick down once per
completed round.
"""

from __future__ import annotations
import logging

from .events import DistractionChanged, ItemUsed
from .state import MatchState, Observer

logger = logging.getLogger(__name__)


def is_distracted(state: MatchState, observer: Observer) -> bool:
    timer = state.distractions[observer]
    return timer.active and timer.rounds_remaining > 0


def open_window(state: MatchState, observer: Observer, rounds: int) -> DistractionChanged:
    """Open a distraction window, or extend the current one by `rounds`."""
    if rounds < 1:
        raise ValueError(f"A distraction window lasts at least one round, got {rounds}")

    timer = state.distractions[observer]
    timer.rounds_remaining = (timer.rounds_remaining if timer.active else 0) + rounds
    timer.active = True
    logger.debug("%s distracted for %d round(s)", observer.value, timer.rounds_remaining)
    return DistractionChanged(
        observer=observer, active=True, rounds_remaining=timer.rounds_remaining
    )


def tick(state: MatchState) -> list[DistractionChanged]:
    """Count one completed round off every open window."""
    events = []
    for observer, timer in state.distractions.items():
        if not timer.active:
            continue
        timer.rounds_remaining -= 1
        if timer.rounds_remaining <= 0:
            timer.rounds_remaining = 0
            timer.active = False
            logger.debug("%s is watching again", observer.value)
        events.append(
            DistractionChanged(
                observer=observer,
                active=timer.active,
                rounds_remaining=timer.rounds_remaining,
            )
        )
    return events


def use_item(state: MatchState, item_id: str) -> list:
    """
    Use a table item to distract the Bird.

    Each item works once per match. The caller checks availability.
    """
    state.items_available.remove(item_id)
    logger.info("Table item %s used", item_id)
    return [
        ItemUsed(item_id=item_id),
        open_window(state, Observer.BIRD, state.config.item_distraction_rounds),
    ]

"""
Scripted opponents - named policies the player can face.

Opponents differ only in the policy that picks their cards; they never
cheat.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from .policy import BotPolicy, FirstLegalPolicy, HighestCardPolicy, RandomPolicy


@dataclass(frozen=True)
class Opponent:
    """A named scripted opponent."""
    name: str
    description: str
    policy_factory: Callable[[int | None], BotPolicy]

    def create_policy(self, seed: int | None = None) -> BotPolicy:
        return self.policy_factory(seed)


APPRENTICE = Opponent(
    name="apprentice",
    description="Plays the first card in hand, every time",
    policy_factory=lambda seed: FirstLegalPolicy(),
)

ARCHMAGE = Opponent(
    name="archmage",
    description="Answers with the weakest card that still wins",
    policy_factory=lambda seed: HighestCardPolicy(),
)

TRICKSTER = Opponent(
    name="trickster",
    description="Plays a random card",
    policy_factory=lambda seed: RandomPolicy(seed),
)


OPPONENTS = {
    opponent.name: opponent
    for opponent in (APPRENTICE, ARCHMAGE, TRICKSTER)
}

DEFAULT_OPPONENT = APPRENTICE.name


def get_opponent(name: str) -> Opponent:
    """Look up an opponent by name. Raises KeyError for unknown names."""
    try:
        return OPPONENTS[name]
    except KeyError:
        raise KeyError(f"Unknown opponent {name!r}; choose from {sorted(OPPONENTS)}") from None

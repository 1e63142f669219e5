"""
Match configuration - rule constants for a single match.

Defaults reproduce the standard game. Every field can be overridden from
the environment with a `WIZWAR_` prefixed variable (see MatchConfig.from_env).
"""

from __future__ import annotations
import os
from dataclasses import dataclass, fields
from typing import Mapping


DEFAULT_TABLE_ITEMS = ("bread_crumbs", "shiny_button", "music_box")

ENV_PREFIX = "WIZWAR_"


@dataclass
class MatchConfig:
    """Rule constants for one match."""
    hand_size: int = 3
    max_sleeve: int = 1
    deck_size: int = 18

    # Distraction windows, in rounds
    seed_distraction_rounds: int = 1
    item_distraction_rounds: int = 1
    meb_distraction_rounds: int = 1

    table_items: tuple[str, ...] = DEFAULT_TABLE_ITEMS

    starting_seeds: int = 0
    starting_mana: int = 0

    # End the match as soon as the trailing side can no longer catch up
    early_decision: bool = True

    # Deck text overrides; the built-in catalog is used when unset
    player_deck: str | None = None
    opponent_deck: str | None = None

    # Shuffle both piles with this seed; None keeps the catalog order
    shuffle_seed: int | None = None

    def __post_init__(self):
        if self.hand_size < 1:
            raise ValueError("hand_size must be at least 1")
        if self.max_sleeve < 0:
            raise ValueError("max_sleeve cannot be negative")
        if self.deck_size < self.hand_size:
            raise ValueError("deck_size must be at least hand_size")
        self.table_items = tuple(self.table_items)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> MatchConfig:
        """
        Build a config from WIZWAR_* environment variables.

        WIZWAR_HAND_SIZE=4 sets hand_size, WIZWAR_TABLE_ITEMS is a comma
        separated list, WIZWAR_EARLY_DECISION accepts 0/1/true/false.
        Keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _coerce(f.name, raw)
        values.update(overrides)
        return cls(**values)


_INT_FIELDS = {
    "hand_size",
    "max_sleeve",
    "deck_size",
    "seed_distraction_rounds",
    "item_distraction_rounds",
    "meb_distraction_rounds",
    "starting_seeds",
    "starting_mana",
    "shuffle_seed",
}


def _coerce(name: str, raw: str):
    if name in _INT_FIELDS:
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}")
    if name == "table_items":
        return tuple(item.strip() for item in raw.split(",") if item.strip())
    if name == "early_decision":
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return raw

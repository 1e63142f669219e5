"""
Bots module - Scripted opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy, FirstLegalPolicy, HighestCardPolicy: the built-in policies
- Opponent registry: named opponents the player can pick
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy, HighestCardPolicy
from .opponents import Opponent, OPPONENTS, DEFAULT_OPPONENT, get_opponent

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "HighestCardPolicy",
    "Opponent",
    "OPPONENTS",
    "DEFAULT_OPPONENT",
    "get_opponent",
]

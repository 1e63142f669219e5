"""
Engine exceptions.

Rejected player commands are never exceptions: they come back as a failed
CommandResult. The exceptions here signal broken invariants or bad input
data.
"""

from __future__ import annotations


class WizwarError(Exception):
    """Base class for engine errors."""


class HandCapacityError(WizwarError):
    """A hand would exceed its capacity. Always a programming error."""

    def __init__(self, participant: str, capacity: int, attempted: int):
        self.participant = participant
        self.capacity = capacity
        self.attempted = attempted
        super().__init__(
            f"{participant} hand capacity {capacity} exceeded ({attempted} cards)"
        )


class PileExhausted(WizwarError):
    """A participant has no card left to supply (pile and hand empty)."""

    def __init__(self, participant: str):
        self.participant = participant
        super().__init__(f"{participant} has no cards left")


class DeckParseError(WizwarError, ValueError):
    """Malformed deck text."""

    def __init__(self, message: str, token: str | None = None, position: int | None = None):
        self.token = token
        self.position = position
        super().__init__(message)

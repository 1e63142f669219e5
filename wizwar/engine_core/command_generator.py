"""
Command Generator - Generates the legal commands from a match state.

The command generator is used by:
1. Scripted opponents to enumerate their plays
2. UI to show available actions

Design: Generates Command objects, not just command types.
Cheats that need a target are listed with a default target only when
one exists; the UI chooses real targets itself.
"""

from __future__ import annotations
from dataclasses import dataclass

from .cheats import CHEAT_CATALOG, available_cheats, check_cheat, player_window_open
from .command import Command
from .state import CheatKind, MatchState, Participant


@dataclass
class CommandGenerator:
    """Generates legal commands for the side to play."""

    include_cheats: bool = True

    def generate(self, state: MatchState) -> list[Command]:
        """
        Generate all legal commands for the side to play.

        Only a restart is legal once the match is over.
        """
        if state.is_over:
            return [Command.restart()]

        participant = state.to_play
        if participant is None:
            return []

        commands = self._generate_plays(state, participant)
        if participant is Participant.PLAYER:
            commands.extend(self._generate_items(state))
            if self.include_cheats:
                commands.extend(self._generate_cheats(state))
        return commands

    def _generate_plays(self, state: MatchState, participant: Participant) -> list[Command]:
        hand = state.get(participant).hand
        return [Command.play_card(participant, index) for index in range(len(hand))]

    def _generate_items(self, state: MatchState) -> list[Command]:
        if not player_window_open(state):
            return []
        return [Command.use_item(item_id) for item_id in state.items_available]

    def _generate_cheats(self, state: MatchState) -> list[Command]:
        commands = []
        for kind in available_cheats(state):
            command = Command.attempt_cheat(kind, **_default_target(kind))
            target = command.payload.target
            if check_cheat(state, kind, target) is None:
                commands.append(command)
        return commands


def _default_target(kind: CheatKind) -> dict:
    """First-card targets for cheats that need one."""
    if kind in (CheatKind.SLEEVE, CheatKind.DUPLICATE):
        return {"hand_index": 0}
    if kind is CheatKind.SWAP_CARD:
        return {"hand_index": 0, "opponent_index": 0}
    if kind is CheatKind.INVISIBILITY:
        return {"opponent_index": 0}
    return {}


def legal_commands(state: MatchState, include_cheats: bool = True) -> list[Command]:
    """Convenience function to get legal commands."""
    return CommandGenerator(include_cheats=include_cheats).generate(state)


def describe_cheats() -> list[dict]:
    """Catalog of cheats for UIs: id, class, costs and description."""
    return [
        {
            "cheat_id": spec.kind.value,
            "cheat_class": spec.cheat_class.value,
            "seed_cost": spec.seed_cost,
            "mana_cost": spec.mana_cost,
            "description": spec.description,
        }
        for spec in CHEAT_CATALOG.values()
    ]

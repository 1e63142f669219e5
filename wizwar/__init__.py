"""
Wizard's War - Card-battle engine with a cheat system.

A War-style duel between the Player and a scripted Opponent. The player
may cheat (physically or magically) while the Bird or the Magician look
away. The engine is deterministic and step driven; outer layers (sessions,
HTTP bridge, CLI) translate to and from engine commands and events.
"""

__version__ = "0.1.0"

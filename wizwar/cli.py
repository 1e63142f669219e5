"""
Wizard's War CLI - Command-line interface for the engine.

Usage:
    wizwar play [--opponent NAME]      Play a match in the terminal
    wizwar simulate [--matches N]      Run scripted matches and tally results
    wizwar deck <deck_file>            Validate a .deck file
    wizwar serve [--port 8000]         Run the local HTTP bridge
"""

import argparse
import logging
import sys
from collections import Counter

from .bots import DEFAULT_OPPONENT, OPPONENTS, RandomPolicy, get_opponent
from .engine_core import (
    Command,
    CommandType,
    DeckParseError,
    MatchConfig,
    Participant,
    legal_commands,
    parse_deck,
)
from .engine_core.state import CheatKind, MatchState
from .session import GameLoop, SessionManager

PLAY_HELP = """Commands:
  p <i>                    play the card at hand index i
  c <cheat> [i] [j]        attempt a cheat (i = your card, j = opponent card)
  u <item>                 use a table item
  r                        restart the match
  s                        show the table
  q                        quit"""


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Wizard's War - card battles with cheating",
        prog="wizwar",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a match in the terminal")
    _add_match_arguments(play_parser)

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Run scripted matches")
    _add_match_arguments(simulate_parser)
    simulate_parser.add_argument("--matches", "-n", type=int, default=100, help="Number of matches")

    # Deck command
    deck_parser = subparsers.add_parser("deck", help="Validate a .deck file")
    deck_parser.add_argument("deck_file", help="Path to deck file")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the local HTTP bridge")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "deck":
        cmd_deck(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_match_arguments(parser):
    parser.add_argument(
        "--opponent", default=DEFAULT_OPPONENT, choices=sorted(OPPONENTS),
        help="Scripted opponent",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for random play")
    parser.add_argument("--shuffle-seed", type=int, default=None, help="Shuffle both piles")
    parser.add_argument("--player-deck", help="Player .deck file")
    parser.add_argument("--opponent-deck", help="Opponent .deck file")


def _read_deck(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)


def _config_from_args(args) -> MatchConfig:
    overrides = {}
    if args.shuffle_seed is not None:
        overrides["shuffle_seed"] = args.shuffle_seed
    if args.player_deck:
        overrides["player_deck"] = _read_deck(args.player_deck)
    if args.opponent_deck:
        overrides["opponent_deck"] = _read_deck(args.opponent_deck)
    try:
        return MatchConfig.from_env(**overrides)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


def cmd_deck(args):
    """Validate a .deck file."""
    text = _read_deck(args.deck_file)
    try:
        cards = parse_deck(text)
    except DeckParseError as e:
        print(f"Invalid deck: {e}")
        sys.exit(1)

    words = Counter(card.word.value for card in cards if card.word)
    print(f"{len(cards)} cards")
    for word, count in sorted(words.items()):
        print(f"  {word}: {count}")


def cmd_simulate(args):
    """Random player against a scripted opponent, many times."""
    config = _config_from_args(args)
    player_policy = RandomPolicy(args.seed)
    manager = SessionManager()
    tally = Counter()
    rounds = 0

    for i in range(args.matches):
        seed = None if args.seed is None else args.seed + i
        session = manager.create_session(config, opponent=args.opponent, seed=seed)
        loop = GameLoop(session)
        loop.start()
        while not session.match.is_over:
            plays = [
                c for c in legal_commands(session.match, include_cheats=False)
                if c.command_type == CommandType.PLAY_CARD
            ]
            decision = player_policy.select_command(session.match, plays)
            loop.submit(decision.command)
        tally[session.match.result.value] += 1
        rounds += session.match.round_number
        manager.end_session(session.session_id)

    print(f"{args.matches} matches against {args.opponent}")
    for result, count in tally.most_common():
        print(f"  {result}: {count} ({100.0 * count / args.matches:.1f}%)")
    print(f"  average rounds: {rounds / max(args.matches, 1):.1f}")


def _show_table(match: MatchState):
    player, opponent = match.player, match.opponent
    print(f"\n-- Round {match.round_number} ({match.phase.value}) --")
    print(
        f"Opponent: {len(opponent.hand)} in hand, {len(opponent.draw_pile)} in pile, "
        f"{opponent.points} points"
    )
    for entry in match.table:
        print(f"  table: {entry.card} ({entry.owner.value})")
    if match.stake:
        print(f"  stake: {len(match.stake)} face-down card(s)")
    hand = "  ".join(f"[{i}] {card}" for i, card in enumerate(player.hand))
    print(f"You: {hand}")
    print(
        f"     {len(player.draw_pile)} in pile, {player.points} points, "
        f"{player.seeds} seeds, {player.mana} mana, sleeve: {len(player.sleeve)}"
    )
    watching = [
        observer.value for observer, timer in match.distractions.items() if not timer.active
    ]
    print(f"Watching: {', '.join(watching) or 'nobody'}")
    if match.items_available:
        print(f"Items: {', '.join(match.items_available)}")


def _show_events(events):
    for event in events:
        data = event.to_dict()
        event_type = data.pop("type")
        if event_type == "cards_drawn" and data["participant"] == Participant.OPPONENT.value:
            continue
        print(f"  * {event_type}: {data}")


def _parse_play_input(line: str):
    parts = line.split()
    if not parts:
        return None
    verb, rest = parts[0].lower(), parts[1:]
    if verb == "p" and len(rest) == 1:
        return Command.play_card(Participant.PLAYER, int(rest[0]))
    if verb == "c" and rest:
        indexes = [int(value) for value in rest[1:3]]
        hand_index = indexes[0] if indexes else None
        opponent_index = indexes[1] if len(indexes) > 1 else None
        if CheatKind(rest[0]) is CheatKind.INVISIBILITY and len(indexes) == 1:
            hand_index, opponent_index = None, indexes[0]
        return Command.attempt_cheat(rest[0], hand_index=hand_index, opponent_index=opponent_index)
    if verb == "u" and len(rest) == 1:
        return Command.use_item(rest[0])
    if verb == "r":
        return Command.restart()
    return None


def cmd_play(args):
    """Interactive match in the terminal."""
    config = _config_from_args(args)
    manager = SessionManager()
    session = manager.create_session(config, opponent=args.opponent, seed=args.seed)
    loop = GameLoop(session)

    print(f"Wizard's War against the {args.opponent}: {get_opponent(args.opponent).description}")
    print(PLAY_HELP)
    _show_events(loop.start().events)

    while True:
        _show_table(session.match)
        if session.match.is_over:
            winner = session.match.winner.value if session.match.winner else "nobody"
            print(f"Match over: {session.match.result.value} (winner: {winner}). 'r' or 'q'.")
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if line in ("q", "quit"):
            break
        if line in ("s", ""):
            continue
        if line in ("h", "help", "?"):
            print(PLAY_HELP)
            continue

        try:
            command = _parse_play_input(line)
        except ValueError as e:
            print(f"Invalid input: {e}")
            continue
        if command is None:
            print("Unknown command, 'h' for help")
            continue

        result = loop.submit(command)
        _show_events(result.events)
        if not result.success:
            print(f"Rejected ({result.error_code.value}): {result.error}")
        for move in result.opponent_moves:
            print(f"  opponent: {move}")

    manager.end_session(session.session_id, reason="user_quit")


def cmd_serve(args):
    """Run the HTTP bridge with uvicorn."""
    import uvicorn

    uvicorn.run("wizwar.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import sys
from typing import Callable

from rps_commit_reveal import HMAC_ALGORITHM, RandomSource, verify_hmac
from rps_errors import ConfigurationError, RpsError
from rps_help_table import format_table
from rps_protocol import MoveSet
from rps_session import EXIT_INPUT, HELP_INPUT, GameSession

USAGE_EXAMPLES = """\
Please give an odd number (at least 3) of non-repeating strings as moves.

Valid moves:
  hmac-rps play Rock Paper Scissors
  hmac-rps play rock spock paper lizard scissors
  hmac-rps play A B C D E F G"""

RESULT_LINES = {
    "draw": "It's a draw!",
    "win": "You won!",
    "lose": "Computer won!",
}


def main(
    argv: list[str] | None = None,
    *,
    input_fn: Callable[[str], str] = input,
    source: RandomSource | None = None,
) -> int:
    parser = argparse.ArgumentParser(prog="hmac-rps")
    sub = parser.add_subparsers(dest="cmd", required=True)

    play = sub.add_parser("play", help="Play one game against the computer")
    play.add_argument("moves", nargs="+", metavar="MOVE", help="Ordered move labels, e.g. Rock Paper Scissors")

    table = sub.add_parser("table", help="Print the help table for a move set")
    table.add_argument("moves", nargs="+", metavar="MOVE")

    verify = sub.add_parser("verify", help="Check a revealed key against the HMAC shown before your move")
    verify.add_argument("--move", required=True, help="Computer's revealed move")
    verify.add_argument("--key", required=True, help="Revealed HMAC key (hex)")
    verify.add_argument("--hmac", required=True, help="HMAC shown at the start of the game (hex)")

    args = parser.parse_args(argv)

    if args.cmd == "verify":
        try:
            matched = verify_hmac(expected_hmac=args.hmac, move=args.move, secret_key=args.key)
        except RpsError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        if matched:
            print(f"OK: HMAC-{HMAC_ALGORITHM.upper()} of {args.move!r} matches")
            return 0
        print("MISMATCH: the key and move do not reproduce this HMAC")
        return 1

    try:
        move_set = MoveSet.parse(args.moves)
    except ConfigurationError as exc:
        print(f"Error: {exc}\n\n{USAGE_EXAMPLES}", file=sys.stderr)
        return 2

    if args.cmd == "table":
        print(format_table(move_set))
        return 0

    try:
        return _play(move_set, input_fn=input_fn, source=source)
    except RpsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nGame interrupted.", file=sys.stderr)
        return 130
    except EOFError:
        print("\nNo input, exiting.", file=sys.stderr)
        return 1


def _play(move_set: MoveSet, *, input_fn: Callable[[str], str], source: RandomSource | None) -> int:
    game = GameSession(move_set, source)
    digest = game.start()

    print("-------------------------------- RPS Game --------------------------------")
    print(f"HMAC: {digest}")
    _print_available_moves(move_set)

    while True:
        result = game.handle_input(input_fn("Enter your move: "))
        if result.kind != "help":
            break
        print("Help Menu:")
        print(format_table(move_set))

    if result.kind == "exit":
        print("Exiting...")
        return 0

    print(f"Your move: {result.human_move}")
    print(f"Computer's move: {result.computer_move}")
    print(RESULT_LINES[result.outcome])
    print(f"HMAC key: {result.commitment.secret_key}")
    return 0


def _print_available_moves(move_set: MoveSet) -> None:
    print("Available moves:")
    for number, move in enumerate(move_set, start=1):
        print(f"{number} - {move}")
    print(f"{EXIT_INPUT} - Exit")
    print(f"{HELP_INPUT} - Help")


if __name__ == "__main__":
    raise SystemExit(main())

"""
Concental CLI - Command-line interface for the engine.

Usage:
    concental play [--difficulty D] [--seed N]    Play in the terminal
    concental serve [--host H] [--port P]         Run the HTTP API

In-game commands:
    <number>        select the card at that position
    h               use a hint
    r               deal again
    d <difficulty>  deal again at another difficulty
    q               quit
"""

import argparse
import logging
import random
import sys
import time

from .engine_core import (
    CardState,
    Difficulty,
    GameSession,
    GameSnapshot,
    ManualScheduler,
)

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Concental - Memory Matching Game",
        prog="concental",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--difficulty", "-d",
        choices=[d.value for d in Difficulty],
        default=Difficulty.EASY.value,
        help="Grid size and move budget",
    )
    play_parser.add_argument("--seed", type=int, help="Seed for a reproducible deal")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


class TerminalRenderer:
    """Render callback that keeps the latest snapshot for the prompt loop."""

    def __init__(self):
        self.snapshot: GameSnapshot | None = None

    def __call__(self, snapshot: GameSnapshot):
        self.snapshot = snapshot


def render_board(snapshot: GameSnapshot) -> str:
    """Draw the grid and the status line as text."""
    width = len(str(len(snapshot.cards) - 1))
    lines = []
    for row in range(snapshot.rows):
        cells = []
        for card in snapshot.cards[row * snapshot.cols:(row + 1) * snapshot.cols]:
            if card.state == CardState.MATCHED:
                cells.append(f"({card.symbol})")
            elif card.state == CardState.FLIPPED:
                cells.append(f"[{card.symbol}]")
            elif card.hinted:
                cells.append(f"?{card.index:>{width}}")
            else:
                cells.append(f" {card.index:>{width}}")
        lines.append("  ".join(cells))

    lines.append(
        f"Moves {snapshot.move_count}/{snapshot.max_moves} | "
        f"Pairs {snapshot.matched_pair_count}/{snapshot.total_pairs} | "
        f"Time {snapshot.elapsed_seconds}s | "
        f"Hints {snapshot.hints_remaining}"
    )

    result = snapshot.result
    if result:
        lines.append("")
        lines.append(result.headline)
        lines.append(result.message)
        if result.rating:
            lines.append(f"Memory Rating: {result.rating.display}")
        lines.append(f"Final score: {result.score} points")
        lines.append("r to play again, q to quit")
    return "\n".join(lines)


def handle_command(session: GameSession, line: str) -> bool:
    """
    Apply one line of input to the session.

    Returns False when the player asked to quit.
    """
    parts = line.strip().lower().split()
    if not parts:
        return True

    command = parts[0]
    if command in ("q", "quit", "exit"):
        return False
    if command in ("h", "hint"):
        session.use_hint()
    elif command in ("r", "restart"):
        session.restart()
    elif command in ("d", "difficulty") and len(parts) > 1:
        try:
            session.start(parts[1])
        except ValueError as e:
            print(f"Error: {e}")
    elif command.isdigit():
        session.select_card(int(command))
    else:
        print(f"Unknown command: {line.strip()}")
    return True


def cmd_play(args):
    """Play a game in the terminal."""
    scheduler = ManualScheduler()
    renderer = TerminalRenderer()
    session = GameSession(
        rng=random.Random(args.seed),
        scheduler=scheduler,
        on_render=renderer,
    )
    session.start(args.difficulty)
    print(render_board(renderer.snapshot))

    clock = time.monotonic()
    while True:
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        # Catch up on real time: resolves pending turns and ticks the clock
        now = time.monotonic()
        scheduler.advance(now - clock)
        clock = now

        if not handle_command(session, line):
            break
        print(render_board(renderer.snapshot))

    session.close()


def cmd_serve(args):
    """Run the HTTP API under uvicorn."""
    import uvicorn

    logger.info("Serving on %s:%d", args.host, args.port)
    uvicorn.run("concental.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()

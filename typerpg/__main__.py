"""Command line entry: python -m typerpg."""

import argparse
import logging
import sys

from .backend import (
    get_daily_status, get_progress, level_leaderboard, today_wpm_leaderboard,
)
from .database.db import init_db
from .errors import TypeRPGError
from .settings import load_settings


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="typerpg")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("init", help="create the database tables")

    board = sub.add_parser("leaderboard", help="print a leaderboard")
    board.add_argument("kind", choices=["levels", "today-wpm"])
    board.add_argument("--limit", type=int, default=50)
    board.add_argument("--offset", type=int, default=0)

    status = sub.add_parser("status", help="level and daily status of a player")
    status.add_argument("user_id")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    configure_logging(settings.log_level)
    args = _build_parser().parse_args(argv)

    init_db()
    if args.command in (None, "init"):
        print("Typing RPG ready!")
        return 0

    try:
        if args.command == "leaderboard":
            if args.kind == "levels":
                for row in level_leaderboard(args.limit, args.offset):
                    print(f"{row['rank']:>4}  {row['username']:<20} "
                          f"Lv {row['level']:<4} {row['xp']} XP")
            else:
                for row in today_wpm_leaderboard(args.limit, args.offset):
                    print(f"{row['rank']:>4}  {row['username']:<20} {row['wpm']} WPM")
        elif args.command == "status":
            progress = get_progress(args.user_id)
            daily = get_daily_status(args.user_id)
            print(f"Level {progress['level']}  "
                  f"{progress['xp']}/{progress['xp_to_next_level']} XP")
            done = "done" if daily["completed_today"] else "open"
            print(f"Daily challenge: {done}, resets in "
                  f"{daily['time_until_reset_seconds']} s")
    except TypeRPGError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

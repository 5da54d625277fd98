"""Run a tsumogiri seat bot over stdin/stdout mjai JSON lines.

Each input line is an mjai event (or a JSON array of events); each output
line is the bot's reaction, `{"type":"none"}` when it has nothing to do.
Logs go to stderr and, when TRACKER_LOG_DIR is set, to a file.

Usage:
    uv run python bin/run_bot.py 1 < events.mjson
"""

from __future__ import annotations

import argparse
import sys

import structlog

from shared.logging import setup_logging
from tracker.bot import SeatBot
from tracker.logic.exceptions import TrackerError
from tracker.settings import ReplaySettings

logger = structlog.get_logger()

_NONE_REACTION = '{"type":"none"}'


def main() -> None:
    settings = ReplaySettings()
    parser = argparse.ArgumentParser(description="mjai seat bot over stdin/stdout")
    parser.add_argument("seat", type=int, nargs="?", default=settings.player_id, help="absolute seat id")
    args = parser.parse_args()

    setup_logging(log_dir=settings.log_dir, name=f"bot_seat{args.seat}")
    bot = SeatBot(args.seat)

    for line in sys.stdin:
        if not line.strip():
            continue
        try:
            reaction = bot.react(line)
        except TrackerError:
            logger.exception("bot stopped", seat=args.seat)
            sys.exit(1)
        print(reaction or _NONE_REACTION, flush=True)


if __name__ == "__main__":
    main()

"""Replay an mjai log for one seat and report mismatches.

Settings come from TRACKER_* environment variables (see tracker.settings),
command-line flags override them.

Usage:
    uv run python bin/replay_log.py path/to/game.mjson --seat 2
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog

from shared.logging import setup_logging
from tracker.replay import ReplayError, ReplayLoadError, ReplayOptions, load_events_from_file, run_replay
from tracker.settings import ReplaySettings

logger = structlog.get_logger()


def main() -> None:
    settings = ReplaySettings()
    parser = argparse.ArgumentParser(description="Replay an mjai log through a seat tracker")
    parser.add_argument("log", type=Path, help="path to an mjai JSON lines log")
    parser.add_argument("--seat", type=int, default=settings.player_id, help="absolute seat to track")
    parser.add_argument("--lenient", action="store_true", help="collect mismatches instead of stopping")
    args = parser.parse_args()

    setup_logging(log_dir=settings.log_dir, name="replay")
    opts = ReplayOptions(
        strict=settings.strict and not args.lenient,
        check_reactions=settings.check_reactions,
        max_steps=settings.max_steps,
    )

    try:
        events = load_events_from_file(args.log)
        trace = run_replay(events, args.seat, opts)
    except (ReplayLoadError, ReplayError) as exc:
        logger.error("replay failed", log=str(args.log), seat=args.seat, error=str(exc))
        sys.exit(1)

    print(f"seat {trace.player_id}: {len(trace.steps)} events, {trace.hands} hands")
    print(f"final scores: {list(trace.final_scores)}")
    for mismatch in trace.mismatches:
        print(f"  {mismatch}")
    sys.exit(1 if trace.mismatches else 0)


if __name__ == "__main__":
    main()

"""Profile tracker throughput on an mjai log with cProfile.

Run the log through one tracker per seat, measure wall-clock time across
multiple iterations, and save a .prof file for detailed analysis.

Usage:
    uv run python bin/profile_replay.py --iterations 5
    uv run python bin/profile_replay.py --log path/to/game.mjson
"""

from __future__ import annotations

import argparse
import cProfile
import logging
import pstats
import statistics
import sys
import time
from pathlib import Path

from shared.logging import setup_logging
from tracker.replay import ReplayOptions, load_events_from_file, run_replay
from tracker.replay.models import ReplayTrace

DEFAULT_LOG = (
    Path(__file__).resolve().parent.parent
    / "src"
    / "tracker"
    / "tests"
    / "integration"
    / "fixtures"
    / "short_game.mjson"
)
PROFILE_DIR = Path(__file__).resolve().parent.parent / "profiles"
NUM_SEATS = 4


def _run_all_seats(events: list, opts: ReplayOptions) -> list[ReplayTrace]:
    return [run_replay(events, seat, opts) for seat in range(NUM_SEATS)]


def profile_log(log_path: Path, iterations: int, limit: int) -> None:
    """Profile an mjai log with cProfile and timed iterations."""
    events = load_events_from_file(log_path)
    opts = ReplayOptions(strict=False)
    print(f"Loaded log: {log_path.name} ({len(events)} events)")
    print()

    # Suppress logging during profiling to keep output clean
    setup_logging(level=logging.CRITICAL)

    # Warmup + profile (separate from timing to avoid cProfile overhead)
    profiler = cProfile.Profile()
    profiler.enable()
    traces = _run_all_seats(events, opts)
    profiler.disable()

    elapsed_times = []
    for _ in range(iterations):
        start = time.perf_counter()
        _run_all_seats(events, opts)
        elapsed_times.append(time.perf_counter() - start)

    PROFILE_DIR.mkdir(parents=True, exist_ok=True)
    timestamp = time.strftime("%Y-%m-%d_%H-%M-%S")
    profile_file = PROFILE_DIR / f"tracker_{timestamp}.prof"
    profiler.dump_stats(str(profile_file))

    num_steps = sum(len(trace.steps) for trace in traces)
    median_time = statistics.median(elapsed_times)
    print("=" * 60)
    print("PERFORMANCE")
    print("=" * 60)
    print(f"Applied events (all seats): {num_steps}")
    print(f"Hands: {traces[0].hands}")
    print(f"Mismatches: {sum(len(trace.mismatches) for trace in traces)}")
    print(f"Iterations: {len(elapsed_times)}")
    print(f"Median time: {median_time:.3f}s")
    print(f"Throughput: {num_steps / median_time:.0f} events/sec (based on median)")
    print(f"Profile saved to: {profile_file}")
    print()

    stats = pstats.Stats(profiler)
    stats.sort_stats("cumulative")
    print(f"Top {limit} tracker functions by cumulative time:")
    stats.print_stats("tracker/logic", limit)


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile tracker replay with cProfile")
    parser.add_argument("--log", type=Path, default=DEFAULT_LOG, help="path to an mjai JSON lines log")
    parser.add_argument("-n", "--iterations", type=int, default=3, help="number of timed iterations (default: 3)")
    parser.add_argument("--limit", type=int, default=30, help="number of functions to display (default: 30)")
    args = parser.parse_args()

    if not args.log.exists():
        print(f"Log file not found: {args.log}", file=sys.stderr)
        sys.exit(1)

    if args.iterations < 1:
        print("Iterations must be at least 1", file=sys.stderr)
        sys.exit(1)

    profile_log(args.log, args.iterations, args.limit)


if __name__ == "__main__":
    main()

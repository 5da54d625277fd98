"""
Replay adapter for running recorded mjai logs through a seat tracker.

Dependency direction: replay imports from tracker.logic and tracker.messaging.
Tracker logic modules never import from replay.
"""

from tracker.replay.loader import (
    ReplayLoadError,
    load_events_from_file,
    load_events_from_string,
)
from tracker.replay.models import (
    ReplayError,
    ReplayInputAfterGameEndError,
    ReplayInvariantError,
    ReplayOptions,
    ReplayStep,
    ReplayStepLimitError,
    ReplayTrace,
)
from tracker.replay.runner import reaction_from_event, run_replay

__all__ = [
    "ReplayError",
    "ReplayInputAfterGameEndError",
    "ReplayInvariantError",
    "ReplayLoadError",
    "ReplayOptions",
    "ReplayStep",
    "ReplayStepLimitError",
    "ReplayTrace",
    "load_events_from_file",
    "load_events_from_string",
    "reaction_from_event",
    "run_replay",
]

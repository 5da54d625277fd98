"""
Replay data models: options, output trace, and error types.

ReplayTrace records, per event, the candidate set the tracked seat was offered
and whether the seat's own recorded reaction was checked against it.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from tracker.logic.enums import EventType
from tracker.logic.types import ActionCandidate


@dataclass(frozen=True)
class ReplayOptions:
    """Configuration for a replay run."""

    strict: bool = True
    check_reactions: bool = True
    max_steps: int = 100_000


class ReplayStep(BaseModel):
    """One applied event and what the tracked seat could do afterwards."""

    model_config = ConfigDict(frozen=True)

    index: int
    event_type: EventType
    candidates: ActionCandidate
    reaction: dict[str, Any] | None = None  # the seat's own recorded reaction, when checked


class ReplayTrace(BaseModel):
    """Complete output of a replay execution."""

    model_config = ConfigDict(frozen=True)

    player_id: int
    steps: tuple[ReplayStep, ...]
    hands: int
    final_scores: tuple[int, int, int, int]
    mismatches: tuple[str, ...] = ()


class ReplayError(Exception):
    """Base class for replay failures."""


class ReplayStepLimitError(ReplayError):
    """Raised when replay exceeds max allowed steps."""


class ReplayInputAfterGameEndError(ReplayError):
    """Raised when the log contains events after end_game in strict mode."""


class ReplayInvariantError(ReplayError):
    """Raised when the tracker breaks an invariant or rejects a recorded reaction.

    Carries the index of the offending event.
    """

    def __init__(self, step_index: int, message: str) -> None:
        self.step_index = step_index
        super().__init__(f"Replay invariant broken at step {step_index}: {message}")

"""
Replay runner: feeds a recorded mjai event stream through one seat's tracker
and captures a trace.

Every event the tracked seat produced itself (its discards, calls, riichi
declarations and wins) is checked against the candidate set the tracker
offered for the preceding decision. A recorded reaction outside that set, or
any tracker invariant breach, is a replay invariant failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from tracker.logic.enums import EventType
from tracker.logic.exceptions import TrackerFinishedError, TrackerInvariantError
from tracker.logic.state import PlayerState
from tracker.logic.types import ActionCandidate
from tracker.messaging.actions import dump_action, parse_action
from tracker.messaging.events import dump_event
from tracker.replay.models import (
    ReplayInputAfterGameEndError,
    ReplayInvariantError,
    ReplayOptions,
    ReplayStep,
    ReplayStepLimitError,
    ReplayTrace,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tracker.logic.settings import TrackerSettings
    from tracker.messaging.actions import Action
    from tracker.messaging.events import Event

logger = structlog.get_logger()

# Event types that are a seat's own reaction to its last decision.
_REACTION_EVENTS = frozenset(
    {
        EventType.DAHAI,
        EventType.CHI,
        EventType.PON,
        EventType.DAIMINKAN,
        EventType.KAKAN,
        EventType.ANKAN,
        EventType.REACH,
        EventType.HORA,
    },
)

_ACTION_FIELDS = ("type", "actor", "target", "pai", "consumed", "tsumogiri")


def reaction_from_event(event: Event, player_id: int) -> Action | None:
    """Rebuild the reaction a seat sent from the event it turned into, if the seat is `player_id`."""
    if event.type not in _REACTION_EVENTS or getattr(event, "actor", None) != player_id:
        return None
    data = dump_event(event)
    return parse_action({key: data[key] for key in _ACTION_FIELDS if key in data})


def _normalize(action: Action) -> dict[str, Any]:
    """Order-insensitive form of an action for comparison."""
    data = dump_action(action)
    if "consumed" in data:
        data["consumed"] = sorted(data["consumed"])
    if data.get("type") == EventType.HORA:
        data.pop("pai", None)
    return data


def _is_offered(action: Action, cans: ActionCandidate, player_id: int) -> bool:
    wanted = _normalize(action)
    return any(_normalize(allowed) == wanted for allowed in cans.to_actions(player_id))


def run_replay(
    events: Iterable[Event],
    player_id: int,
    opts: ReplayOptions | None = None,
    *,
    settings: TrackerSettings | None = None,
) -> ReplayTrace:
    """
    Run a recorded event stream through a fresh tracker for one seat.

    In strict mode the first mismatch raises; otherwise mismatches are
    collected in the trace.
    """
    opts = opts or ReplayOptions()
    state = PlayerState(player_id, settings)
    log = logger.bind(player_id=player_id)

    steps: list[ReplayStep] = []
    mismatches: list[str] = []
    offered = ActionCandidate()
    hands = 0

    for index, event in enumerate(events):
        if index >= opts.max_steps:
            raise ReplayStepLimitError(f"Replay exceeded max steps ({opts.max_steps})")

        reaction = reaction_from_event(event, player_id) if opts.check_reactions else None
        if reaction is not None and not _is_offered(reaction, offered, player_id):
            message = f"recorded {reaction.type} {dump_action(reaction)} was not among the offered actions"
            if opts.strict:
                raise ReplayInvariantError(index, message)
            log.warning("replay mismatch", step=index, detail=message)
            mismatches.append(f"step {index}: {message}")

        try:
            cans = state.apply(event)
        except TrackerFinishedError as exc:
            if opts.strict:
                raise ReplayInputAfterGameEndError(f"Event remains after game end at step {index}") from exc
            break
        except TrackerInvariantError as exc:
            raise ReplayInvariantError(index, str(exc)) from exc

        if event.type == EventType.START_KYOKU:
            hands += 1
        if cans.can_act or reaction is not None:
            offered = cans
        steps.append(
            ReplayStep(
                index=index,
                event_type=event.type,
                candidates=cans,
                reaction=dump_action(reaction) if reaction is not None else None,
            ),
        )

    scores = tuple(state.scores[state.rel(seat)] for seat in range(len(state.scores)))
    log.info("replay finished", steps=len(steps), hands=hands, mismatches=len(mismatches))
    return ReplayTrace(
        player_id=player_id,
        steps=tuple(steps),
        hands=hands,
        final_scores=scores,
        mismatches=tuple(mismatches),
    )

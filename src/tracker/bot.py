"""
mjai bot bridge for one seat.

SeatBot reads mjai JSON lines, keeps a PlayerState current and answers with
the agent's chosen reaction. A line may hold one event or a JSON array of
events; the bot answers once, after the last one.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog

from tracker.agents import TsumogiriAgent
from tracker.logic.enums import EventType
from tracker.logic.exceptions import MalformedEventError, RuleViolation
from tracker.logic.state import PlayerState
from tracker.logic.types import ActionCandidate
from tracker.messaging.actions import dump_action
from tracker.messaging.events import parse_event

if TYPE_CHECKING:
    from tracker.agents import Agent
    from tracker.logic.settings import TrackerSettings
    from tracker.messaging.events import Event

logger = structlog.get_logger()


def _parse_line(line: str | bytes) -> list[Event]:
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MalformedEventError(f"malformed JSON {line!r}: {exc}") from exc
    items = data if isinstance(data, list) else [data]
    if not items or not all(isinstance(item, dict) for item in items):
        raise MalformedEventError(f"expected an event object or a list of them, got {line!r}")
    return [parse_event(item) for item in items]


class SeatBot:
    """A tracked seat plus a decision agent, speaking mjai JSON lines."""

    def __init__(
        self,
        player_id: int,
        agent: Agent | None = None,
        settings: TrackerSettings | None = None,
    ) -> None:
        self.player_id = player_id
        self.state = PlayerState(player_id, settings)
        self.agent: Agent = agent or TsumogiriAgent()
        self.hand_log: list[Event] = []  # events since start_kyoku, handed to the agent

    def react(self, line: str | bytes, *, can_act: bool = True) -> str | None:
        """
        Apply the event(s) in one line and return the JSON reaction.

        Returns None when the seat has nothing to decide.
        """
        events = _parse_line(line)
        with structlog.contextvars.bound_contextvars(player_id=self.player_id):
            cans = ActionCandidate()
            for event in events:
                cans = self.state.apply(event, can_act=can_act)
                if event.type in (EventType.START_KYOKU, EventType.END_KYOKU):
                    self.hand_log.clear()
                if event.type != EventType.END_KYOKU:
                    self.hand_log.append(event)

            if not cans.can_act:
                return None

            action = self.agent.get_action(self.state, cans, self.hand_log)
            try:
                self.state.validate(action)
            except RuleViolation:
                logger.exception("agent chose an illegal action", action=dump_action(action))
                raise
            return json.dumps(dump_action(action), separators=(",", ":"))

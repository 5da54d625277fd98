"""
Decision layer for a tracked seat.

Tsumogiri agent: always discards the drawn tile and passes on every call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from tracker.messaging.actions import DahaiAction, NoneAction

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tracker.logic.state import PlayerState
    from tracker.logic.types import ActionCandidate
    from tracker.messaging.actions import Action
    from tracker.messaging.events import Event


class Agent(Protocol):
    """
    Anything that turns a candidate set into one mjai reaction.

    `hand_log` holds every event of the current hand so far, oldest first.
    """

    def get_action(self, state: PlayerState, cans: ActionCandidate, hand_log: Sequence[Event]) -> Action: ...


class TsumogiriAgent:
    """
    Agent with a fixed, deterministic policy.

    All decision methods are on this class so subclasses can override them.
    The base implementation discards the drawn tile (or the first legal tile
    after a call) and passes on everything else.
    """

    def should_call(self, state: PlayerState, cans: ActionCandidate) -> Action | None:  # noqa: ARG002
        """Choose a non-discard reaction (call, win, riichi, abortive draw), or None to decline."""
        return None

    def select_discard(self, state: PlayerState, cans: ActionCandidate) -> DahaiAction:
        """
        Select a tile to discard.

        Discards the drawn tile when it is legal, otherwise the first legal tile.
        """
        if not cans.discard_tiles:
            raise ValueError("cannot select a discard when no discard is legal")
        tile = cans.tsumo_tile if cans.tsumo_tile in cans.discard_tiles else cans.discard_tiles[0]
        return DahaiAction(actor=state.player_id, pai=tile, tsumogiri=tile == cans.tsumo_tile)

    def get_action(
        self,
        state: PlayerState,
        cans: ActionCandidate,
        hand_log: Sequence[Event] = (),  # noqa: ARG002
    ) -> Action:
        """Determine the reaction to the last event."""
        action = self.should_call(state, cans)
        if action is not None:
            return action
        if cans.can_discard:
            return self.select_discard(state, cans)
        return NoneAction()

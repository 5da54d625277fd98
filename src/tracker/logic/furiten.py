"""
Furiten bookkeeping for the tracked seat.

Three flags are kept:
- at_furiten: permanent for the rest of the hand (own discarded wait, or a
  wait passed while riichi is accepted).
- same_cycle_furiten: a wait passed uncalled; lasts until the next own discard.
- to_mark_same_cycle_furiten: set by the event exposing a wait and promoted at
  the following event, so ron on that very tile is still offered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from tracker.logic.state import PlayerState

logger = structlog.get_logger()


def update_permanent_furiten(state: PlayerState) -> None:
    """Set permanent furiten if any current wait is among the seat's own discards."""
    if state.at_furiten:
        return
    if any(wait and discarded for wait, discarded in zip(state.waits, state.discarded_tiles, strict=True)):
        state.at_furiten = True
        logger.debug("permanent furiten", player_id=state.player_id)


def mark_exposed_wait(state: PlayerState, kind: int) -> None:
    """Defer same-cycle furiten when another seat exposes one of the waits."""
    if state.waits[kind]:
        state.to_mark_same_cycle_furiten = True


def promote_deferred_furiten(state: PlayerState) -> None:
    """Turn a deferred mark into same-cycle furiten (permanent while riichi is accepted)."""
    if not state.to_mark_same_cycle_furiten:
        return
    state.to_mark_same_cycle_furiten = False
    state.same_cycle_furiten = True
    if state.riichi_accepted[0]:
        state.at_furiten = True
        logger.debug("riichi furiten", player_id=state.player_id)


def clear_same_cycle_furiten(state: PlayerState) -> None:
    state.same_cycle_furiten = False
    state.to_mark_same_cycle_furiten = False


def blocks_ron(state: PlayerState) -> bool:
    """Ron is refused under permanent or same-cycle furiten; tsumo never is."""
    return state.at_furiten or state.same_cycle_furiten


def is_furiten(state: PlayerState) -> bool:
    return state.at_furiten or state.same_cycle_furiten or state.to_mark_same_cycle_furiten

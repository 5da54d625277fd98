"""
Riichi rules for the tracked seat.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tracker.logic.tiles import NUM_TILE_TYPES
from tracker.logic.win import get_waits

if TYPE_CHECKING:
    from tracker.logic.state import PlayerState

TENPAI = 0


def can_declare_riichi(state: PlayerState) -> bool:
    """
    Check if the tracked seat can declare riichi on its current draw.

    Requirements:
    - Must not already have declared riichi
    - Must have a fully concealed hand (closed kans allowed)
    - Must have at least riichi_cost points
    - Must have at least min_wall_for_riichi tiles left in the wall
    - Some discard must leave the hand in tenpai
    """
    settings = state.settings

    if state.riichi_declared[0]:
        return False

    if not state.is_menzen:
        return False

    if state.scores[0] < settings.riichi_cost:
        return False

    if state.tiles_left < settings.min_wall_for_riichi:
        return False

    return any(shanten == TENPAI for shanten in state.discard_shanten)


def riichi_discard_forbidden(state: PlayerState) -> list[bool]:
    """After declaring, every discard that breaks tenpai is forbidden."""
    return [shanten != TENPAI for shanten in state.discard_shanten]


def riichi_lock_forbidden(state: PlayerState) -> list[bool]:
    """Once riichi is accepted, only the drawn kind may leave the hand."""
    drawn = state.last_self_tsumo
    return [drawn is None or kind != drawn.kind for kind in range(NUM_TILE_TYPES)]


def can_ankan_in_riichi(state: PlayerState, kind: int) -> bool:
    """
    A closed kan after riichi is accepted is allowed for the drawn kind only,
    and only if it leaves the waits unchanged.
    """
    if not state.settings.allow_ankan_in_riichi:
        return False
    drawn = state.last_self_tsumo
    if drawn is None or drawn.kind != kind:
        return False
    after_kan = list(state.tehai)
    after_kan[kind] = 0
    return get_waits(after_kan) == state.waits


def forfeits_double_riichi(state: PlayerState, caller: int) -> bool:
    """Whether a call by the given relative seat ends the tracked seat's double riichi chance."""
    return caller == 0 or state.settings.double_riichi_forfeit_on_any_call

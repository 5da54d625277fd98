"""
Abortive draw conditions the tracked seat can declare.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tracker.logic.tiles import is_terminal_or_honor

if TYPE_CHECKING:
    from tracker.logic.state import PlayerState


def count_terminal_honor_types(tehai: list[int]) -> int:
    """
    Count the number of different terminal/honor tile types in a hand.
    """
    return sum(1 for kind, count in enumerate(tehai) if count > 0 and is_terminal_or_honor(kind))


def can_call_kyuushu_kyuuhai(state: PlayerState) -> bool:
    """
    Check if the tracked seat can declare kyuushu kyuuhai (nine terminals abortive draw).

    Requirements:
    - First draw of the hand for this seat (no own discards, not a rinshan draw)
    - No call of any kind anywhere at the table yet
    - Hand contains kyuushu_min_types or more different terminal/honor tile types
    """
    settings = state.settings
    if not settings.has_kyuushu_kyuuhai:
        return False

    if state.kawa[0] or state.at_rinshan or state.any_call_made:
        return False

    return count_terminal_honor_types(state.tehai) >= settings.kyuushu_min_types


def is_four_kans_abortive(state: PlayerState) -> bool:
    """
    Check if four kans on the table, declared by different seats, allow an abortive draw.

    If one seat holds all 4 kans the hand continues (suukantsu is possible).
    """
    settings = state.settings
    if not settings.has_suukaikan:
        return False

    seats_with_kans = sum(1 for count in state.kans_per_seat if count > 0)
    return state.kans_on_board >= settings.max_kans_per_round and seats_with_kans >= settings.min_players_for_kan_abort

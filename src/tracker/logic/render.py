"""
Human-readable snapshot of a PlayerState, for debugging and log inspection.

The layout is not a stable format. Kawa entries carry marks: "t" tsumogiri,
"*" riichi declaration tile, "^" taken by a call.
"""

from __future__ import annotations

from itertools import zip_longest
from typing import TYPE_CHECKING

from tracker.logic.candidates import resolve_candidates
from tracker.logic.tiles import MAX_TILE_COPIES, NUM_TILE_TYPES, Tile, kind_to_mjai, tiles_to_string

if TYPE_CHECKING:
    from tracker.logic.state import PlayerState

SEAT_NAMES = ("self", "shimocha", "toimen", "kamicha")
COLUMN_WIDTH = 10


def _tiles(tiles: list[Tile]) -> str:
    return " ".join(str(t) for t in tiles) if tiles else "-"


def _kinds(kinds: list[int]) -> str:
    return " ".join(kind_to_mjai(k) for k in kinds) if kinds else "-"


def _bitset(flags: list[bool]) -> str:
    return _kinds([kind for kind in range(NUM_TILE_TYPES) if flags[kind]])


def render_snapshot(state: PlayerState) -> str:
    """Render the state as a fixed multi-line report."""
    cans = resolve_candidates(state)
    melds = "; ".join(_tiles(group) for group in state.fuuro_overview[0]) or "-"
    ankans = " ".join(kind_to_mjai(k) * MAX_TILE_COPIES for k in state.ankan_overview[0]) or "-"
    enabled = [
        name
        for name, flag in (
            ("discard", cans.can_discard),
            ("chi", cans.can_chi),
            ("pon", cans.can_pon),
            ("daiminkan", cans.can_daiminkan),
            ("ankan", cans.can_ankan),
            ("kakan", cans.can_kakan),
            ("riichi", cans.can_riichi),
            ("tsumo", cans.can_tsumo_agari),
            ("ron", cans.can_ron_agari),
            ("ryukyoku", cans.can_ryukyoku),
            ("pass", cans.can_pass),
        )
        if flag
    ]

    lines = [
        f"player id: {state.player_id}",
        f"oya: {state.oya}",
        f"kyoku: {kind_to_mjai(state.bakaze)}{state.kyoku}-{state.honba} (kyotaku {state.kyotaku})",
        f"jikaze: {kind_to_mjai(state.jikaze)}",
        f"scores: {state.scores} (rank {state.rank + 1}{', all last' if state.is_all_last else ''})",
        f"tehai: {tiles_to_string(state.tehai, state.akas_in_hand) or '-'}",
        f"fuuro: {melds}",
        f"ankan: {ankans}",
        f"tehai len: {state.hand_length}",
        f"shanten: {state.shanten}",
        f"furiten: {state.is_furiten}",
        f"waits: {_bitset(state.waits)}",
        f"dora indicators: {_tiles(state.dora_indicators)}",
        f"doras owned: {state.doras_owned}",
        f"doras seen: {state.doras_seen}",
        f"action candidates: {', '.join(enabled) or '-'}",
        f"last self tsumo: {state.last_self_tsumo or '-'}",
        f"last kawa tile: {state.last_kawa_tile or '-'}",
        f"tiles left: {state.tiles_left}",
        "",
        "".join(name.ljust(COLUMN_WIDTH) for name in SEAT_NAMES).rstrip(),
    ]
    for row in zip_longest(*state.kawa, fillvalue=None):
        cells = ["" if record is None else str(record) for record in row]
        lines.append("".join(cell.ljust(COLUMN_WIDTH) for cell in cells).rstrip())
    return "\n".join(lines)

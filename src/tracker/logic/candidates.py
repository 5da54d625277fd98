"""
Action candidate resolver.

`resolve_candidates` is a pure function of the tracked state: it reads the
decision window opened by the last applied event and reports every action
the tracked seat may take. It never ranks or picks among them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tracker.logic.abortive import can_call_kyuushu_kyuuhai, is_four_kans_abortive
from tracker.logic.enums import DecisionWindow
from tracker.logic.furiten import blocks_ron
from tracker.logic.melds import (
    TILES_FOR_OPEN_KAN,
    ankan_consumed,
    find_chi_combinations,
    find_daiminkan_consumed,
    find_pon_combinations,
    get_kuikae_kinds,
    leaves_legal_discard,
)
from tracker.logic.riichi import can_ankan_in_riichi, can_declare_riichi
from tracker.logic.tiles import RED_FIVE_KINDS, Tile
from tracker.logic.types import ActionCandidate, KakanOption
from tracker.logic.win import is_agari

if TYPE_CHECKING:
    from tracker.logic.state import PlayerState

UPSTREAM_SEAT = 3


def resolve_candidates(state: PlayerState) -> ActionCandidate:
    """Return the legal action set for the tracked seat's current decision window."""
    window = state.window
    if window == DecisionWindow.SELF_DRAW:
        return _self_draw_candidates(state)
    if window in (DecisionWindow.AFTER_CALL, DecisionWindow.RIICHI_DISCARD):
        return ActionCandidate(
            discard_tiles=tuple(_allowed_discards(state)),
            tsumo_tile=state.last_self_tsumo,
            tedashi_drawn_copy=_holds_drawn_twice(state),
        )
    if window == DecisionWindow.DISCARD_RESPONSE:
        return _discard_response_candidates(state)
    if window == DecisionWindow.KAN_RESPONSE:
        return _kan_response_candidates(state)
    return ActionCandidate()


def _allowed_discards(state: PlayerState) -> list[Tile]:
    return [tile for tile in state.concealed_tiles() if not state.forbidden_tiles[tile.kind]]


def _holds_drawn_twice(state: PlayerState) -> bool:
    drawn = state.last_self_tsumo
    return drawn is not None and not state.riichi_accepted[0] and state.holds(drawn, 2)


def can_declare_kan(state: PlayerState) -> bool:
    """Table-wide kan limits: fewer than four kans so far and a tile left to replace."""
    settings = state.settings
    return state.kans_on_board < settings.max_kans_per_round and state.tiles_left >= settings.min_wall_for_kan


def _self_draw_candidates(state: PlayerState) -> ActionCandidate:
    drawn = state.last_self_tsumo
    if state.riichi_accepted[0]:
        discards = [drawn] if drawn is not None else []
    else:
        discards = _allowed_discards(state)

    ankan_options: list[tuple[Tile, Tile, Tile, Tile]] = []
    kakan_options: list[KakanOption] = []
    if can_declare_kan(state):
        for kind in state.ankan_candidates:
            if state.riichi_accepted[0] and not can_ankan_in_riichi(state, kind):
                continue
            a, b, c, d = _ankan_tiles(state, kind)
            ankan_options.append((a, b, c, d))
        if not state.riichi_declared[0]:
            kakan_options = [_kakan_option(state, kind) for kind in state.kakan_candidates]

    return ActionCandidate(
        tsumo_tile=drawn,
        tedashi_drawn_copy=_holds_drawn_twice(state),
        discard_tiles=tuple(discards),
        ankan_options=tuple(ankan_options),
        kakan_options=tuple(kakan_options),
        can_riichi=can_declare_riichi(state),
        can_tsumo_agari=is_agari(state.tehai),
        can_kyuushu_kyuuhai=can_call_kyuushu_kyuuhai(state),
        can_suukaikan=is_four_kans_abortive(state),
    )


def _ankan_tiles(state: PlayerState, kind: int) -> tuple[Tile, ...]:
    if kind in RED_FIVE_KINDS and not state.akas_in_hand[RED_FIVE_KINDS.index(kind)]:
        return tuple([Tile(kind)] * 4)
    return ankan_consumed(kind)


def _kakan_option(state: PlayerState, kind: int) -> KakanOption:
    pon = next(g for g in state.fuuro_overview[0] if len(g) == TILES_FOR_OPEN_KAN and g[0].kind == kind)
    added = next(tile for tile in state.concealed_tiles() if tile.kind == kind)
    a, b, c = pon
    return KakanOption(pai=added, consumed=(a, b, c))


def _discard_response_candidates(state: PlayerState) -> ActionCandidate:
    tile = state.last_kawa_tile
    target = state.last_discarder
    if tile is None or target is None:
        return ActionCandidate()

    can_ron = state.waits[tile.kind] and not blocks_ron(state)

    chi: list[tuple[Tile, Tile]] = []
    pon: list[tuple[Tile, Tile]] = []
    daiminkan = None
    if not state.riichi_declared[0] and state.tiles_left > 0:
        if target == UPSTREAM_SEAT:
            chi = [
                consumed
                for consumed in find_chi_combinations(tile, state.tehai, state.akas_in_hand)
                if _call_keeps_discard(state, tile, consumed, chi=True)
            ]
        pon = [
            consumed
            for consumed in find_pon_combinations(tile, state.tehai, state.akas_in_hand)
            if _call_keeps_discard(state, tile, consumed, chi=False)
        ]
        if can_declare_kan(state):
            daiminkan = find_daiminkan_consumed(tile, state.tehai, state.akas_in_hand)

    return ActionCandidate(
        target_actor=target,
        called_tile=tile,
        chi_consumed=tuple(chi),
        pon_consumed=tuple(pon),
        daiminkan_consumed=daiminkan,
        can_ron_agari=can_ron,
        can_suukaikan=is_four_kans_abortive(state),
    )


def _call_keeps_discard(state: PlayerState, called: Tile, consumed: tuple[Tile, Tile], *, chi: bool) -> bool:
    """With kuikae, a chi or pon must leave at least one discardable tile."""
    settings = state.settings
    if not settings.has_kuikae:
        return True
    forbidden = get_kuikae_kinds(called, consumed, chi=chi, suji=settings.has_kuikae_suji)
    return leaves_legal_discard(state.tehai, consumed, forbidden)


def _kan_response_candidates(state: PlayerState) -> ActionCandidate:
    tile = state.last_kan_tile
    target = state.last_kan_actor
    can_ron = (
        state.chankan_chance and tile is not None and state.waits[tile.kind] and not blocks_ron(state)
    )
    return ActionCandidate(
        target_actor=target if target is not None else 0,
        called_tile=tile if can_ron else None,
        can_ron_agari=can_ron,
        can_suukaikan=is_four_kans_abortive(state),
    )

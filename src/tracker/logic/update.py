"""
Per-event state transitions for the tracked seat.

Each handler mutates the PlayerState for one mjai event type and sets the
decision window the resolver reads. Handlers never derive candidates
themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from tracker.logic.enums import DecisionWindow, EventType, MeldType
from tracker.logic.exceptions import TrackerInvariantError
from tracker.logic.furiten import clear_same_cycle_furiten, mark_exposed_wait, promote_deferred_furiten
from tracker.logic.melds import TILES_FOR_OPEN_KAN, get_kuikae_kinds
from tracker.logic.riichi import forfeits_double_riichi, riichi_discard_forbidden, riichi_lock_forbidden
from tracker.logic.settings import NUM_PLAYERS
from tracker.logic.tiles import NUM_TILE_TYPES, Tile, sort_tiles

if TYPE_CHECKING:
    from collections.abc import Callable

    from tracker.logic.state import PlayerState
    from tracker.messaging.events import (
        AnkanEvent,
        ChiEvent,
        DahaiEvent,
        DaiminkanEvent,
        DoraEvent,
        EndGameEvent,
        EndKyokuEvent,
        Event,
        HoraEvent,
        KakanEvent,
        PonEvent,
        ReachAcceptedEvent,
        ReachEvent,
        RyukyokuEvent,
        StartGameEvent,
        StartKyokuEvent,
        TsumoEvent,
    )

logger = structlog.get_logger()

# events that only make sense between start_kyoku and the end of the hand
_IN_HAND_EVENTS = frozenset(
    {
        EventType.TSUMO,
        EventType.DAHAI,
        EventType.CHI,
        EventType.PON,
        EventType.DAIMINKAN,
        EventType.KAKAN,
        EventType.ANKAN,
        EventType.DORA,
        EventType.REACH,
        EventType.REACH_ACCEPTED,
    },
)


def apply_event(state: PlayerState, event: Event) -> None:
    """Apply one event to the state."""
    if event.type in _IN_HAND_EVENTS and not state.hand_in_progress:
        raise TrackerInvariantError(f"{event.type} event outside of a hand")

    promote_deferred_furiten(state)
    state.window = DecisionWindow.NONE
    state.chankan_chance = False

    _EVENT_HANDLERS[event.type](state, event)


def _on_start_game(state: PlayerState, event: StartGameEvent) -> None:
    if event.id is not None and event.id != state.player_id:
        raise TrackerInvariantError(f"start_game for seat {event.id} sent to tracker of seat {state.player_id}")
    state.reset_game()


def _on_start_kyoku(state: PlayerState, event: StartKyokuEvent) -> None:
    dealt = event.tehais[state.player_id]
    if any(tile is None for tile in dealt):
        raise TrackerInvariantError(f"dealt hand of seat {state.player_id} is hidden")

    state.reset_hand()
    state.hand_in_progress = True
    state.load_round(
        bakaze=event.bakaze.kind,
        kyoku=event.kyoku,
        honba=event.honba,
        kyotaku=event.kyotaku,
        oya=event.oya,
        scores=event.scores,
    )
    state.add_dora_indicator(event.dora_marker)
    for tile in dealt:
        if tile is not None:
            state.add_to_hand(tile)
    state.update_shanten()
    state.update_waits()
    logger.debug(
        "hand started",
        player_id=state.player_id,
        kyoku=state.kyoku,
        honba=state.honba,
        shanten=state.shanten,
    )


def _on_tsumo(state: PlayerState, event: TsumoEvent) -> None:
    if state.tiles_left <= 0:
        raise TrackerInvariantError("draw from an exhausted wall")
    state.tiles_left -= 1

    if state.rel(event.actor) != 0:
        return
    if event.pai is None:
        raise TrackerInvariantError(f"own draw of seat {state.player_id} is hidden")

    state.add_to_hand(event.pai)
    state.last_self_tsumo = event.pai
    state.update_shanten()
    state.update_kan_candidates()
    if state.riichi_accepted[0]:
        state.forbidden_tiles = riichi_lock_forbidden(state)
    else:
        state.forbidden_tiles = [False] * NUM_TILE_TYPES
    state.window = DecisionWindow.SELF_DRAW


def _on_dahai(state: PlayerState, event: DahaiEvent) -> None:
    rel = state.rel(event.actor)
    tile = event.pai

    record_meld = None
    if state.pending_call is not None and state.pending_call.actor == rel:
        record_meld = state.pending_call.tiles
    kans_before: tuple[Tile, ...] = ()
    if state.pending_kan is not None and state.pending_kan.actor == rel:
        kans_before = tuple(state.pending_kan.tiles)
    state.pending_call = None
    state.pending_kan = None

    state.push_discard(
        rel,
        tile,
        tsumogiri=event.tsumogiri,
        riichi=state.riichi_declared[rel] and not state.riichi_accepted[rel],
        meld_before=record_meld,
        kans_before=kans_before,
    )
    state.last_kawa_tile = tile
    state.last_discarder = rel

    if rel != 0:
        state.witness_tile(tile)
        state.window = DecisionWindow.DISCARD_RESPONSE
        mark_exposed_wait(state, tile.kind)
        return

    state.remove_from_hand(tile)
    state.discarded_tiles[tile.kind] = True
    clear_same_cycle_furiten(state)
    state.at_ippatsu = False
    state.can_w_riichi = False
    state.at_rinshan = False
    state.last_self_tsumo = None
    state.forbidden_tiles = [False] * NUM_TILE_TYPES
    state.ankan_candidates = []
    state.kakan_candidates = []
    state.update_shanten()
    state.update_waits()


def _mark_called(state: PlayerState, target: int, tile: Tile) -> None:
    kawa = state.kawa[target]
    if state.last_discarder != target or not kawa or kawa[-1].tile != tile:
        raise TrackerInvariantError(f"call on {tile} does not match the last discard of seat {target}")
    kawa[-1].called = True


def _record_call(state: PlayerState, actor: int) -> None:
    state.any_call_made = True
    state.at_ippatsu = False
    if forfeits_double_riichi(state, actor):
        state.can_w_riichi = False


def _on_open_meld(state: PlayerState, event: ChiEvent | PonEvent | DaiminkanEvent, meld_type: MeldType) -> None:
    actor = state.rel(event.actor)
    _mark_called(state, state.rel(event.target), event.pai)
    _record_call(state, actor)
    state.push_meld(actor, sort_tiles([event.pai, *event.consumed]))

    if actor != 0:
        for tile in event.consumed:
            state.witness_tile(tile)
    else:
        for tile in event.consumed:
            state.remove_from_hand(tile)
        state.is_menzen = False
    # the called tiles stay owned inside the meld
    state.doras_owned[actor] += sum(state.dora_weight(t) for t in (event.pai, *event.consumed))

    if meld_type == MeldType.DAIMINKAN:
        state.add_kan(actor)
        state.push_pending_kan(actor, event.pai)
        if actor == 0:
            state.minkans.append(event.pai.kind)
            state.at_rinshan = True
            state.update_shanten()
            state.update_waits()
        else:
            state.window = DecisionWindow.KAN_RESPONSE
        return

    kuikae: list[int] = []
    if actor == 0:
        settings = state.settings
        if settings.has_kuikae:
            kuikae = get_kuikae_kinds(
                event.pai,
                event.consumed,
                chi=meld_type == MeldType.CHI,
                suji=settings.has_kuikae_suji,
            )
        if meld_type == MeldType.CHI:
            state.chis.append(min(event.pai.kind, *(t.kind for t in event.consumed)))
        else:
            state.pons.append(event.pai.kind)
        state.forbidden_tiles = [kind in kuikae for kind in range(NUM_TILE_TYPES)]
        state.update_shanten()
        state.window = DecisionWindow.AFTER_CALL
    state.set_pending_call(actor, meld_type, (event.pai, *event.consumed), kuikae)


def _on_chi(state: PlayerState, event: ChiEvent) -> None:
    _on_open_meld(state, event, MeldType.CHI)


def _on_pon(state: PlayerState, event: PonEvent) -> None:
    _on_open_meld(state, event, MeldType.PON)


def _on_daiminkan(state: PlayerState, event: DaiminkanEvent) -> None:
    _on_open_meld(state, event, MeldType.DAIMINKAN)


def _on_kakan(state: PlayerState, event: KakanEvent) -> None:
    actor = state.rel(event.actor)
    kind = event.pai.kind
    group = next(
        (g for g in state.fuuro_overview[actor] if len(g) == TILES_FOR_OPEN_KAN and all(t.kind == kind for t in g)),
        None,
    )
    if group is None:
        raise TrackerInvariantError(f"kakan on {event.pai} without a matching pon for seat {actor}")
    group.append(event.pai)
    _record_call(state, actor)
    state.add_kan(actor)
    state.push_pending_kan(actor, event.pai)

    if actor == 0:
        state.remove_from_hand(event.pai)
        state.doras_owned[0] += state.dora_weight(event.pai)
        state.pons.remove(kind)
        state.minkans.append(kind)
        state.at_rinshan = True
        state.update_shanten()
        state.update_waits()
        return

    state.witness_tile(event.pai)
    state.doras_owned[actor] += state.dora_weight(event.pai)
    state.last_kan_tile = event.pai
    state.last_kan_actor = actor
    state.chankan_chance = True
    state.window = DecisionWindow.KAN_RESPONSE
    mark_exposed_wait(state, kind)


def _on_ankan(state: PlayerState, event: AnkanEvent) -> None:
    actor = state.rel(event.actor)
    kind = event.consumed[0].kind
    state.push_ankan(actor, kind)
    _record_call(state, actor)
    state.add_kan(actor)
    state.push_pending_kan(actor, event.consumed[0].deaka())

    if actor == 0:
        for tile in event.consumed:
            state.remove_from_hand(tile)
        state.doras_owned[0] += sum(state.dora_weight(t) for t in event.consumed)
        state.ankans.append(kind)
        state.at_rinshan = True
        state.update_shanten()
        state.update_waits()
        return

    for tile in event.consumed:
        state.witness_tile(tile)
    state.doras_owned[actor] += sum(state.dora_weight(t) for t in event.consumed)
    state.last_kan_tile = event.consumed[0]
    state.last_kan_actor = actor
    state.window = DecisionWindow.KAN_RESPONSE


def _on_dora(state: PlayerState, event: DoraEvent) -> None:
    state.add_dora_indicator(event.dora_marker)


def _on_reach(state: PlayerState, event: ReachEvent) -> None:
    rel = state.rel(event.actor)
    if state.riichi_declared[rel]:
        raise TrackerInvariantError(f"seat {rel} declared riichi twice")
    state.riichi_declared[rel] = True
    if rel != 0:
        return
    state.is_w_riichi = state.can_w_riichi
    state.forbidden_tiles = riichi_discard_forbidden(state)
    state.window = DecisionWindow.RIICHI_DISCARD


def _on_reach_accepted(state: PlayerState, event: ReachAcceptedEvent) -> None:
    rel = state.rel(event.actor)
    if not state.riichi_declared[rel] or state.riichi_accepted[rel]:
        raise TrackerInvariantError(f"reach_accepted for seat {rel} without a pending declaration")
    state.riichi_accepted[rel] = True
    if event.scores is not None:
        state.scores = [event.scores[state.abs_seat(i)] for i in range(NUM_PLAYERS)]
    else:
        state.scores[rel] -= state.settings.riichi_cost
    state.kyotaku += 1
    state.update_rank()
    if rel == 0:
        state.at_ippatsu = True


def _on_hora(state: PlayerState, event: HoraEvent) -> None:
    state.hand_in_progress = False
    logger.debug("hand won", player_id=state.player_id, actor=state.rel(event.actor), target=state.rel(event.target))


def _on_ryukyoku(state: PlayerState, event: RyukyokuEvent) -> None:  # noqa: ARG001
    state.hand_in_progress = False


def _on_end_kyoku(state: PlayerState, event: EndKyokuEvent) -> None:  # noqa: ARG001
    state.hand_in_progress = False


def _on_end_game(state: PlayerState, event: EndGameEvent) -> None:  # noqa: ARG001
    state.hand_in_progress = False
    state.game_finished = True


_EVENT_HANDLERS: dict[EventType, Callable[[PlayerState, Any], None]] = {
    EventType.START_GAME: _on_start_game,
    EventType.START_KYOKU: _on_start_kyoku,
    EventType.TSUMO: _on_tsumo,
    EventType.DAHAI: _on_dahai,
    EventType.CHI: _on_chi,
    EventType.PON: _on_pon,
    EventType.DAIMINKAN: _on_daiminkan,
    EventType.KAKAN: _on_kakan,
    EventType.ANKAN: _on_ankan,
    EventType.DORA: _on_dora,
    EventType.REACH: _on_reach,
    EventType.REACH_ACCEPTED: _on_reach_accepted,
    EventType.HORA: _on_hora,
    EventType.RYUKYOKU: _on_ryukyoku,
    EventType.END_KYOKU: _on_end_kyoku,
    EventType.END_GAME: _on_end_game,
}

"""
Read-only legality check for a proposed reaction.

The candidate set is recomputed with the same resolver that `apply` uses, and
the action's concrete tiles and target are checked against it. Each failure
raises the RuleViolation subclass for the action's category with the first
unmet condition as the reason.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from tracker.logic.candidates import resolve_candidates
from tracker.logic.enums import DecisionWindow
from tracker.logic.exceptions import (
    InvalidDiscardError,
    InvalidKanError,
    InvalidMeldError,
    InvalidPassError,
    InvalidRiichiError,
    InvalidRyukyokuError,
    InvalidWinError,
    RuleViolation,
)
from tracker.logic.furiten import blocks_ron
from tracker.logic.tiles import Tile, sort_tiles
from tracker.messaging.actions import (
    AnkanAction,
    ChiAction,
    DahaiAction,
    DaiminkanAction,
    HoraAction,
    KakanAction,
    NoneAction,
    PonAction,
    ReachAction,
    RyukyokuAction,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tracker.logic.state import PlayerState
    from tracker.logic.types import ActionCandidate
    from tracker.messaging.actions import Action

logger = structlog.get_logger()


def validate_action(state: PlayerState, action: Action) -> None:
    """Raise a RuleViolation unless the action is in the current legal set. Never mutates."""
    cans = resolve_candidates(state)
    try:
        _check_action(state, cans, action)
    except RuleViolation as exc:
        logger.warning(
            "rule violation",
            player_id=state.player_id,
            action=exc.action,
            reason=exc.reason,
        )
        raise


def _check_action(state: PlayerState, cans: ActionCandidate, action: Action) -> None:
    if isinstance(action, NoneAction):
        if not cans.can_pass:
            raise InvalidPassError(action="none", reason="nothing to pass on")
        return

    if action.actor != state.player_id:
        error = _ERRORS_BY_ACTION[type(action)]
        raise error(action=action.type, reason=f"actor {action.actor} is not the tracked seat {state.player_id}")

    if isinstance(action, DahaiAction):
        _check_dahai(state, cans, action)
    elif isinstance(action, ChiAction):
        _check_open_meld(state, cans, action, cans.chi_consumed)
    elif isinstance(action, PonAction):
        _check_open_meld(state, cans, action, cans.pon_consumed)
    elif isinstance(action, DaiminkanAction):
        options = [cans.daiminkan_consumed] if cans.daiminkan_consumed is not None else []
        _check_open_meld(state, cans, action, options)
    elif isinstance(action, AnkanAction):
        _check_ankan(state, cans, action)
    elif isinstance(action, KakanAction):
        _check_kakan(state, cans, action)
    elif isinstance(action, ReachAction):
        _check_reach(state, cans)
    elif isinstance(action, HoraAction):
        _check_hora(state, cans, action)
    elif isinstance(action, RyukyokuAction):
        _check_ryukyoku(state, cans)


def _same_tiles(a: Iterable[Tile], b: Iterable[Tile]) -> bool:
    return sort_tiles(list(a)) == sort_tiles(list(b))


def _check_dahai(state: PlayerState, cans: ActionCandidate, action: DahaiAction) -> None:
    tile = action.pai
    if not cans.can_discard:
        raise InvalidDiscardError(action="dahai", reason="no discard is expected now")
    if not state.holds(tile):
        raise InvalidDiscardError(action="dahai", reason=f"tile {tile} not in hand")
    if tile not in cans.discard_tiles:
        if state.riichi_accepted[0]:
            reason = "riichi is locked in: only the drawn tile may be discarded"
        elif state.window == DecisionWindow.RIICHI_DISCARD:
            reason = f"discarding {tile} does not keep tenpai after riichi"
        else:
            reason = f"tile {tile} is forbidden by kuikae restriction"
        raise InvalidDiscardError(action="dahai", reason=reason)
    if action.tsumogiri and tile != cans.tsumo_tile:
        raise InvalidDiscardError(action="dahai", reason=f"tsumogiri set but {tile} is not the drawn tile")
    if not action.tsumogiri and tile == cans.tsumo_tile and not cans.tedashi_drawn_copy:
        raise InvalidDiscardError(
            action="dahai",
            reason=f"{tile} is the only copy held and was just drawn: tsumogiri must be set",
        )


def _check_open_meld(
    state: PlayerState,
    cans: ActionCandidate,
    action: ChiAction | PonAction | DaiminkanAction,
    options: Sequence[Sequence[Tile]],
) -> None:
    error = InvalidMeldError if not isinstance(action, DaiminkanAction) else InvalidKanError
    name = action.type
    if state.window != DecisionWindow.DISCARD_RESPONSE or cans.called_tile is None:
        raise error(action=name, reason="no discard to call on")
    if state.riichi_declared[0]:
        raise error(action=name, reason=f"cannot call {name} while in riichi")
    if state.tiles_left <= 0:
        raise error(action=name, reason="cannot call on the last discard")
    target = state.abs_seat(cans.target_actor)
    if action.target != target:
        raise error(action=name, reason=f"target {action.target} did not make the last discard (seat {target})")
    if action.pai != cans.called_tile:
        raise error(action=name, reason=f"called tile {action.pai} is not the last discard {cans.called_tile}")
    if isinstance(action, ChiAction) and cans.target_actor != 3:  # noqa: PLR2004
        raise error(action=name, reason="chi is only allowed from the upstream seat")
    if not any(_same_tiles(action.consumed, option) for option in options):
        raise error(action=name, reason=f"consumed tiles {[str(t) for t in action.consumed]} are not available")


def _check_ankan(state: PlayerState, cans: ActionCandidate, action: AnkanAction) -> None:
    kind = action.consumed[0].kind
    if state.window != DecisionWindow.SELF_DRAW:
        raise InvalidKanError(action="ankan", reason="closed kan is only possible after an own draw")
    if kind not in state.ankan_candidates:
        raise InvalidKanError(action="ankan", reason=f"hand does not hold four of {action.consumed[0].deaka()}")
    if not any(_same_tiles(action.consumed, option) for option in cans.ankan_options):
        if state.riichi_accepted[0]:
            reason = "closed kan in riichi must use the drawn tile and keep the waits"
        elif state.kans_on_board >= state.settings.max_kans_per_round:
            reason = "maximum kans per round reached"
        elif state.tiles_left < state.settings.min_wall_for_kan:
            reason = "not enough tiles in wall for kan"
        else:
            reason = "consumed tiles do not match the hand"
        raise InvalidKanError(action="ankan", reason=reason)


def _check_kakan(state: PlayerState, cans: ActionCandidate, action: KakanAction) -> None:
    if state.window != DecisionWindow.SELF_DRAW:
        raise InvalidKanError(action="kakan", reason="added kan is only possible after an own draw")
    if action.pai.kind not in state.pons:
        raise InvalidKanError(action="kakan", reason=f"no pon of {action.pai.deaka()} to upgrade")
    for option in cans.kakan_options:
        if option.pai == action.pai and _same_tiles(option.consumed, action.consumed):
            return
    if not state.holds(action.pai):
        reason = f"tile {action.pai} not in hand"
    elif state.kans_on_board >= state.settings.max_kans_per_round:
        reason = "maximum kans per round reached"
    elif state.tiles_left < state.settings.min_wall_for_kan:
        reason = "not enough tiles in wall for kan"
    else:
        reason = "consumed tiles do not match the pon"
    raise InvalidKanError(action="kakan", reason=reason)


def _check_reach(state: PlayerState, cans: ActionCandidate) -> None:
    if cans.can_riichi:
        return
    settings = state.settings
    if state.window != DecisionWindow.SELF_DRAW:
        reason = "riichi can only be declared after an own draw"
    elif state.riichi_declared[0]:
        reason = "riichi already declared"
    elif not state.is_menzen:
        reason = "hand is not closed"
    elif state.scores[0] < settings.riichi_cost:
        reason = f"need at least {settings.riichi_cost} points"
    elif state.tiles_left < settings.min_wall_for_riichi:
        reason = f"need at least {settings.min_wall_for_riichi} tiles left in the wall"
    else:
        reason = "no discard leaves the hand in tenpai"
    raise InvalidRiichiError(action="reach", reason=reason)


def _check_hora(state: PlayerState, cans: ActionCandidate, action: HoraAction) -> None:
    if action.target == action.actor:
        if not cans.can_tsumo_agari:
            raise InvalidWinError(action="hora", reason="hand is not complete after the draw")
        if action.pai is not None and action.pai != cans.tsumo_tile:
            raise InvalidWinError(action="hora", reason=f"tile {action.pai} is not the drawn tile")
        return

    if not cans.can_ron_agari:
        tile = cans.called_tile or state.last_kawa_tile
        if state.window not in (DecisionWindow.DISCARD_RESPONSE, DecisionWindow.KAN_RESPONSE):
            reason = "nothing to ron on"
        elif tile is None or not state.waits[tile.kind]:
            reason = "tile does not complete the hand"
        elif blocks_ron(state):
            reason = "ron is not allowed while in furiten"
        else:
            reason = "kan tile cannot be robbed"
        raise InvalidWinError(action="hora", reason=reason)
    target = state.abs_seat(cans.target_actor)
    if action.target != target:
        raise InvalidWinError(action="hora", reason=f"target {action.target} did not release the tile (seat {target})")
    if action.pai is not None and action.pai != cans.called_tile:
        raise InvalidWinError(action="hora", reason=f"tile {action.pai} is not the tile on offer")


def _check_ryukyoku(state: PlayerState, cans: ActionCandidate) -> None:
    if cans.can_ryukyoku:
        return
    if state.window == DecisionWindow.SELF_DRAW and state.kawa[0]:
        reason = "nine terminals can only be declared on the first draw"
    elif state.any_call_made and state.kans_on_board < state.settings.max_kans_per_round:
        reason = "a call has already been made"
    else:
        reason = "no abortive draw condition is met"
    raise InvalidRyukyokuError(action="ryukyoku", reason=reason)


_ERRORS_BY_ACTION: dict[type, type[RuleViolation]] = {
    DahaiAction: InvalidDiscardError,
    ChiAction: InvalidMeldError,
    PonAction: InvalidMeldError,
    DaiminkanAction: InvalidKanError,
    AnkanAction: InvalidKanError,
    KakanAction: InvalidKanError,
    ReachAction: InvalidRiichiError,
    HoraAction: InvalidWinError,
    RyukyokuAction: InvalidRyukyokuError,
}

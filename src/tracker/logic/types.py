"""
Pydantic models for values that leave the tracker.

ActionCandidate is the resolver's output: an unordered capability set for the
tracked seat. Tiles serialize to mjai notation, seats inside a candidate are
relative to the tracked seat (0 = self).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from tracker.messaging.actions import (
    Action,
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
from tracker.messaging.types import TileField

NUM_SEATS = 4


class KakanOption(BaseModel):
    """An added kan: the tile from hand and the three tiles of the existing pon."""

    model_config = ConfigDict(frozen=True)

    pai: TileField
    consumed: tuple[TileField, TileField, TileField]


class ActionCandidate(BaseModel):
    """Every action the tracked seat may legally take right now."""

    model_config = ConfigDict(frozen=True)

    target_actor: int = 0
    called_tile: TileField | None = None
    tsumo_tile: TileField | None = None
    # another copy of the drawn tile is held, so it may also leave the hand as a tedashi
    tedashi_drawn_copy: bool = False

    discard_tiles: tuple[TileField, ...] = ()
    chi_consumed: tuple[tuple[TileField, TileField], ...] = ()
    pon_consumed: tuple[tuple[TileField, TileField], ...] = ()
    daiminkan_consumed: tuple[TileField, TileField, TileField] | None = None
    ankan_options: tuple[tuple[TileField, TileField, TileField, TileField], ...] = ()
    kakan_options: tuple[KakanOption, ...] = ()

    can_riichi: bool = False
    can_tsumo_agari: bool = False
    can_ron_agari: bool = False
    can_kyuushu_kyuuhai: bool = False
    can_suukaikan: bool = False

    @property
    def can_discard(self) -> bool:
        return bool(self.discard_tiles)

    @property
    def can_chi(self) -> bool:
        return bool(self.chi_consumed)

    @property
    def can_pon(self) -> bool:
        return bool(self.pon_consumed)

    @property
    def can_daiminkan(self) -> bool:
        return self.daiminkan_consumed is not None

    @property
    def can_ankan(self) -> bool:
        return bool(self.ankan_options)

    @property
    def can_kakan(self) -> bool:
        return bool(self.kakan_options)

    @property
    def ankan_kinds(self) -> tuple[int, ...]:
        return tuple(option[0].kind for option in self.ankan_options)

    @property
    def kakan_kinds(self) -> tuple[int, ...]:
        return tuple(option.pai.kind for option in self.kakan_options)

    @property
    def can_agari(self) -> bool:
        return self.can_tsumo_agari or self.can_ron_agari

    @property
    def can_ryukyoku(self) -> bool:
        return self.can_kyuushu_kyuuhai or self.can_suukaikan

    @property
    def can_pass(self) -> bool:
        """Passing is available whenever anything besides a plain discard is offered."""
        return (
            self.can_chi
            or self.can_pon
            or self.can_daiminkan
            or self.can_ankan
            or self.can_kakan
            or self.can_riichi
            or self.can_agari
            or self.can_ryukyoku
        )

    @property
    def can_act(self) -> bool:
        return self.can_discard or self.can_pass

    def to_actions(self, player_id: int) -> list[Action]:
        """Enumerate every concrete mjai reaction this candidate set allows.

        `player_id` is the tracked seat's absolute id; targets are converted
        back to absolute seats.
        """
        target = (player_id + self.target_actor) % NUM_SEATS
        actions: list[Action] = [
            DahaiAction(actor=player_id, pai=tile, tsumogiri=tile == self.tsumo_tile) for tile in self.discard_tiles
        ]
        if self.tedashi_drawn_copy and self.tsumo_tile in self.discard_tiles:
            actions.append(DahaiAction(actor=player_id, pai=self.tsumo_tile, tsumogiri=False))
        if self.called_tile is not None:
            actions.extend(
                ChiAction(actor=player_id, target=target, pai=self.called_tile, consumed=consumed)
                for consumed in self.chi_consumed
            )
            actions.extend(
                PonAction(actor=player_id, target=target, pai=self.called_tile, consumed=consumed)
                for consumed in self.pon_consumed
            )
            if self.daiminkan_consumed is not None:
                actions.append(
                    DaiminkanAction(
                        actor=player_id,
                        target=target,
                        pai=self.called_tile,
                        consumed=self.daiminkan_consumed,
                    ),
                )
            if self.can_ron_agari:
                actions.append(HoraAction(actor=player_id, target=target, pai=self.called_tile))
        actions.extend(AnkanAction(actor=player_id, consumed=consumed) for consumed in self.ankan_options)
        actions.extend(
            KakanAction(actor=player_id, pai=option.pai, consumed=option.consumed) for option in self.kakan_options
        )
        if self.can_riichi:
            actions.append(ReachAction(actor=player_id))
        if self.can_tsumo_agari:
            actions.append(HoraAction(actor=player_id, target=player_id, pai=self.tsumo_tile))
        if self.can_ryukyoku:
            actions.append(RyukyokuAction(actor=player_id))
        if self.can_pass:
            actions.append(NoneAction())
        return actions

"""mjai event models consumed by the tracker.

One model per event type, combined into a discriminated union on the "type"
tag. Anything that fails validation, including an unknown type, raises
MalformedEventError before it can reach a tracker.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from tracker.logic.enums import EventType
from tracker.logic.exceptions import MalformedEventError
from tracker.logic.melds import is_run, is_same_kind
from tracker.logic.tiles import EAST_34, NORTH_34
from tracker.messaging.types import HiddenTileField, Seat, TileField

HAND_SIZE = 13
NUM_SEATS = 4


class GameEvent(BaseModel):
    """Base class for all mjai events.

    `can_act` is an optional per-event override used when replaying events
    the seat has already seen: the tracker updates its bookkeeping but does
    not derive actions.
    """

    model_config = ConfigDict(frozen=True)

    can_act: bool | None = None


class StartGameEvent(GameEvent):
    type: Literal[EventType.START_GAME] = EventType.START_GAME
    id: Seat | None = None
    names: tuple[str, ...] | None = None


class StartKyokuEvent(GameEvent):
    type: Literal[EventType.START_KYOKU] = EventType.START_KYOKU
    bakaze: TileField
    dora_marker: TileField
    kyoku: int = Field(ge=1, le=4)
    honba: int = Field(ge=0)
    kyotaku: int = Field(ge=0)
    oya: Seat
    scores: tuple[int, int, int, int]
    tehais: tuple[tuple[HiddenTileField, ...], ...]

    @model_validator(mode="after")
    def _validate_deal(self) -> StartKyokuEvent:
        if not EAST_34 <= self.bakaze.kind <= NORTH_34:
            raise ValueError(f"bakaze must be a wind tile, got {self.bakaze}")
        if len(self.tehais) != NUM_SEATS:
            raise ValueError(f"tehais must contain {NUM_SEATS} hands, got {len(self.tehais)}")
        for seat, tehai in enumerate(self.tehais):
            if len(tehai) != HAND_SIZE:
                raise ValueError(f"tehais[{seat}] must contain {HAND_SIZE} tiles, got {len(tehai)}")
        return self


class TsumoEvent(GameEvent):
    type: Literal[EventType.TSUMO] = EventType.TSUMO
    actor: Seat
    pai: HiddenTileField


class DahaiEvent(GameEvent):
    type: Literal[EventType.DAHAI] = EventType.DAHAI
    actor: Seat
    pai: TileField
    tsumogiri: bool


class ChiEvent(GameEvent):
    type: Literal[EventType.CHI] = EventType.CHI
    actor: Seat
    target: Seat
    pai: TileField
    consumed: tuple[TileField, TileField]

    @model_validator(mode="after")
    def _validate_chi(self) -> ChiEvent:
        if self.target != (self.actor + NUM_SEATS - 1) % NUM_SEATS:
            raise ValueError(f"chi by seat {self.actor} must target the upstream seat, got {self.target}")
        if not is_run([self.pai.kind, *(t.kind for t in self.consumed)]):
            raise ValueError("chi tiles must form a sequence")
        return self


class PonEvent(GameEvent):
    type: Literal[EventType.PON] = EventType.PON
    actor: Seat
    target: Seat
    pai: TileField
    consumed: tuple[TileField, TileField]

    @model_validator(mode="after")
    def _validate_pon(self) -> PonEvent:
        if self.target == self.actor:
            raise ValueError("pon cannot target the calling seat")
        if not is_same_kind([self.pai, *self.consumed]):
            raise ValueError("pon tiles must be of one kind")
        return self


class DaiminkanEvent(GameEvent):
    type: Literal[EventType.DAIMINKAN] = EventType.DAIMINKAN
    actor: Seat
    target: Seat
    pai: TileField
    consumed: tuple[TileField, TileField, TileField]

    @model_validator(mode="after")
    def _validate_daiminkan(self) -> DaiminkanEvent:
        if self.target == self.actor:
            raise ValueError("daiminkan cannot target the calling seat")
        if not is_same_kind([self.pai, *self.consumed]):
            raise ValueError("daiminkan tiles must be of one kind")
        return self


class KakanEvent(GameEvent):
    type: Literal[EventType.KAKAN] = EventType.KAKAN
    actor: Seat
    pai: TileField
    consumed: tuple[TileField, TileField, TileField]

    @model_validator(mode="after")
    def _validate_kakan(self) -> KakanEvent:
        if not is_same_kind([self.pai, *self.consumed]):
            raise ValueError("kakan tiles must be of one kind")
        return self


class AnkanEvent(GameEvent):
    type: Literal[EventType.ANKAN] = EventType.ANKAN
    actor: Seat
    consumed: tuple[TileField, TileField, TileField, TileField]

    @model_validator(mode="after")
    def _validate_ankan(self) -> AnkanEvent:
        if not is_same_kind(self.consumed):
            raise ValueError("ankan tiles must be of one kind")
        return self


class DoraEvent(GameEvent):
    type: Literal[EventType.DORA] = EventType.DORA
    dora_marker: TileField


class ReachEvent(GameEvent):
    type: Literal[EventType.REACH] = EventType.REACH
    actor: Seat


class ReachAcceptedEvent(GameEvent):
    type: Literal[EventType.REACH_ACCEPTED] = EventType.REACH_ACCEPTED
    actor: Seat
    deltas: tuple[int, int, int, int] | None = None
    scores: tuple[int, int, int, int] | None = None


class HoraEvent(GameEvent):
    type: Literal[EventType.HORA] = EventType.HORA
    actor: Seat
    target: Seat
    pai: HiddenTileField = None
    deltas: tuple[int, int, int, int] | None = None
    ura_markers: tuple[TileField, ...] | None = None


class RyukyokuEvent(GameEvent):
    type: Literal[EventType.RYUKYOKU] = EventType.RYUKYOKU
    deltas: tuple[int, int, int, int] | None = None


class EndKyokuEvent(GameEvent):
    type: Literal[EventType.END_KYOKU] = EventType.END_KYOKU


class EndGameEvent(GameEvent):
    type: Literal[EventType.END_GAME] = EventType.END_GAME


Event = Annotated[
    StartGameEvent
    | StartKyokuEvent
    | TsumoEvent
    | DahaiEvent
    | ChiEvent
    | PonEvent
    | DaiminkanEvent
    | KakanEvent
    | AnkanEvent
    | DoraEvent
    | ReachEvent
    | ReachAcceptedEvent
    | HoraEvent
    | RyukyokuEvent
    | EndKyokuEvent
    | EndGameEvent,
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter[Event] = TypeAdapter(Event)


def parse_event(data: dict[str, Any]) -> Event:
    """Parse a raw dict into a typed Event."""
    try:
        return _event_adapter.validate_python(data)
    except ValidationError as exc:
        raise MalformedEventError(f"malformed event {data!r}: {exc}") from exc


def parse_event_json(line: str | bytes) -> Event:
    """Parse one JSON-encoded mjai event."""
    try:
        return _event_adapter.validate_json(line)
    except ValidationError as exc:
        raise MalformedEventError(f"malformed event {line!r}: {exc}") from exc


def dump_event(event: Event) -> dict[str, Any]:
    """Serialize an event back to its mjai dict form (hidden tiles as "?")."""
    data = event.model_dump(mode="json")
    if event.can_act is None:
        data.pop("can_act")
    return data

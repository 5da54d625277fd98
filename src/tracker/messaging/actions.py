"""mjai reaction models a seat can send back in response to an event."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from tracker.logic.enums import ActionType
from tracker.logic.exceptions import MalformedActionError
from tracker.messaging.types import HiddenTileField, Seat, TileField


class GameActionMessage(BaseModel):
    """Base class for all mjai reactions."""

    model_config = ConfigDict(frozen=True)


class DahaiAction(GameActionMessage):
    type: Literal[ActionType.DAHAI] = ActionType.DAHAI
    actor: Seat
    pai: TileField
    tsumogiri: bool


class ChiAction(GameActionMessage):
    type: Literal[ActionType.CHI] = ActionType.CHI
    actor: Seat
    target: Seat
    pai: TileField
    consumed: tuple[TileField, TileField]


class PonAction(GameActionMessage):
    type: Literal[ActionType.PON] = ActionType.PON
    actor: Seat
    target: Seat
    pai: TileField
    consumed: tuple[TileField, TileField]


class DaiminkanAction(GameActionMessage):
    type: Literal[ActionType.DAIMINKAN] = ActionType.DAIMINKAN
    actor: Seat
    target: Seat
    pai: TileField
    consumed: tuple[TileField, TileField, TileField]


class KakanAction(GameActionMessage):
    type: Literal[ActionType.KAKAN] = ActionType.KAKAN
    actor: Seat
    pai: TileField
    consumed: tuple[TileField, TileField, TileField]


class AnkanAction(GameActionMessage):
    type: Literal[ActionType.ANKAN] = ActionType.ANKAN
    actor: Seat
    consumed: tuple[TileField, TileField, TileField, TileField]


class ReachAction(GameActionMessage):
    type: Literal[ActionType.REACH] = ActionType.REACH
    actor: Seat


class HoraAction(GameActionMessage):
    """Tsumo when target == actor, ron otherwise."""

    type: Literal[ActionType.HORA] = ActionType.HORA
    actor: Seat
    target: Seat
    pai: HiddenTileField = None


class RyukyokuAction(GameActionMessage):
    """Abortive draw declaration (nine terminals or four kans)."""

    type: Literal[ActionType.RYUKYOKU] = ActionType.RYUKYOKU
    actor: Seat


class NoneAction(GameActionMessage):
    """Pass."""

    type: Literal[ActionType.NONE] = ActionType.NONE


Action = Annotated[
    DahaiAction
    | ChiAction
    | PonAction
    | DaiminkanAction
    | KakanAction
    | AnkanAction
    | ReachAction
    | HoraAction
    | RyukyokuAction
    | NoneAction,
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(data: dict[str, Any]) -> Action:
    """Parse a raw dict into a typed Action."""
    try:
        return _action_adapter.validate_python(data)
    except ValidationError as exc:
        raise MalformedActionError(f"malformed action {data!r}: {exc}") from exc


def parse_action_json(line: str | bytes) -> Action:
    """Parse one JSON-encoded mjai reaction."""
    try:
        return _action_adapter.validate_json(line)
    except ValidationError as exc:
        raise MalformedActionError(f"malformed action {line!r}: {exc}") from exc


def dump_action(action: Action) -> dict[str, Any]:
    """Serialize an action to its mjai dict form."""
    data = action.model_dump(mode="json")
    if isinstance(action, HoraAction) and action.pai is None:
        data.pop("pai")
    return data

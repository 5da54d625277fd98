from mahjong.tile import TilesConverter

from tracker.logic.settings import TrackerSettings
from tracker.logic.state import PlayerState
from tracker.logic.tiles import kind_to_mjai, parse_tile
from tracker.logic.types import ActionCandidate
from tracker.messaging.events import Event, parse_event

HIDDEN_HAND = ["?"] * 13


def _string_to_mjai(
    sou: str | None = "",
    pin: str | None = "",
    man: str | None = "",
    honors: str | None = "",
) -> list[str]:
    """Compact notation to mjai tile strings (honors 1-7 = E S W N P F C)."""
    tiles = TilesConverter.string_to_136_array(sou=sou, pin=pin, man=man, honors=honors)
    return [kind_to_mjai(t // 4) for t in tiles]


def _string_to_34_array(
    sou: str | None = "",
    pin: str | None = "",
    man: str | None = "",
    honors: str | None = "",
) -> list[int]:
    return TilesConverter.to_34_array(TilesConverter.string_to_136_array(sou=sou, pin=pin, man=man, honors=honors))


def _kind(tile: str) -> int:
    return parse_tile(tile).kind


def start_game(player_id: int | None = None) -> Event:
    data: dict = {"type": "start_game"}
    if player_id is not None:
        data["id"] = player_id
    return parse_event(data)


def start_kyoku(
    player_id: int,
    hand: list[str],
    *,
    oya: int = 0,
    bakaze: str = "E",
    kyoku: int = 1,
    honba: int = 0,
    kyotaku: int = 0,
    dora_marker: str = "N",
    scores: list[int] | None = None,
) -> Event:
    tehais = [list(HIDDEN_HAND) for _ in range(4)]
    tehais[player_id] = hand
    return parse_event(
        {
            "type": "start_kyoku",
            "bakaze": bakaze,
            "dora_marker": dora_marker,
            "kyoku": kyoku,
            "honba": honba,
            "kyotaku": kyotaku,
            "oya": oya,
            "scores": scores or [25000, 25000, 25000, 25000],
            "tehais": tehais,
        },
    )


def tsumo(actor: int, pai: str = "?") -> Event:
    return parse_event({"type": "tsumo", "actor": actor, "pai": pai})


def dahai(actor: int, pai: str, *, tsumogiri: bool = False) -> Event:
    return parse_event({"type": "dahai", "actor": actor, "pai": pai, "tsumogiri": tsumogiri})


def chi(actor: int, target: int, pai: str, consumed: list[str]) -> Event:
    return parse_event({"type": "chi", "actor": actor, "target": target, "pai": pai, "consumed": consumed})


def pon(actor: int, target: int, pai: str, consumed: list[str]) -> Event:
    return parse_event({"type": "pon", "actor": actor, "target": target, "pai": pai, "consumed": consumed})


def daiminkan(actor: int, target: int, pai: str, consumed: list[str]) -> Event:
    return parse_event({"type": "daiminkan", "actor": actor, "target": target, "pai": pai, "consumed": consumed})


def kakan(actor: int, pai: str, consumed: list[str]) -> Event:
    return parse_event({"type": "kakan", "actor": actor, "pai": pai, "consumed": consumed})


def ankan(actor: int, consumed: list[str]) -> Event:
    return parse_event({"type": "ankan", "actor": actor, "consumed": consumed})


def dora(marker: str) -> Event:
    return parse_event({"type": "dora", "dora_marker": marker})


def reach(actor: int) -> Event:
    return parse_event({"type": "reach", "actor": actor})


def reach_accepted(actor: int, scores: list[int] | None = None) -> Event:
    data: dict = {"type": "reach_accepted", "actor": actor}
    if scores is not None:
        data["scores"] = scores
    return parse_event(data)


def hora(actor: int, target: int, pai: str | None = None) -> Event:
    data: dict = {"type": "hora", "actor": actor, "target": target}
    if pai is not None:
        data["pai"] = pai
    return parse_event(data)


def ryukyoku() -> Event:
    return parse_event({"type": "ryukyoku"})


def end_kyoku() -> Event:
    return parse_event({"type": "end_kyoku"})


def end_game() -> Event:
    return parse_event({"type": "end_game"})


def create_state(
    hand: list[str],
    player_id: int = 0,
    *,
    settings: TrackerSettings | None = None,
    **kyoku_kwargs,
) -> PlayerState:
    """A tracker that has seen start_game and start_kyoku with the given own hand."""
    state = PlayerState(player_id, settings)
    state.apply(start_game())
    state.apply(start_kyoku(player_id, hand, **kyoku_kwargs))
    return state


def feed(state: PlayerState, *events: Event) -> ActionCandidate:
    """Apply events in order and return the candidates after the last one."""
    cans = ActionCandidate()
    for event in events:
        cans = state.apply(event)
    return cans


def declare_riichi(state: PlayerState, draw: str) -> ActionCandidate:
    """Tracked seat draws, declares riichi discarding the drawn tile, and riichi is accepted."""
    seat = state.player_id
    return feed(state, tsumo(seat, draw), reach(seat), dahai(seat, draw, tsumogiri=True), reach_accepted(seat))

"""Unit tests for mjai event parsing and serialization."""

import json

import pytest

from tracker.logic.enums import EventType
from tracker.logic.exceptions import MalformedEventError
from tracker.logic.tiles import Tile
from tracker.messaging.events import (
    ChiEvent,
    DahaiEvent,
    StartKyokuEvent,
    TsumoEvent,
    dump_event,
    parse_event,
    parse_event_json,
)

from tracker.tests.unit.helpers import HIDDEN_HAND, start_kyoku


def _start_kyoku_data(**overrides) -> dict:
    data = {
        "type": "start_kyoku",
        "bakaze": "E",
        "dora_marker": "3p",
        "kyoku": 1,
        "honba": 0,
        "kyotaku": 0,
        "oya": 0,
        "scores": [25000, 25000, 25000, 25000],
        "tehais": [list(HIDDEN_HAND) for _ in range(4)],
    }
    data.update(overrides)
    return data


class TestParseEvent:
    def test_start_kyoku_with_hidden_hands(self):
        event = start_kyoku(1, ["1m"] * 3 + ["2p"] * 3 + ["3s"] * 3 + ["E"] * 3 + ["5pr"])

        assert isinstance(event, StartKyokuEvent)
        assert event.tehais[0] == (None,) * 13
        assert event.tehais[1][-1] == Tile(13, red=True)

    def test_dahai(self):
        event = parse_event({"type": "dahai", "actor": 2, "pai": "5sr", "tsumogiri": True})

        assert isinstance(event, DahaiEvent)
        assert event.pai == Tile(22, red=True)
        assert event.tsumogiri is True

    def test_hidden_tsumo(self):
        event = parse_event({"type": "tsumo", "actor": 3, "pai": "?"})

        assert isinstance(event, TsumoEvent)
        assert event.pai is None

    def test_from_json(self):
        event = parse_event_json('{"type":"reach","actor":1}')
        assert event.type == EventType.REACH

    def test_can_act_override(self):
        event = parse_event({"type": "tsumo", "actor": 0, "pai": "1m", "can_act": False})
        assert event.can_act is False

    def test_unknown_type_rejected(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "nukidora", "actor": 0})

    def test_missing_field_rejected(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "dahai", "actor": 0, "pai": "1m"})

    def test_bad_tile_rejected(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "dahai", "actor": 0, "pai": "0m", "tsumogiri": False})

    def test_seat_out_of_range_rejected(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "reach", "actor": 4})

    def test_bad_json_rejected(self):
        with pytest.raises(MalformedEventError):
            parse_event_json('{"type": "dahai"')


class TestEventValidation:
    def test_bakaze_must_be_wind(self):
        with pytest.raises(MalformedEventError):
            parse_event(_start_kyoku_data(bakaze="P"))

    def test_tehais_need_four_hands(self):
        with pytest.raises(MalformedEventError):
            parse_event(_start_kyoku_data(tehais=[list(HIDDEN_HAND)] * 3))

    def test_tehai_needs_thirteen_tiles(self):
        tehais = [list(HIDDEN_HAND) for _ in range(4)]
        tehais[2] = ["?"] * 14
        with pytest.raises(MalformedEventError):
            parse_event(_start_kyoku_data(tehais=tehais))

    def test_chi_must_target_upstream_seat(self):
        data = {"type": "chi", "actor": 0, "target": 3, "pai": "3m", "consumed": ["4m", "5m"]}
        assert isinstance(parse_event(data), ChiEvent)

        with pytest.raises(MalformedEventError):
            parse_event({**data, "target": 1})

    def test_chi_must_be_a_sequence(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "chi", "actor": 1, "target": 0, "pai": "3m", "consumed": ["4m", "6m"]})

    def test_pon_must_be_one_kind(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "pon", "actor": 1, "target": 0, "pai": "E", "consumed": ["E", "S"]})

    def test_pon_cannot_target_self(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "pon", "actor": 1, "target": 1, "pai": "E", "consumed": ["E", "E"]})

    def test_ankan_must_be_one_kind(self):
        with pytest.raises(MalformedEventError):
            parse_event({"type": "ankan", "actor": 1, "consumed": ["1m", "1m", "1m", "2m"]})


class TestDumpEvent:
    def test_hidden_tiles_dump_as_question_mark(self):
        data = dump_event(parse_event({"type": "tsumo", "actor": 3, "pai": "?"}))
        assert data == {"type": "tsumo", "actor": 3, "pai": "?"}

    def test_red_five_and_can_act(self):
        event = parse_event({"type": "dahai", "actor": 0, "pai": "5mr", "tsumogiri": False, "can_act": False})
        data = dump_event(event)

        assert data["pai"] == "5mr"
        assert data["can_act"] is False
        assert json.loads(json.dumps(data)) == data

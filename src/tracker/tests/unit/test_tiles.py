"""Unit tests for mjai tile parsing and tile utilities."""

import pytest

from tracker.logic.tiles import (
    CHUN_34,
    EAST_34,
    HAKU_34,
    NORTH_34,
    NUM_TILE_TYPES,
    SOUTH_34,
    Tile,
    dora_from_indicator,
    hand_to_34_array,
    is_terminal_or_honor,
    kind_to_mjai,
    parse_optional_tile,
    parse_tile,
    sort_tiles,
    tiles_to_string,
    wind_from_offset,
)


class TestParseTile:
    def test_suited_tiles(self):
        assert parse_tile("1m") == Tile(0)
        assert parse_tile("9m") == Tile(8)
        assert parse_tile("1p") == Tile(9)
        assert parse_tile("9s") == Tile(26)

    def test_honors(self):
        assert parse_tile("E") == Tile(EAST_34)
        assert parse_tile("N") == Tile(NORTH_34)
        assert parse_tile("P") == Tile(HAKU_34)
        assert parse_tile("C") == Tile(CHUN_34)

    def test_red_fives(self):
        assert parse_tile("5mr") == Tile(4, red=True)
        assert parse_tile("5pr") == Tile(13, red=True)
        assert parse_tile("5sr") == Tile(22, red=True)

    @pytest.mark.parametrize("value", ["0m", "5z", "4mr", "?", "", "10m", "X", "5r"])
    def test_invalid_tiles_rejected(self, value):
        with pytest.raises(ValueError):
            parse_tile(value)

    def test_hidden_tile_is_none(self):
        assert parse_optional_tile("?") is None
        assert parse_optional_tile(None) is None
        assert parse_optional_tile("3s") == Tile(20)

    def test_every_kind_survives_mjai_notation(self):
        for kind in range(NUM_TILE_TYPES):
            assert parse_tile(kind_to_mjai(kind)).kind == kind

    def test_str_uses_mjai_notation(self):
        assert str(Tile(13, red=True)) == "5pr"
        assert Tile(13, red=True).deaka() == Tile(13)

    def test_kind_out_of_range(self):
        with pytest.raises(ValueError, match="tile kind"):
            kind_to_mjai(NUM_TILE_TYPES)


class TestDoraFromIndicator:
    def test_suit_advances(self):
        assert dora_from_indicator(parse_tile("4p").kind) == parse_tile("5p").kind

    def test_nine_wraps_to_one(self):
        assert dora_from_indicator(parse_tile("9m").kind) == parse_tile("1m").kind
        assert dora_from_indicator(parse_tile("9s").kind) == parse_tile("1s").kind

    def test_winds_wrap(self):
        assert dora_from_indicator(EAST_34) == SOUTH_34
        assert dora_from_indicator(NORTH_34) == EAST_34

    def test_dragons_wrap(self):
        assert dora_from_indicator(CHUN_34) == HAKU_34


class TestTileHelpers:
    def test_wind_from_offset_wraps(self):
        assert wind_from_offset(0) == EAST_34
        assert wind_from_offset(5) == SOUTH_34

    def test_terminal_or_honor(self):
        assert is_terminal_or_honor(parse_tile("1m").kind)
        assert is_terminal_or_honor(parse_tile("9p").kind)
        assert is_terminal_or_honor(parse_tile("F").kind)
        assert not is_terminal_or_honor(parse_tile("5s").kind)

    def test_sort_puts_red_before_plain(self):
        tiles = [Tile(13), Tile(2), Tile(13, red=True)]
        assert sort_tiles(tiles) == [Tile(2), Tile(13, red=True), Tile(13)]

    def test_hand_to_34_array_ignores_red_flag(self):
        counts = hand_to_34_array([Tile(4, red=True), Tile(4), Tile(27)])
        assert counts[4] == 2
        assert counts[27] == 1
        assert sum(counts) == 3

    def test_tiles_to_string_marks_red_five(self):
        counts = hand_to_34_array([Tile(0), Tile(1), Tile(2), Tile(12), Tile(13), Tile(14), Tile(27), Tile(27)])
        assert tiles_to_string(counts, [False, True, False]) == "123m406p11z"
        assert tiles_to_string(counts, [False, False, False]) == "123m456p11z"

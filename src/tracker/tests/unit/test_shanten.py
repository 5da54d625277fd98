"""Unit tests for shanten calculation module."""

from mahjong.tile import TilesConverter

from tracker.logic.shanten import AGARI_STATE, NOT_TENPAI, calculate_shanten, discard_shanten
from tracker.logic.tiles import EAST_34, SOUTH_34


def _hand(sou="", pin="", man="", honors="") -> list[int]:
    """Convert string notation to 34-element tile array."""
    return TilesConverter.to_34_array(TilesConverter.string_to_136_array(sou=sou, pin=pin, man=man, honors=honors))


def test_agari_state_constant():
    assert AGARI_STATE == -1


class TestCalculateShanten:
    """Test shanten calculation across all hand patterns."""

    def test_complete_hand(self):
        assert calculate_shanten(_hand(man="123456789", pin="11", sou="234")) == AGARI_STATE

    def test_tenpai(self):
        assert calculate_shanten(_hand(man="123456789", pin="1", sou="234")) == 0

    def test_one_shanten(self):
        assert calculate_shanten(_hand(man="123456789", pin="13", sou="24")) == 1

    def test_chiitoitsu_tenpai(self):
        assert calculate_shanten(_hand(man="1199", pin="1199", sou="1199", honors="1")) == 0

    def test_kokushi_tenpai(self):
        assert calculate_shanten(_hand(man="19", pin="19", sou="19", honors="1234567")) == 0

    def test_open_hand_tenpai(self):
        """10 tiles = 3*3+1, one meld already declared."""
        assert calculate_shanten(_hand(man="123456", pin="1", sou="234")) == 0

    def test_empty_hand_returns_not_tenpai(self):
        assert calculate_shanten([0] * 34) == NOT_TENPAI

    def test_invalid_tile_count_returns_not_tenpai(self):
        """3n+0 tile counts are invalid for xiangting."""
        assert calculate_shanten(_hand(man="123")) == NOT_TENPAI


class TestDiscardShanten:
    def test_shanten_per_held_kind(self):
        tiles = _hand(man="123456789", pin="1", sou="234", honors="1")
        result = discard_shanten(tiles)

        assert result[EAST_34] == 0  # 1p tanki
        assert result[9] == 0  # E tanki
        assert result[0] == 1
        assert result[SOUTH_34] is None

    def test_count_vector_restored(self):
        tiles = _hand(man="123456789", pin="1", sou="234", honors="1")
        before = list(tiles)

        discard_shanten(tiles)

        assert tiles == before

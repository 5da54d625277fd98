"""Unit tests for agari detection and wait calculation."""

from mahjong.tile import TilesConverter

from tracker.logic.tiles import EAST_34, NUM_TILE_TYPES
from tracker.logic.win import get_waits, is_agari


def _hand(sou="", pin="", man="", honors="") -> list[int]:
    return TilesConverter.to_34_array(TilesConverter.string_to_136_array(sou=sou, pin=pin, man=man, honors=honors))


def _wait_kinds(waits: list[bool]) -> list[int]:
    return [kind for kind in range(NUM_TILE_TYPES) if waits[kind]]


class TestIsAgari:
    def test_complete_hand(self):
        assert is_agari(_hand(man="123456789", pin="11", sou="234"))

    def test_chiitoitsu(self):
        assert is_agari(_hand(man="1199", pin="1199", sou="1199", honors="11"))

    def test_kokushi(self):
        assert is_agari(_hand(man="19", pin="19", sou="19", honors="12345677"))

    def test_incomplete_hand(self):
        assert not is_agari(_hand(man="123456789", pin="13", sou="234"))

    def test_wrong_size_is_never_agari(self):
        assert not is_agari(_hand(man="123456789", pin="1", sou="234"))


class TestGetWaits:
    def test_ryanmen(self):
        waits = get_waits(_hand(man="123456789", pin="11", sou="23"))
        assert _wait_kinds(waits) == [18, 21]  # 1s, 4s

    def test_chiitoitsu_tanki(self):
        waits = get_waits(_hand(man="1199", pin="1199", sou="1199", honors="1"))
        assert _wait_kinds(waits) == [EAST_34]

    def test_open_hand_waits(self):
        waits = get_waits(_hand(man="456", pin="11", sou="23", honors="555"))
        assert _wait_kinds(waits) == [18, 21]

    def test_all_copies_held_is_not_a_wait(self):
        waits = get_waits(_hand(man="123456789", honors="1111"))
        assert _wait_kinds(waits) == []

    def test_noten_has_no_waits(self):
        waits = get_waits(_hand(man="13579", pin="2468", sou="1357"))
        assert not any(waits)

    def test_wrong_size_has_no_waits(self):
        assert not any(get_waits(_hand(man="123456789", pin="11", sou="234")))

    def test_count_vector_restored(self):
        tiles = _hand(man="123456789", pin="11", sou="23")
        before = list(tiles)

        get_waits(tiles)

        assert tiles == before

"""Unit tests for abortive draws: nine terminals and four kans."""

import pytest

from tracker.logic.abortive import count_terminal_honor_types
from tracker.logic.exceptions import InvalidRyukyokuError
from tracker.logic.settings import TrackerSettings
from tracker.messaging.actions import NoneAction, RyukyokuAction
from tracker.tests.unit.helpers import (
    _string_to_34_array,
    _string_to_mjai,
    ankan,
    create_state,
    dahai,
    feed,
    pon,
    tsumo,
)

NINE_TYPES_HAND = _string_to_mjai(man="192345", pin="19", sou="19", honors="123")
TENPAI_HAND = _string_to_mjai(man="123456789", pin="11", sou="23")


def test_count_terminal_honor_types():
    assert count_terminal_honor_types(_string_to_34_array(man="1199", pin="19", sou="19", honors="1123")) == 9
    assert count_terminal_honor_types(_string_to_34_array(man="2345678", pin="2345")) == 0


class TestKyuushuKyuuhai:
    def test_offered_on_first_draw(self):
        state = create_state(NINE_TYPES_HAND)
        cans = state.apply(tsumo(0, "2p"))

        assert cans.can_kyuushu_kyuuhai
        assert cans.can_pass
        assert RyukyokuAction(actor=0) in cans.to_actions(0)
        state.validate(RyukyokuAction(actor=0))

    def test_gone_after_any_call(self):
        state = create_state(NINE_TYPES_HAND, oya=1)
        cans = feed(state, tsumo(1), dahai(1, "P"), pon(3, 1, "P", ["P", "P"]), dahai(3, "F"), tsumo(0, "2p"))

        assert not cans.can_kyuushu_kyuuhai
        with pytest.raises(InvalidRyukyokuError, match="call"):
            state.validate(RyukyokuAction(actor=0))

    def test_gone_after_first_discard(self):
        state = create_state(NINE_TYPES_HAND)
        cans = feed(state, tsumo(0, "2p"), dahai(0, "2p", tsumogiri=True), tsumo(1), dahai(1, "S"), tsumo(0, "3p"))

        assert not cans.can_kyuushu_kyuuhai
        with pytest.raises(InvalidRyukyokuError, match="first draw"):
            state.validate(RyukyokuAction(actor=0))

    def test_eight_types_not_enough(self):
        state = create_state(_string_to_mjai(man="1923456", pin="19", sou="19", honors="12"))
        cans = state.apply(tsumo(0, "2p"))

        assert not cans.can_kyuushu_kyuuhai

    def test_disabled_by_setting(self):
        state = create_state(NINE_TYPES_HAND, settings=TrackerSettings(has_kyuushu_kyuuhai=False))
        cans = state.apply(tsumo(0, "2p"))

        assert not cans.can_kyuushu_kyuuhai


class TestFourKans:
    def test_offered_only_after_fourth_kan(self):
        state = create_state(TENPAI_HAND)

        for seat, tile in ((1, "5p"), (2, "6p"), (3, "7p")):
            cans = feed(state, tsumo(seat), ankan(seat, [tile] * 4))
            assert not cans.can_suukaikan

        assert state.kans_on_board == 3

        cans = feed(state, tsumo(3), ankan(3, ["8p"] * 4))

        assert state.kans_on_board == 4
        assert cans.can_suukaikan
        assert not cans.can_ron_agari
        assert cans.to_actions(0) == [RyukyokuAction(actor=0), NoneAction()]

    def test_tracked_seat_fourth_kan(self):
        state = create_state(_string_to_mjai(man="1114567", pin="11199", sou="9"))

        for seat, tile in ((1, "1s"), (2, "2s"), (3, "3s")):
            feed(state, tsumo(seat), ankan(seat, [tile] * 4))

        cans = state.apply(tsumo(0, "1m"))
        assert not cans.can_suukaikan
        assert cans.ankan_kinds == (0,)

        feed(state, ankan(0, ["1m"] * 4))
        cans = state.apply(tsumo(0, "E"))

        assert cans.can_suukaikan
        assert not cans.can_ankan

    def test_one_seat_with_four_kans_is_not_abortive(self):
        state = create_state(TENPAI_HAND)

        for tile in ("5s", "6s", "7s", "8s"):
            cans = feed(state, tsumo(2), ankan(2, [tile] * 4))

        assert state.kans_on_board == 4
        assert state.kans_per_seat[2] == 4
        assert not cans.can_suukaikan

    def test_no_fifth_kan(self):
        state = create_state(_string_to_mjai(man="1114567", pin="11199", sou="9"))

        for seat, tile in ((1, "1s"), (2, "2s"), (3, "3s"), (1, "4s")):
            feed(state, tsumo(seat), ankan(seat, [tile] * 4))

        cans = state.apply(tsumo(0, "1m"))
        assert not cans.can_ankan

"""
Unit tests for furiten tracking.

Permanent furiten comes from the seat's own discards (or a wait passed in
riichi), same-cycle furiten from a wait passed by uncalled and lasts until the
seat's next discard. Tsumo is never blocked.
"""

import pytest

from tracker.logic.exceptions import InvalidWinError
from tracker.logic.tiles import parse_tile
from tracker.messaging.actions import HoraAction
from tracker.tests.unit.helpers import (
    _string_to_mjai,
    create_state,
    dahai,
    declare_riichi,
    feed,
    kakan,
    pon,
    tsumo,
)

TENPAI_HAND = _string_to_mjai(man="123456789", pin="11", sou="23")


class TestPermanentFuriten:
    def test_own_discarded_wait(self):
        """Discarding 1s and then waiting on 1s/4s: ron is refused, tsumo is not."""
        state = create_state(_string_to_mjai(man="123456789", pin="11", sou="13"))
        feed(state, tsumo(0, "2s"), dahai(0, "1s"))

        assert state.at_furiten
        assert state.is_furiten

        cans = feed(state, tsumo(1), dahai(1, "4s"))
        assert not cans.can_ron_agari
        with pytest.raises(InvalidWinError, match="furiten"):
            state.validate(HoraAction(actor=0, target=1, pai="4s"))

        cans = feed(state, tsumo(2), dahai(2, "S"), tsumo(3), dahai(3, "W"), tsumo(0, "4s"))
        assert cans.can_tsumo_agari
        state.validate(HoraAction(actor=0, target=0, pai="4s"))

    def test_persists_after_later_discards(self):
        state = create_state(_string_to_mjai(man="123456789", pin="11", sou="13"))
        feed(state, tsumo(0, "2s"), dahai(0, "1s"), tsumo(1), dahai(1, "E"), tsumo(0, "W"), dahai(0, "W"))

        assert state.at_furiten
        cans = feed(state, tsumo(1), dahai(1, "4s"))
        assert not cans.can_ron_agari


class TestSameCycleFuriten:
    def test_ron_offered_on_the_exposing_discard(self):
        state = create_state(TENPAI_HAND, oya=1)
        cans = feed(state, tsumo(1), dahai(1, "1s"))

        assert cans.can_ron_agari
        assert state.to_mark_same_cycle_furiten
        assert state.is_furiten
        state.validate(HoraAction(actor=0, target=1, pai="1s"))

    def test_passed_wait_blocks_ron_until_own_discard(self):
        state = create_state(TENPAI_HAND, oya=1)
        feed(state, tsumo(1), dahai(1, "1s"))

        cans = feed(state, tsumo(2), dahai(2, "4s"))
        assert state.same_cycle_furiten
        assert not cans.can_ron_agari

        feed(state, tsumo(3), dahai(3, "E"), tsumo(0, "9p"), dahai(0, "9p", tsumogiri=True))
        assert not state.same_cycle_furiten
        assert not state.is_furiten

        cans = feed(state, tsumo(1), dahai(1, "4s"))
        assert cans.can_ron_agari

    def test_added_kan_offers_chankan_then_marks_furiten(self):
        state = create_state(TENPAI_HAND, oya=1)
        feed(state, tsumo(1), dahai(1, "4s"), pon(2, 1, "4s", ["4s", "4s"]), dahai(2, "E"))
        assert state.same_cycle_furiten

        feed(state, tsumo(3), dahai(3, "S"), tsumo(0, "N"), dahai(0, "N", tsumogiri=True))
        assert not state.is_furiten

        feed(state, tsumo(1), dahai(1, "W"), tsumo(2))
        cans = state.apply(kakan(2, "4s", ["4s", "4s", "4s"]))

        assert cans.can_ron_agari
        assert cans.called_tile == parse_tile("4s")
        state.validate(HoraAction(actor=0, target=2, pai="4s"))

        state.apply(tsumo(2))
        assert state.same_cycle_furiten


class TestRiichiFuriten:
    def test_passed_wait_in_riichi_is_permanent(self):
        state = create_state(TENPAI_HAND)
        declare_riichi(state, "E")
        assert state.riichi_accepted[0]

        cans = feed(state, tsumo(1), dahai(1, "1s"))
        assert cans.can_ron_agari

        feed(state, tsumo(2), dahai(2, "N"))
        assert state.at_furiten

        feed(state, tsumo(3), dahai(3, "S"), tsumo(0, "9p"), dahai(0, "9p", tsumogiri=True))
        assert not state.same_cycle_furiten
        assert state.at_furiten

        cans = feed(state, tsumo(1), dahai(1, "4s"))
        assert not cans.can_ron_agari

        cans = feed(state, tsumo(2), dahai(2, "S"), tsumo(3), dahai(3, "W"), tsumo(0, "4s"))
        assert cans.can_tsumo_agari

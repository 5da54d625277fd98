import pytest

from tracker.logic.enums import EventType
from tracker.replay import ReplayLoadError, load_events_from_file, load_events_from_string

START = '{"type":"start_game"}'
TSUMO = '{"type":"tsumo","actor":1,"pai":"?"}'
DAHAI = '{"type":"dahai","actor":1,"pai":"5mr","tsumogiri":true}'


class TestLoadEventsFromString:
    def test_one_event_per_line(self):
        events = load_events_from_string(f"{START}\n\n{TSUMO}\n{DAHAI}\n")

        assert [e.type for e in events] == [EventType.START_GAME, EventType.TSUMO, EventType.DAHAI]
        assert events[1].pai is None
        assert str(events[2].pai) == "5mr"

    def test_batched_line(self):
        events = load_events_from_string(f"{START}\n[{TSUMO},{DAHAI}]")

        assert len(events) == 3

    def test_empty_content(self):
        with pytest.raises(ReplayLoadError, match="Empty"):
            load_events_from_string("\n  \n")

    def test_malformed_json_reports_line(self):
        with pytest.raises(ReplayLoadError, match="line 2"):
            load_events_from_string(f"{START}\n{{not json")

    def test_unknown_event_type(self):
        with pytest.raises(ReplayLoadError, match="line 1"):
            load_events_from_string('{"type":"shuffle"}')

    def test_non_object_item(self):
        with pytest.raises(ReplayLoadError, match="event object"):
            load_events_from_string(f"[{START}, 3]")

    def test_line_limit(self, monkeypatch):
        monkeypatch.setattr("tracker.replay.loader._MAX_REPLAY_LINES", 2)

        with pytest.raises(ReplayLoadError, match="maximum line count"):
            load_events_from_string(f"{START}\n{TSUMO}\n{DAHAI}")


class TestLoadEventsFromFile:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "game.mjson"
        path.write_text(f"{START}\n{TSUMO}\n", encoding="utf-8")

        assert len(load_events_from_file(path)) == 2
        assert len(load_events_from_file(str(path))) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReplayLoadError, match="Cannot read"):
            load_events_from_file(tmp_path / "missing.mjson")

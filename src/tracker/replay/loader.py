"""Replay loader: parse an mjai event log (JSON Lines) into typed events.

Each non-blank line holds one mjai event object. A line may also hold a JSON
array of events, the batched form some mjai servers send. Unknown event types
and schema errors raise ReplayLoadError with the offending line number rather
than being silently dropped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tracker.logic.exceptions import MalformedEventError
from tracker.messaging.events import parse_event

if TYPE_CHECKING:
    from tracker.messaging.events import Event

# Safety limit to prevent memory exhaustion from maliciously large log files.
_MAX_REPLAY_LINES = 100_000


class ReplayLoadError(Exception):
    """Raised when a replay file cannot be loaded or parsed."""


def _parse_line(line_no: int, line: str) -> list[Event]:
    try:
        data: Any = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ReplayLoadError(f"Malformed JSON on line {line_no}: {exc}") from exc

    items = data if isinstance(data, list) else [data]
    events: list[Event] = []
    for item in items:
        if not isinstance(item, dict):
            raise ReplayLoadError(f"Line {line_no} does not hold an event object")
        try:
            events.append(parse_event(item))
        except MalformedEventError as exc:
            raise ReplayLoadError(f"Invalid event on line {line_no}: {exc}") from exc
    return events


def load_events_from_string(content: str) -> list[Event]:
    """Parse an mjai JSON Lines log into events."""
    lines = [(i + 1, line) for i, line in enumerate(content.splitlines()) if line.strip()]
    if not lines:
        raise ReplayLoadError("Empty replay content")
    if len(lines) > _MAX_REPLAY_LINES:
        raise ReplayLoadError(f"Replay exceeds maximum line count ({_MAX_REPLAY_LINES})")

    events: list[Event] = []
    for line_no, line in lines:
        events.extend(_parse_line(line_no, line))
    return events


def load_events_from_file(path: str | Path) -> list[Event]:
    """Load an mjai log from a file path."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReplayLoadError(f"Cannot read replay file {path}: {exc}") from exc
    return load_events_from_string(content)

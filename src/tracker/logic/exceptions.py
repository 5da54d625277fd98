"""Typed exceptions for the seat tracker.

Parse failures, rule violations and invariant breaches are kept apart so the
caller can treat them differently: the first two are per-call and
recoverable, an invariant breach halts the tracker instance.
"""


class TrackerError(Exception):
    """Base exception for everything the tracker raises."""


class MalformedEventError(TrackerError):
    """An event does not match the protocol schema. No state was touched."""


class MalformedActionError(TrackerError):
    """A proposed action does not match the protocol schema."""


class RuleViolation(TrackerError):
    """A well-formed action is not legal in the current state.

    Attributes:
        action: The action type that was attempted (e.g. "dahai", "pon").
        reason: Human-readable description of the unmet condition.

    """

    def __init__(self, *, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"invalid {action}: {reason}")


class InvalidDiscardError(RuleViolation):
    """Tile cannot be discarded (not in hand, kuikae restriction, riichi lock, etc.)."""


class InvalidMeldError(RuleViolation):
    """Chi or pon call is not available on the current discard."""


class InvalidKanError(RuleViolation):
    """Kan declaration (open, closed or added) is not available."""


class InvalidRiichiError(RuleViolation):
    """Riichi declaration conditions not met."""


class InvalidWinError(RuleViolation):
    """Tsumo or ron is not available."""


class InvalidRyukyokuError(RuleViolation):
    """Abortive draw declaration is not available."""


class InvalidPassError(RuleViolation):
    """There is nothing to pass on."""


class TrackerInvariantError(TrackerError):
    """Internal state became inconsistent with the event stream.

    Indicates an upstream protocol/engine mismatch. The owning tracker halts
    and refuses further events.
    """


class TrackerHaltedError(TrackerError):
    """An event was applied to a tracker that already hit an invariant breach."""


class TrackerFinishedError(TrackerError):
    """An event was applied after end_game."""


class UnsupportedSettingsError(TrackerError):
    """Tracker settings contain values the rules engine cannot honor."""

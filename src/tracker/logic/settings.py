"""Ruleset configuration for the seat tracker."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from tracker.logic.enums import GameType
from tracker.logic.exceptions import UnsupportedSettingsError

NUM_PLAYERS = 4


class TrackerSettings(BaseModel):
    """
    Ruleset knobs consulted by the tracker and the action resolver.

    Defaults follow the common competitive ruleset (Tenhou / Mahjong Soul).
    """

    model_config = ConfigDict(frozen=True)

    # --- Game Structure ---
    game_type: GameType = GameType.HANCHAN
    starting_score: int = 25000
    live_wall_size: int = 70
    max_dora_indicators: int = 5
    max_kawa_size: int = 24

    # --- Riichi ---
    riichi_cost: int = 1000
    min_wall_for_riichi: int = 4
    # any call anywhere before the tracked seat's first discard forfeits double riichi;
    # when False only the tracked seat's own calls do
    double_riichi_forfeit_on_any_call: bool = True
    # closed kan after riichi is accepted (drawn kind only, waits must not change)
    allow_ankan_in_riichi: bool = True

    # --- Meld Rules ---
    has_kuikae: bool = True
    has_kuikae_suji: bool = True
    min_wall_for_kan: int = 1
    max_kans_per_round: int = 4

    # --- Abortive Draw Rules ---
    has_kyuushu_kyuuhai: bool = True
    kyuushu_min_types: int = 9
    has_suukaikan: bool = True
    min_players_for_kan_abort: int = 2


def validate_settings(settings: TrackerSettings) -> None:
    """Validate that all settings values are supported by the tracker.

    Raises UnsupportedSettingsError listing every offending value.
    """
    errors: list[str] = []

    if settings.max_kans_per_round != NUM_PLAYERS:
        errors.append(f"max_kans_per_round={settings.max_kans_per_round} is not supported (only 4)")

    if not 1 <= settings.max_dora_indicators <= 5:  # noqa: PLR2004
        errors.append(f"max_dora_indicators={settings.max_dora_indicators} must be in [1, 5]")

    if settings.max_kawa_size < 1:
        errors.append(f"max_kawa_size={settings.max_kawa_size} must be positive")

    if settings.min_wall_for_riichi < 0 or settings.min_wall_for_kan < 0:
        errors.append("wall minimums must not be negative")

    if settings.riichi_cost < 0:
        errors.append(f"riichi_cost={settings.riichi_cost} must not be negative")

    if not 1 <= settings.kyuushu_min_types <= 13:  # noqa: PLR2004
        errors.append(f"kyuushu_min_types={settings.kyuushu_min_types} must be in [1, 13]")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))

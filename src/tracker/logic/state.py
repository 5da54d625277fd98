"""
Single-seat game state for riichi mahjong.

PlayerState follows one seat through an mjai event stream. Seats inside the
state are relative to the tracked seat: index 0 is the tracked seat, 1 the
next seat in turn order (shimocha), 2 the opposite seat (toimen) and 3 the
upstream seat (kamicha).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import structlog

from tracker.logic.candidates import resolve_candidates
from tracker.logic.enums import DecisionWindow, GameType, MeldType
from tracker.logic.exceptions import (
    TrackerFinishedError,
    TrackerHaltedError,
    TrackerInvariantError,
)
from tracker.logic.furiten import is_furiten, update_permanent_furiten
from tracker.logic.render import render_snapshot
from tracker.logic.settings import NUM_PLAYERS, TrackerSettings, validate_settings
from tracker.logic.shanten import NOT_TENPAI, calculate_shanten, discard_shanten
from tracker.logic.tiles import (
    EAST_34,
    MAX_TILE_COPIES,
    NORTH_34,
    NUM_TILE_TYPES,
    RED_FIVE_KINDS,
    SOUTH_34,
    WEST_34,
    Tile,
    dora_from_indicator,
    red_index,
    wind_from_offset,
)
from tracker.logic.types import ActionCandidate
from tracker.logic.update import apply_event
from tracker.logic.validation import validate_action
from tracker.logic.win import get_waits
from tracker.messaging.actions import parse_action_json
from tracker.messaging.events import parse_event_json

if TYPE_CHECKING:
    from tracker.messaging.actions import Action
    from tracker.messaging.events import Event

logger = structlog.get_logger()

T = TypeVar("T")

MAX_MELDS = 4
MAX_MELD_TILES = 4
HAND_SIZES = (13, 14)  # concealed + 3 per meld, before and after a draw
NUM_RED_FIVES = len(RED_FIVE_KINDS)


def push_bounded(items: list[T], item: T, capacity: int, what: str) -> None:
    """Append to a fixed-capacity sequence, raising TrackerInvariantError on overflow."""
    if len(items) >= capacity:
        raise TrackerInvariantError(f"{what} overflow: capacity {capacity} exceeded")
    items.append(item)


@dataclass
class DiscardRecord:
    """
    One entry of a seat's kawa.
    """

    tile: Tile
    tsumogiri: bool = False  # discarded straight after the draw
    riichi: bool = False  # the riichi declaration tile
    called: bool = False  # taken by another seat's chi, pon or open kan
    turn: int = 0  # table-wide discard index within the hand
    meld_before: tuple[Tile, ...] | None = None  # chi/pon made right before this discard
    kans_before: tuple[Tile, ...] = ()  # kans declared since the seat's previous discard

    def __str__(self) -> str:
        marks = ("t" if self.tsumogiri else "") + ("*" if self.riichi else "") + ("^" if self.called else "")
        return f"{self.tile}{marks}"


@dataclass
class PendingCall:
    """A chi or pon waiting for the caller's follow-up discard."""

    actor: int
    meld_type: MeldType
    tiles: tuple[Tile, ...]
    kuikae_kinds: list[int] = field(default_factory=list)  # tracked seat only


@dataclass
class PendingKan:
    """Kans declared by one seat since its last discard (rinshan draws in between)."""

    actor: int
    tiles: list[Tile] = field(default_factory=list)


class PlayerState:
    """
    Incrementally maintained view of the table from one seat.

    Feed every mjai event in protocol order to `apply`; it returns the set of
    actions the tracked seat may take in response. `validate` checks a
    proposed reaction against the same state without mutating it.
    """

    def __init__(self, player_id: int, settings: TrackerSettings | None = None) -> None:
        if not 0 <= player_id < NUM_PLAYERS:
            raise ValueError(f"player_id must be in [0, {NUM_PLAYERS - 1}], got {player_id}")
        self.settings = settings or TrackerSettings()
        validate_settings(self.settings)
        self.player_id = player_id
        self.halted = False
        self.game_finished = False
        self.reset_game()

    # --- lifecycle ---

    def reset_game(self) -> None:
        """Reset everything except the seat identity."""
        self.bakaze = EAST_34
        self.kyoku = 1
        self.honba = 0
        self.kyotaku = 0
        self.scores = [self.settings.starting_score] * NUM_PLAYERS
        self.oya = (NUM_PLAYERS - self.player_id) % NUM_PLAYERS
        self.jikaze = wind_from_offset(self.player_id)
        self.rank = 0
        self.update_rank()
        self.is_all_last = False
        self.hand_in_progress = False
        self.reset_hand()

    def reset_hand(self) -> None:
        """Clear all hand-scoped fields; scores and round counters are kept."""
        # wall
        self.dora_indicators: list[Tile] = []
        self.tiles_left = self.settings.live_wall_size

        # per seat, relative
        self.kawa: list[list[DiscardRecord]] = [[] for _ in range(NUM_PLAYERS)]
        self.kawa_overview: list[list[Tile]] = [[] for _ in range(NUM_PLAYERS)]
        self.fuuro_overview: list[list[list[Tile]]] = [[] for _ in range(NUM_PLAYERS)]
        self.ankan_overview: list[list[int]] = [[] for _ in range(NUM_PLAYERS)]
        self.riichi_declared = [False] * NUM_PLAYERS
        self.riichi_accepted = [False] * NUM_PLAYERS
        self.kans_per_seat = [0] * NUM_PLAYERS
        self.doras_owned = [0] * NUM_PLAYERS

        # tracked seat melds, by kind (chi recorded by its lowest kind)
        self.chis: list[int] = []
        self.pons: list[int] = []
        self.minkans: list[int] = []
        self.ankans: list[int] = []

        # concealed hand
        self.tehai = [0] * NUM_TILE_TYPES
        self.akas_in_hand = [False] * NUM_RED_FIVES
        self.waits = [False] * NUM_TILE_TYPES
        self.dora_factor = [0] * NUM_TILE_TYPES
        self.tiles_seen = [0] * NUM_TILE_TYPES
        self.discard_shanten: list[int | None] = [None] * NUM_TILE_TYPES
        self.keep_shanten_discards = [False] * NUM_TILE_TYPES
        self.next_shanten_discards = [False] * NUM_TILE_TYPES
        self.forbidden_tiles = [False] * NUM_TILE_TYPES
        self.discarded_tiles = [False] * NUM_TILE_TYPES
        self.shanten = NOT_TENPAI
        self.tehai_len_div3 = 0

        # transient call state
        self.pending_call: PendingCall | None = None
        self.pending_kan: PendingKan | None = None

        # transient turn flags
        self.window = DecisionWindow.NONE
        self.last_self_tsumo: Tile | None = None
        self.last_kawa_tile: Tile | None = None
        self.last_discarder: int | None = None
        self.last_kan_tile: Tile | None = None
        self.last_kan_actor: int | None = None
        self.last_cans = ActionCandidate()
        self.ankan_candidates: list[int] = []
        self.kakan_candidates: list[int] = []
        self.chankan_chance = False
        self.any_call_made = False
        self.can_w_riichi = True
        self.is_w_riichi = False
        self.at_rinshan = False
        self.at_ippatsu = False
        self.at_furiten = False
        self.same_cycle_furiten = False
        self.to_mark_same_cycle_furiten = False
        self.kans_on_board = 0
        self.is_menzen = True
        self.doras_seen = 0
        self.akas_seen = 0
        self.discard_count = 0

    # --- public API ---

    def apply(self, event: Event, *, can_act: bool = True) -> ActionCandidate:
        """
        Apply one event and return what the tracked seat may do in response.

        With `can_act=False` (or an event carrying `"can_act": false`) all
        bookkeeping is updated but no candidates are derived.
        """
        if self.halted:
            raise TrackerHaltedError(f"tracker for seat {self.player_id} is halted")
        if self.game_finished:
            raise TrackerFinishedError(f"game already ended, got {event.type} event")

        try:
            apply_event(self, event)
            self.check_invariants()
        except TrackerInvariantError:
            self.halted = True
            logger.warning("tracker halted on invariant breach", player_id=self.player_id, event_type=event.type)
            raise

        if event.can_act is False:
            can_act = False
        self.last_cans = resolve_candidates(self) if can_act else ActionCandidate()
        logger.debug(
            "event applied",
            player_id=self.player_id,
            event_type=event.type,
            window=self.window,
            can_act=self.last_cans.can_act,
        )
        return self.last_cans

    def update_json(self, line: str | bytes, *, can_act: bool = True) -> ActionCandidate:
        """Parse one JSON mjai event and apply it."""
        return self.apply(parse_event_json(line), can_act=can_act)

    def validate(self, action: Action) -> None:
        """Raise a RuleViolation if the action is not legal right now."""
        validate_action(self, action)

    def validate_json(self, line: str | bytes) -> None:
        self.validate(parse_action_json(line))

    def render_snapshot(self) -> str:
        return render_snapshot(self)

    # --- seats ---

    def rel(self, seat: int) -> int:
        """Absolute seat id to index relative to the tracked seat."""
        return (seat - self.player_id) % NUM_PLAYERS

    def abs_seat(self, rel: int) -> int:
        return (self.player_id + rel) % NUM_PLAYERS

    @property
    def is_furiten(self) -> bool:
        return is_furiten(self)

    @property
    def hand_length(self) -> int:
        return sum(self.tehai)

    @property
    def meld_count(self) -> int:
        return len(self.fuuro_overview[0]) + len(self.ankan_overview[0])

    # --- round context ---

    def load_round(
        self,
        *,
        bakaze: int,
        kyoku: int,
        honba: int,
        kyotaku: int,
        oya: int,
        scores: tuple[int, ...],
    ) -> None:
        self.bakaze = bakaze
        self.kyoku = kyoku
        self.honba = honba
        self.kyotaku = kyotaku
        self.oya = self.rel(oya)
        self.jikaze = wind_from_offset(NUM_PLAYERS - self.oya)
        self.scores = [scores[self.abs_seat(i)] for i in range(NUM_PLAYERS)]
        self.update_rank()
        self.is_all_last = self._is_all_last()

    def update_rank(self) -> None:
        """0-based placing of the tracked seat; ties go to the lower absolute seat."""
        own = (-self.scores[0], self.player_id)
        self.rank = sum(
            1 for rel in range(1, NUM_PLAYERS) if (-self.scores[rel], self.abs_seat(rel)) < own
        )

    def _is_all_last(self) -> bool:
        last_kyoku = self.kyoku == NUM_PLAYERS
        if self.settings.game_type == GameType.TONPUSEN:
            return (self.bakaze == EAST_34 and last_kyoku) or self.bakaze in (SOUTH_34, WEST_34, NORTH_34)
        return (self.bakaze == SOUTH_34 and last_kyoku) or self.bakaze in (WEST_34, NORTH_34)

    # --- tiles ---

    def dora_weight(self, tile: Tile) -> int:
        return self.dora_factor[tile.kind] + int(tile.red)

    def witness_tile(self, tile: Tile) -> None:
        """Count a tile that became visible to the tracked seat."""
        self.tiles_seen[tile.kind] += 1
        if self.tiles_seen[tile.kind] > MAX_TILE_COPIES:
            raise TrackerInvariantError(f"more than {MAX_TILE_COPIES} copies of {tile} seen")
        if tile.red:
            self.akas_seen += 1
        self.doras_seen += self.dora_weight(tile)

    def add_to_hand(self, tile: Tile) -> None:
        """Take a newly visible tile into the concealed hand."""
        self.witness_tile(tile)
        self.tehai[tile.kind] += 1
        if tile.red:
            red = red_index(tile.kind)
            if red is None or self.akas_in_hand[red]:
                raise TrackerInvariantError(f"second red five {tile} in hand")
            self.akas_in_hand[red] = True
        self.doras_owned[0] += self.dora_weight(tile)

    def remove_from_hand(self, tile: Tile) -> None:
        if not self.holds(tile):
            raise TrackerInvariantError(f"{tile} is not in the hand of seat {self.player_id}")
        self.tehai[tile.kind] -= 1
        if tile.red:
            self.akas_in_hand[RED_FIVE_KINDS.index(tile.kind)] = False
        self.doras_owned[0] -= self.dora_weight(tile)

    def holds(self, tile: Tile, count: int = 1) -> bool:
        """Check the concealed hand has `count` copies of this exact tile (red flag included)."""
        red = red_index(tile.kind)
        has_red = red is not None and self.akas_in_hand[red]
        if tile.red:
            return has_red and count == 1
        plain = self.tehai[tile.kind] - int(has_red)
        return plain >= count

    def concealed_tiles(self) -> list[Tile]:
        """Distinct concrete tiles in hand, in kind order, the red five first."""
        tiles: list[Tile] = []
        for kind, count in enumerate(self.tehai):
            if count == 0:
                continue
            red = red_index(kind)
            has_red = red is not None and self.akas_in_hand[red]
            if has_red:
                tiles.append(Tile(kind, red=True))
            if count > int(has_red):
                tiles.append(Tile(kind))
        return tiles

    # --- dora ---

    def add_dora_indicator(self, indicator: Tile) -> None:
        push_bounded(self.dora_indicators, indicator, self.settings.max_dora_indicators, "dora indicators")
        self.witness_tile(indicator)
        self.dora_factor[dora_from_indicator(indicator.kind)] += 1
        self.recount_doras()

    def recount_doras(self) -> None:
        """Recompute owned and seen dora counts after the dora weights changed."""
        self.doras_seen = sum(seen * factor for seen, factor in zip(self.tiles_seen, self.dora_factor)) + self.akas_seen
        for rel in range(NUM_PLAYERS):
            owned = sum(self.dora_weight(tile) for group in self.fuuro_overview[rel] for tile in group)
            for kind in self.ankan_overview[rel]:
                owned += self.dora_factor[kind] * MAX_TILE_COPIES + int(kind in RED_FIVE_KINDS)
            self.doras_owned[rel] = owned
        self.doras_owned[0] += sum(count * factor for count, factor in zip(self.tehai, self.dora_factor))
        self.doras_owned[0] += sum(self.akas_in_hand)

    # --- evaluator ---

    def update_shanten(self) -> None:
        """Refresh shanten and, for a hand holding a drawn tile, the discard advice bitsets."""
        self.tehai_len_div3 = self.hand_length // 3
        self.shanten = calculate_shanten(self.tehai)
        if self.hand_length % 3 == 2:  # noqa: PLR2004
            self.discard_shanten = discard_shanten(self.tehai)
            held = [s for s in self.discard_shanten if s is not None]
            best = min(held) if held else NOT_TENPAI
            self.keep_shanten_discards = [s == best for s in self.discard_shanten]
            self.next_shanten_discards = [s == best + 1 for s in self.discard_shanten]
        else:
            self.discard_shanten = [None] * NUM_TILE_TYPES
            self.keep_shanten_discards = [False] * NUM_TILE_TYPES
            self.next_shanten_discards = [False] * NUM_TILE_TYPES

    def update_waits(self) -> None:
        """Refresh the waits of a 3n+1 hand and apply the own-discard furiten check."""
        self.waits = get_waits(self.tehai)
        update_permanent_furiten(self)

    def update_kan_candidates(self) -> None:
        self.ankan_candidates = [kind for kind, count in enumerate(self.tehai) if count == MAX_TILE_COPIES]
        self.kakan_candidates = [kind for kind in self.pons if self.tehai[kind] > 0]

    # --- kawa and melds ---

    def push_discard(
        self,
        rel: int,
        tile: Tile,
        *,
        tsumogiri: bool,
        riichi: bool,
        meld_before: tuple[Tile, ...] | None,
        kans_before: tuple[Tile, ...],
    ) -> None:
        record = DiscardRecord(
            tile=tile,
            tsumogiri=tsumogiri,
            riichi=riichi,
            turn=self.discard_count,
            meld_before=meld_before,
            kans_before=kans_before,
        )
        capacity = self.settings.max_kawa_size
        push_bounded(self.kawa[rel], record, capacity, f"kawa of seat {rel}")
        push_bounded(self.kawa_overview[rel], tile, capacity, f"kawa overview of seat {rel}")
        self.discard_count += 1

    def push_meld(self, rel: int, tiles: list[Tile]) -> None:
        if len(tiles) > MAX_MELD_TILES:
            raise TrackerInvariantError(f"meld of {len(tiles)} tiles")
        push_bounded(self.fuuro_overview[rel], tiles, MAX_MELDS - len(self.ankan_overview[rel]), f"melds of seat {rel}")

    def push_ankan(self, rel: int, kind: int) -> None:
        push_bounded(self.ankan_overview[rel], kind, MAX_MELDS - len(self.fuuro_overview[rel]), f"kans of seat {rel}")

    def set_pending_call(self, rel: int, meld_type: MeldType, tiles: tuple[Tile, ...], kuikae: list[int]) -> None:
        self.pending_call = PendingCall(actor=rel, meld_type=meld_type, tiles=tiles, kuikae_kinds=kuikae)

    def add_kan(self, rel: int) -> None:
        self.kans_per_seat[rel] += 1
        self.kans_on_board = min(self.kans_on_board + 1, self.settings.max_kans_per_round)

    def push_pending_kan(self, rel: int, tile: Tile) -> None:
        if self.pending_kan is None or self.pending_kan.actor != rel:
            self.pending_kan = PendingKan(actor=rel)
        self.pending_kan.tiles.append(tile)

    # --- invariants ---

    def check_invariants(self) -> None:
        """Raise TrackerInvariantError if the state no longer matches the rules."""
        for rel in range(NUM_PLAYERS):
            if len(self.kawa[rel]) > self.settings.max_kawa_size:
                raise TrackerInvariantError(f"kawa of seat {rel} exceeds {self.settings.max_kawa_size}")
            if len(self.fuuro_overview[rel]) + len(self.ankan_overview[rel]) > MAX_MELDS:
                raise TrackerInvariantError(f"seat {rel} holds more than {MAX_MELDS} melds")
        if len(self.dora_indicators) > self.settings.max_dora_indicators:
            raise TrackerInvariantError("too many dora indicators")
        if self.tiles_left < 0:
            raise TrackerInvariantError("wall counter went negative")
        if any(count < 0 or count > MAX_TILE_COPIES for count in self.tehai):
            raise TrackerInvariantError(f"impossible tile count in hand: {self.tehai}")
        if self.hand_in_progress and self.hand_length + 3 * self.meld_count not in HAND_SIZES:
            raise TrackerInvariantError(
                f"hand size {self.hand_length} with {self.meld_count} melds is inconsistent",
            )

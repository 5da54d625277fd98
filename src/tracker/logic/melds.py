"""
Meld rules for the tracked seat (chi, pon, kan) and meld shape checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tracker.logic.tiles import (
    MAX_TILE_COPIES,
    RED_FIVE_KINDS,
    TILES_PER_SUIT,
    Tile,
    is_honor,
    red_index,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

# meld size constants
TILES_FOR_PON = 2
TILES_FOR_OPEN_KAN = 3
TILES_FOR_CLOSED_KAN = 4

# chi sequence position limits (0-indexed tile values within a suit)
CHI_LOWEST_MAX_VALUE = 6  # tile can be lowest (e.g., 1 in 123) if value <= 6
CHI_MIDDLE_MIN_VALUE = 1  # tile can be middle if value >= 1
CHI_MIDDLE_MAX_VALUE = 7  # tile can be middle if value <= 7
CHI_HIGHEST_MIN_VALUE = 2  # tile can be highest (e.g., 3 in 123) if value >= 2


def is_run(kinds: Sequence[int]) -> bool:
    """Check that three kinds form a suited sequence (e.g. 3m 4m 5m)."""
    ordered = sorted(kinds)
    if len(ordered) != 3 or is_honor(ordered[0]) or is_honor(ordered[2]):  # noqa: PLR2004
        return False
    same_suit = ordered[0] // TILES_PER_SUIT == ordered[2] // TILES_PER_SUIT
    return same_suit and ordered[1] == ordered[0] + 1 and ordered[2] == ordered[0] + 2


def is_same_kind(tiles: Sequence[Tile]) -> bool:
    return len({t.kind for t in tiles}) == 1


def _tile_options(kind: int, tehai: list[int], akas_in_hand: list[bool]) -> list[Tile]:
    """Distinct concrete tiles of a kind available in hand (plain and/or red)."""
    count = tehai[kind]
    if count == 0:
        return []
    red = red_index(kind)
    if red is not None and akas_in_hand[red]:
        return [Tile(kind, red=True)] if count == 1 else [Tile(kind, red=True), Tile(kind)]
    return [Tile(kind)]


def _consumed_from_hand(kind: int, amount: int, tehai: list[int], akas_in_hand: list[bool]) -> list[tuple[Tile, ...]]:
    """Distinct ways to take `amount` tiles of one kind from hand, red variant considered."""
    count = tehai[kind]
    if count < amount:
        return []
    red = red_index(kind)
    has_red = red is not None and akas_in_hand[red]
    plain = count - 1 if has_red else count
    options: list[tuple[Tile, ...]] = []
    if has_red:
        options.append((Tile(kind, red=True), *([Tile(kind)] * (amount - 1))))
    if plain >= amount:
        options.append(tuple([Tile(kind)] * amount))
    return options


def find_chi_combinations(
    called: Tile,
    tehai: list[int],
    akas_in_hand: list[bool],
) -> list[tuple[Tile, Tile]]:
    """
    Find all pairs of concealed tiles that form a sequence with the called tile.

    Red and plain fives are reported as separate combinations.
    """
    kind = called.kind
    if is_honor(kind):
        return []

    value = kind % TILES_PER_SUIT
    pairs: list[tuple[int, int]] = []
    # called tile is lowest in sequence (e.g., 1 in 123)
    if value <= CHI_LOWEST_MAX_VALUE:
        pairs.append((kind + 1, kind + 2))
    # called tile is middle in sequence (e.g., 2 in 123)
    if CHI_MIDDLE_MIN_VALUE <= value <= CHI_MIDDLE_MAX_VALUE:
        pairs.append((kind - 1, kind + 1))
    # called tile is highest in sequence (e.g., 3 in 123)
    if value >= CHI_HIGHEST_MIN_VALUE:
        pairs.append((kind - 2, kind - 1))

    combinations: list[tuple[Tile, Tile]] = []
    for kind_a, kind_b in pairs:
        for tile_a in _tile_options(kind_a, tehai, akas_in_hand):
            combinations.extend((tile_a, tile_b) for tile_b in _tile_options(kind_b, tehai, akas_in_hand))
    return combinations


def find_pon_combinations(called: Tile, tehai: list[int], akas_in_hand: list[bool]) -> list[tuple[Tile, Tile]]:
    """Find the distinct pairs of concealed tiles that can pon the called tile."""
    return [(a, b) for a, b in _consumed_from_hand(called.kind, TILES_FOR_PON, tehai, akas_in_hand)]


def find_daiminkan_consumed(
    called: Tile,
    tehai: list[int],
    akas_in_hand: list[bool],
) -> tuple[Tile, Tile, Tile] | None:
    """The three concealed tiles an open kan on the called tile would use, if held."""
    if tehai[called.kind] != TILES_FOR_OPEN_KAN:
        return None
    a, b, c = _consumed_from_hand(called.kind, TILES_FOR_OPEN_KAN, tehai, akas_in_hand)[0]
    return a, b, c


def ankan_consumed(kind: int) -> tuple[Tile, ...]:
    """The four tiles of a closed kan, with the red five where the kind has one."""
    if kind in RED_FIVE_KINDS:
        return (Tile(kind, red=True), Tile(kind), Tile(kind), Tile(kind))
    return tuple([Tile(kind)] * MAX_TILE_COPIES)


def get_kuikae_kinds(called: Tile, consumed: Sequence[Tile], *, chi: bool, suji: bool = True) -> list[int]:
    """
    Compute kinds forbidden to discard right after a chi or pon (kuikae restriction).

    For pon: the called kind is forbidden.
    For chi: the called kind plus the suji kind at the opposite end of the sequence.
    """
    called_34 = called.kind
    forbidden = [called_34]

    if chi and suji:
        all_tiles = sorted([called_34, *(t.kind for t in consumed)])
        suit = called_34 // TILES_PER_SUIT

        if called_34 == all_tiles[0]:
            # called tile is the lowest in the sequence, suji extends one step beyond the highest
            suji_34 = all_tiles[2] + 1
            if suji_34 // TILES_PER_SUIT == suit:
                forbidden.append(suji_34)
        elif called_34 == all_tiles[2]:
            # called tile is the highest in the sequence, suji extends one step below the lowest
            suji_34 = all_tiles[0] - 1
            if suji_34 >= 0 and suji_34 // TILES_PER_SUIT == suit:
                forbidden.append(suji_34)
        # if called tile is middle, no suji kuikae applies

    return forbidden


def leaves_legal_discard(tehai: list[int], consumed: Sequence[Tile], forbidden: Sequence[int]) -> bool:
    """Check that some concealed tile outside the kuikae kinds remains after the call."""
    remaining = list(tehai)
    for tile in consumed:
        remaining[tile.kind] -= 1
    return any(count > 0 for kind, count in enumerate(remaining) if kind not in forbidden)

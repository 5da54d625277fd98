"""
Tile representation utilities for the seat tracker.

Tiles use the 34-kind index space plus an orthogonal red-five flag:
man 0-8, pin 9-17, sou 18-26, winds 27-30 (E, S, W, N), dragons 31-33 (P, F, C).
On the wire tiles use mjai notation ("1m", "5pr", "E", "?" for hidden).
"""

from __future__ import annotations

from typing import NamedTuple

NUM_TILE_TYPES = 34
MAX_TILE_COPIES = 4
TILES_PER_SUIT = 9

# tile ranges in 34-format (each unique tile type)
MAN_34_START = 0
MAN_34_END = 8
PIN_34_START = 9
PIN_34_END = 17
SOU_34_START = 18
SOU_34_END = 26
HONOR_34_START = 27
HONOR_34_END = 33

# honor tile indices in 34-format
EAST_34 = 27
SOUTH_34 = 28
WEST_34 = 29
NORTH_34 = 30
HAKU_34 = 31  # white dragon
HATSU_34 = 32  # green dragon
CHUN_34 = 33  # red dragon

WINDS_34 = [EAST_34, SOUTH_34, WEST_34, NORTH_34]
DRAGONS_34 = [HAKU_34, HATSU_34, CHUN_34]

# terminal tiles in 34-format (1 and 9 of each suit)
TERMINALS_34 = [0, 8, 9, 17, 18, 26]

# the fives that have a red variant, indexed by suit (man, pin, sou)
RED_FIVE_KINDS = (4, 13, 22)

UNKNOWN_TILE = "?"

_SUIT_CHARS = "mps"
_HONOR_CHARS = "ESWNPFC"


class Tile(NamedTuple):
    """A concrete tile: its 34-format kind and whether it is the red five."""

    kind: int
    red: bool = False

    def to_mjai(self) -> str:
        return tile_to_mjai(self)

    def deaka(self) -> Tile:
        return Tile(self.kind) if self.red else self

    def __str__(self) -> str:
        return tile_to_mjai(self)


def parse_tile(value: str) -> Tile:
    """
    Parse an mjai tile string ("3m", "5sr", "C") into a Tile.

    Raises ValueError for anything outside the 34 kinds, including "?".
    """
    if not isinstance(value, str):
        raise ValueError(f"tile must be a string, got {type(value).__name__}")
    if len(value) == 1 and value in _HONOR_CHARS:
        return Tile(HONOR_34_START + _HONOR_CHARS.index(value))

    red = False
    body = value
    if len(value) == 3 and value.endswith("r"):  # noqa: PLR2004
        red = True
        body = value[:2]
    if len(body) != 2 or not body[0].isdigit() or body[1] not in _SUIT_CHARS:  # noqa: PLR2004
        raise ValueError(f"invalid tile: {value!r}")

    number = int(body[0])
    if not 1 <= number <= TILES_PER_SUIT:
        raise ValueError(f"invalid tile number: {value!r}")
    kind = _SUIT_CHARS.index(body[1]) * TILES_PER_SUIT + number - 1
    if red and kind not in RED_FIVE_KINDS:
        raise ValueError(f"only fives can be red: {value!r}")
    return Tile(kind, red)


def parse_optional_tile(value: str | None) -> Tile | None:
    """Parse a tile that may be hidden ("?") by the protocol."""
    if value is None or value == UNKNOWN_TILE:
        return None
    return parse_tile(value)


def kind_to_mjai(kind: int) -> str:
    if not 0 <= kind < NUM_TILE_TYPES:
        raise ValueError(f"tile kind must be in [0, {NUM_TILE_TYPES - 1}], got {kind}")
    if kind >= HONOR_34_START:
        return _HONOR_CHARS[kind - HONOR_34_START]
    return f"{kind % TILES_PER_SUIT + 1}{_SUIT_CHARS[kind // TILES_PER_SUIT]}"


def tile_to_mjai(tile: Tile) -> str:
    text = kind_to_mjai(tile.kind)
    return f"{text}r" if tile.red else text


def red_index(kind: int) -> int | None:
    """Index into the per-suit red five vector, or None if the kind has no red variant."""
    try:
        return RED_FIVE_KINDS.index(kind)
    except ValueError:
        return None


def is_terminal(tile_34: int) -> bool:
    """
    Check if tile is a terminal (1 or 9 of any suit).
    """
    return tile_34 in TERMINALS_34


def is_honor(tile_34: int) -> bool:
    """
    Check if tile is an honor (wind or dragon).
    """
    return HONOR_34_START <= tile_34 <= HONOR_34_END


def is_terminal_or_honor(tile_34: int) -> bool:
    """
    Check if tile is terminal or honor (yaochuuhai).
    """
    return is_terminal(tile_34) or is_honor(tile_34)


def dora_from_indicator(indicator_34: int) -> int:
    """
    Return the dora kind pointed to by an indicator kind.

    Suits wrap 9 -> 1, winds wrap N -> E, dragons wrap C -> P.
    """
    if indicator_34 < HONOR_34_START:
        suit_start = indicator_34 - indicator_34 % TILES_PER_SUIT
        return suit_start + (indicator_34 - suit_start + 1) % TILES_PER_SUIT
    if indicator_34 <= NORTH_34:
        return EAST_34 + (indicator_34 - EAST_34 + 1) % len(WINDS_34)
    return HAKU_34 + (indicator_34 - HAKU_34 + 1) % len(DRAGONS_34)


def wind_from_offset(offset: int) -> int:
    """Wind kind for a seat sitting `offset` places after the dealer."""
    return EAST_34 + offset % len(WINDS_34)


def hand_to_34_array(tiles: list[Tile] | tuple[Tile, ...]) -> list[int]:
    """
    Convert a list of tiles to a 34-array (tile counts).

    The red flag is ignored: a red five counts as a plain five.
    """
    tiles_34 = [0] * NUM_TILE_TYPES
    for tile in tiles:
        tiles_34[tile.kind] += 1
    return tiles_34


def sort_tiles(tiles: list[Tile] | tuple[Tile, ...]) -> list[Tile]:
    """Sort tiles by kind, a red five before its plain copies."""
    return sorted(tiles, key=lambda t: (t.kind, not t.red))


def tiles_to_string(tiles_34: list[int], akas_in_hand: list[bool]) -> str:
    """
    Render a count vector in compact notation, e.g. "123m4506p11z".

    Red fives are written as 0, honors use the z suffix (1z = E ... 7z = C).
    """
    groups: list[str] = []
    for suit, suffix in enumerate("mpsz"):
        start = suit * TILES_PER_SUIT
        end = NUM_TILE_TYPES if suffix == "z" else start + TILES_PER_SUIT
        digits: list[str] = []
        for kind in range(start, end):
            count = tiles_34[kind]
            number = kind - start + 1
            red = red_index(kind)
            if red is not None and akas_in_hand[red] and count > 0:
                digits.append("0")
                count -= 1
            digits.extend(str(number) * count)
        if digits:
            groups.append("".join(digits) + suffix)
    return "".join(groups)

"""
Win detection for the tracked seat's concealed hand.

Only the concealed tiles are passed to the agari checker: declared melds are
complete groups already, so a concealed 3n+2 vector that decomposes into sets
and a pair is a winning shape.
"""

from mahjong.agari import Agari

from tracker.logic.tiles import MAX_TILE_COPIES, NUM_TILE_TYPES


def is_agari(tiles_34: list[int]) -> bool:
    """
    Check if the concealed tiles form a complete hand (sets + pair, chiitoitsu or kokushi).
    """
    if sum(tiles_34) % 3 != 2:  # noqa: PLR2004
        return False
    return Agari().is_agari(tiles_34)


def get_waits(tiles_34: list[int]) -> list[bool]:
    """
    Find all tile kinds that would complete a 3n+1 concealed hand.

    Kinds the hand already holds all copies of are never waits. The count
    vector is restored before returning.
    """
    waits = [False] * NUM_TILE_TYPES
    if sum(tiles_34) % 3 != 1:
        return waits

    agari = Agari()
    for tile_34 in range(NUM_TILE_TYPES):
        if tiles_34[tile_34] >= MAX_TILE_COPIES:
            continue
        tiles_34[tile_34] += 1
        if agari.is_agari(tiles_34):
            waits[tile_34] = True
        tiles_34[tile_34] -= 1
    return waits


"""Shanten calculation using xiangting (Rust)."""

import structlog
from xiangting import PlayerCount, calculate_replacement_number

logger = structlog.get_logger()

AGARI_STATE: int = -1

# Xiangting requires tile count to be 3n+1 or 3n+2.
# Other counts (empty hands, partially dealt hands) can't be tenpai.
NOT_TENPAI: int = 8


def calculate_shanten(tiles_34: list[int]) -> int:
    """Calculate the minimum shanten number across all hand patterns (regular, chiitoitsu, kokushi).

    Works for concealed hands of any 3n+1 / 3n+2 size, so melded tiles are
    simply left out of the count vector.
    """
    total = sum(tiles_34)
    if total == 0 or total % 3 not in (1, 2):
        if total > 0:
            logger.warning("unexpected tile count in shanten calculation", tile_count=total)
        return NOT_TENPAI
    return calculate_replacement_number(tiles_34, PlayerCount.FOUR) - 1


def discard_shanten(tiles_34: list[int]) -> list[int | None]:
    """Shanten after discarding one tile of each kind held in a 3n+2 hand.

    Kinds not held map to None. The count vector is restored before returning.
    """
    result: list[int | None] = [None] * len(tiles_34)
    for kind, count in enumerate(tiles_34):
        if count == 0:
            continue
        tiles_34[kind] -= 1
        result[kind] = calculate_shanten(tiles_34)
        tiles_34[kind] += 1
    return result

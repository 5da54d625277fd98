"""Shared field types for mjai wire models."""

from typing import Annotated

from pydantic import Field, PlainSerializer, PlainValidator

from tracker.logic.tiles import UNKNOWN_TILE, Tile, parse_optional_tile, parse_tile, tile_to_mjai


def _validate_tile(value: object) -> Tile:
    if isinstance(value, Tile):
        return value
    if isinstance(value, str):
        return parse_tile(value)
    raise ValueError(f"tile must be an mjai string, got {type(value).__name__}")


def _validate_optional_tile(value: object) -> Tile | None:
    if value is None or isinstance(value, Tile):
        return value
    if isinstance(value, str):
        return parse_optional_tile(value)
    raise ValueError(f"tile must be an mjai string, got {type(value).__name__}")


def _serialize_optional_tile(value: Tile | None) -> str:
    return UNKNOWN_TILE if value is None else tile_to_mjai(value)


TileField = Annotated[
    Tile,
    PlainValidator(_validate_tile),
    PlainSerializer(tile_to_mjai, return_type=str),
]

# "?" on the wire: the protocol hides the tile from this seat
HiddenTileField = Annotated[
    Tile | None,
    PlainValidator(_validate_optional_tile),
    PlainSerializer(_serialize_optional_tile, return_type=str),
]

Seat = Annotated[int, Field(ge=0, le=3)]

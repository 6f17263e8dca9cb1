"""Data models for tiles and tokens."""

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, model_validator
from typing_extensions import assert_never

from catan_gen.map.hexes import HexCoord

if TYPE_CHECKING:
    from catan_gen.data.template import Template


class TileType(str, Enum):
    """Terrain type of a tile (including unresolved markers)."""

    EMPTY = "empty"  # any valid type allowed
    PLACEHOLDER = "placeholder"  # any land type allowed
    WATER = "water"
    DESERT = "desert"
    SHEEP = "sheep"
    FOREST = "forest"
    FIELD = "field"
    MOUNTAIN = "mountain"
    CLAY = "clay"
    GOLD = "gold"

    @property
    def code(self) -> int:
        """Integer encoding used in the constraint model."""
        return _TILE_TYPE_CODES[self]

    @classmethod
    def from_code(cls, value: int) -> "TileType":
        """Decode from the integer encoding."""
        for tt, tt_code in _TILE_TYPE_CODES.items():
            if tt_code == value:
                return tt
        raise ValueError(f"No tile type exists for integer: {value}")

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.capitalize()

    @property
    def is_valid(self) -> bool:
        """Whether this type may appear on a finished board."""
        return self in VALID_TYPES

    @property
    def is_land(self) -> bool:
        """Valid non-water type."""
        return self in LAND_TYPES

    @property
    def is_resource(self) -> bool:
        """Resource-producing type (carries a token)."""
        return self in RESOURCE_TYPES


_TILE_TYPE_CODES: dict[TileType, int] = {
    TileType.EMPTY: 0,
    TileType.PLACEHOLDER: 1,
    TileType.WATER: 2,
    TileType.DESERT: 3,
    TileType.SHEEP: 4,
    TileType.FOREST: 5,
    TileType.FIELD: 6,
    TileType.MOUNTAIN: 7,
    TileType.CLAY: 8,
    TileType.GOLD: 9,
}

RESOURCE_TYPES: tuple[TileType, ...] = (
    TileType.SHEEP,
    TileType.FOREST,
    TileType.FIELD,
    TileType.MOUNTAIN,
    TileType.CLAY,
    TileType.GOLD,
)
NON_RESOURCE_TYPES: tuple[TileType, ...] = (TileType.WATER, TileType.DESERT)
LAND_TYPES: tuple[TileType, ...] = (TileType.DESERT,) + RESOURCE_TYPES
VALID_TYPES: tuple[TileType, ...] = (TileType.WATER,) + LAND_TYPES


class Token(str, Enum):
    """Number token placed on resource tiles (there is no 7)."""

    TWO = "two"
    THREE = "three"
    FOUR = "four"
    FIVE = "five"
    SIX = "six"
    EIGHT = "eight"
    NINE = "nine"
    TEN = "ten"
    ELEVEN = "eleven"
    TWELVE = "twelve"

    @property
    def code(self) -> int:
        """Face value, also used as the integer encoding."""
        return _TOKEN_CODES[self]

    @property
    def pips(self) -> int:
        """Number of two-dice combinations rolling this value."""
        return _TOKEN_PIPS[self]

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return str(self.code)

    @classmethod
    def from_code(cls, value: int) -> "Token":
        """Get a token by its face value."""
        for tk, tk_code in _TOKEN_CODES.items():
            if tk_code == value:
                return tk
        raise ValueError(f"No token exists for value: {value}")


_TOKEN_CODES: dict[Token, int] = {
    Token.TWO: 2,
    Token.THREE: 3,
    Token.FOUR: 4,
    Token.FIVE: 5,
    Token.SIX: 6,
    Token.EIGHT: 8,
    Token.NINE: 9,
    Token.TEN: 10,
    Token.ELEVEN: 11,
    Token.TWELVE: 12,
}

_TOKEN_PIPS: dict[Token, int] = {
    Token.TWO: 1,
    Token.THREE: 2,
    Token.FOUR: 3,
    Token.FIVE: 4,
    Token.SIX: 5,
    Token.EIGHT: 5,
    Token.NINE: 4,
    Token.TEN: 3,
    Token.ELEVEN: 2,
    Token.TWELVE: 1,
}

TOKEN_NONE = 0
"""Integer encoding for 'no token' (water, desert)."""

HIGH_PROBABILITY_TOKENS: tuple[Token, ...] = tuple(
    tk for tk in Token if tk.pips == max(_TOKEN_PIPS.values())
)


class Tile(BaseModel):
    """A tile on the hex field, possibly unresolved (empty or placeholder)."""

    model_config = ConfigDict(frozen=True)

    position: HexCoord
    type: TileType = TileType.EMPTY
    token: Token | None = None

    @model_validator(mode="after")
    def _check_token(self) -> "Tile":
        """Resource tiles carry a token; nothing else does."""
        if self.type.is_resource and self.token is None:
            raise ValueError(f"Resource tile {self.type.value!r} requires a token")
        if not self.type.is_resource and self.token is not None:
            raise ValueError(f"Tile of type {self.type.value!r} cannot have a token")
        return self

    @classmethod
    def empty(cls, position: HexCoord) -> "Tile":
        """Unresolved tile, may become any valid type."""
        return cls(position=position, type=TileType.EMPTY)

    @classmethod
    def placeholder(cls, position: HexCoord) -> "Tile":
        """Unresolved tile, may become any land type."""
        return cls(position=position, type=TileType.PLACEHOLDER)

    @property
    def is_valid(self) -> bool:
        """Whether the tile is fixed to a valid type."""
        return self.type.is_valid

    @property
    def is_resource(self) -> bool:
        """Whether the tile is fixed to a resource type."""
        return self.type.is_resource

    def allowed_substitutes(self) -> tuple[TileType, ...]:
        """Types this tile may take on a finished board."""
        match self.type:
            case TileType.EMPTY:
                return VALID_TYPES
            case TileType.PLACEHOLDER:
                return tuple(tt for tt in VALID_TYPES if tt.is_land)
            case (
                TileType.WATER
                | TileType.DESERT
                | TileType.SHEEP
                | TileType.FOREST
                | TileType.FIELD
                | TileType.MOUNTAIN
                | TileType.CLAY
                | TileType.GOLD
            ):
                return (self.type,)
            case _:
                assert_never(self.type)

    def allowed_substitutes_for_template(
        self, template: "Template"
    ) -> tuple[TileType, ...]:
        """Allowed substitutes which the template requires at least once."""
        return tuple(
            tt for tt in self.allowed_substitutes() if template.type_count(tt) > 0
        )

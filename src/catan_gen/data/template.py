"""Board templates: required tile type and token counts."""

from typing import TYPE_CHECKING

from typing_extensions import Annotated
from pydantic import BaseModel, ConfigDict, NonNegativeInt, ValidationInfo
from pydantic import Field as PydField
from pydantic import field_validator

from catan_gen.data.models import RESOURCE_TYPES, VALID_TYPES, TileType, Token
from catan_gen.errors import IncompatibleTemplateError

if TYPE_CHECKING:
    from catan_gen.map.field import Field

DEFAULT_DESERT_COUNT = 1
DEFAULT_TOKEN_COUNTS: dict[Token, int] = {
    Token.TWO: 1,
    Token.THREE: 2,
    Token.FOUR: 2,
    Token.FIVE: 2,
    Token.SIX: 2,
    Token.EIGHT: 2,
    Token.NINE: 2,
    Token.TEN: 2,
    Token.ELEVEN: 2,
    Token.TWELVE: 1,
}


class Template(BaseModel):
    """Required number of tiles per type and tokens per value.

    Keys that are missing count as zero.
    """

    model_config = ConfigDict(frozen=True)

    tile_types: dict[TileType, NonNegativeInt] = {}
    tokens: dict[Token, NonNegativeInt] = {}

    @field_validator("tile_types", mode="after")
    @classmethod
    def _check_valid_types(cls, v: dict[TileType, int]) -> dict[TileType, int]:
        """Only valid types can be required."""
        bad = [tt.value for tt in v if not tt.is_valid]
        if bad:
            raise ValueError(f"Templates can only count valid tile types, got: {bad}")
        return v

    # Counts

    @property
    def size(self) -> int:
        """Total number of tiles required."""
        return sum(self.tile_types.values())

    @property
    def resource_slot_count(self) -> int:
        """Number of resource tiles, i.e. how many tokens can be placed."""
        return sum(self.type_count(tt) for tt in RESOURCE_TYPES)

    @property
    def token_total(self) -> int:
        """Total number of tokens required."""
        return sum(self.tokens.values())

    def type_count(self, tile_type: TileType) -> int:
        """Required count for a tile type."""
        return self.tile_types.get(tile_type, 0)

    def token_count(self, token: Token) -> int:
        """Required count for a token."""
        return self.tokens.get(token, 0)

    def allowed_types(self) -> list[TileType]:
        """Valid types with a positive count."""
        return [tt for tt in VALID_TYPES if self.type_count(tt) > 0]

    def allowed_resource_types(self) -> list[TileType]:
        """Resource types with a positive count."""
        return [tt for tt in RESOURCE_TYPES if self.type_count(tt) > 0]

    def allowed_tokens(self) -> list[Token]:
        """Tokens with a positive count."""
        return [tk for tk in Token if self.token_count(tk) > 0]

    # Field compatibility

    def is_compatible_with_field(self, field: "Field") -> bool:
        """Check that the field could be completed to match this template.

        Sizes must match, and tiles already fixed on the field may not exceed
        the required count for their type or token.
        """
        if self.size != field.size:
            return False
        for tt in VALID_TYPES:
            if field.count_by_type(tt) > self.type_count(tt):
                return False
        for tk in Token:
            if field.count_by_token(tk) > self.token_count(tk):
                return False
        return True

    def _ensure_compatible(self, field: "Field") -> None:
        if not self.is_compatible_with_field(field):
            raise IncompatibleTemplateError(
                f"Template of size {self.size} is not compatible with "
                f"field of size {field.size}"
            )

    def get_unset_types(self, field: "Field") -> list[TileType]:
        """Types that are not yet placed on the field in full quantity."""
        self._ensure_compatible(field)
        return [
            tt for tt in VALID_TYPES if field.count_by_type(tt) < self.type_count(tt)
        ]

    def get_unset_tokens(self, field: "Field") -> list[Token]:
        """Tokens that are not yet placed on the field in full quantity."""
        self._ensure_compatible(field)
        return [tk for tk in Token if field.count_by_token(tk) < self.token_count(tk)]

    # Editing

    def with_type_count(self, tile_type: TileType, count: int) -> "Template":
        """New template with a changed tile type count."""
        return Template(
            tile_types={**self.tile_types, tile_type: count}, tokens=self.tokens
        )

    def with_token_count(self, token: Token, count: int) -> "Template":
        """New template with a changed token count."""
        return Template(tile_types=self.tile_types, tokens={**self.tokens, token: count})

    # Factories

    @classmethod
    def empty(cls) -> "Template":
        """Template requiring nothing."""
        return cls(
            tile_types={tt: 0 for tt in VALID_TYPES}, tokens={tk: 0 for tk in Token}
        )

    @classmethod
    def default(cls, field_size: int) -> "Template":
        """Balanced default template for a field with `field_size` tiles.

        One desert; the rest is split evenly across resource types, earlier
        types getting the remainder. Token counts are fixed and do not depend
        on the field size.
        """
        if field_size < DEFAULT_DESERT_COUNT:
            raise ValueError(f"Field too small for a default template: {field_size}")
        land_slots = field_size - DEFAULT_DESERT_COUNT
        per_type, remaining = divmod(land_slots, len(RESOURCE_TYPES))

        tile_types: dict[TileType, int] = {
            TileType.WATER: 0,
            TileType.DESERT: DEFAULT_DESERT_COUNT,
        }
        for i, tt in enumerate(RESOURCE_TYPES):
            tile_types[tt] = per_type + (1 if i < remaining else 0)
        return cls(tile_types=tile_types, tokens=dict(DEFAULT_TOKEN_COUNTS))


def hex_region_size(radius: int) -> int:
    """Number of cells in a hex region of `radius`."""
    return 3 * radius * radius + 3 * radius + 1


class TemplatePreset(BaseModel):
    """Named template definition, as stored in YAML."""

    name: str
    description: str = ""
    radius: Annotated[int, PydField(ge=0, description="Radius of the board.")]
    tile_types: dict[TileType, NonNegativeInt]
    tokens: dict[Token, NonNegativeInt] = {}

    @field_validator("tile_types", mode="after")
    @classmethod
    def _check_size(
        cls, v: dict[TileType, int], info: ValidationInfo
    ) -> dict[TileType, int]:
        """Ensure tile counts fill the board."""
        radius = info.data.get("radius")
        if radius is not None and sum(v.values()) != hex_region_size(radius):
            raise ValueError(
                f"Expected {hex_region_size(radius)} tiles for radius {radius}, "
                f"got: {sum(v.values())}"
            )
        return v

    def to_template(self) -> Template:
        """Convert to a template."""
        return Template(tile_types=self.tile_types, tokens=self.tokens)

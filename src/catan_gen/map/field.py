"""Hexagonal field of tiles."""

from typing import Iterable

from pydantic import BaseModel, ConfigDict, field_validator

from catan_gen.data.models import Tile, TileType, Token
from catan_gen.errors import TileNotFoundError
from catan_gen.map.hexes import ORIGIN, CoordLike, HexCoord, to_coord

NeighborPair = tuple[int, int]
Intersection = tuple[int, int, int]


class Field(BaseModel):
    """Ordered, fixed-size collection of tiles on a hex grid.

    The tile order is canonical: it defines variable indices in the solver
    and is preserved by every operation returning a new field.
    """

    model_config = ConfigDict(frozen=True)

    tiles: tuple[Tile, ...] = ()

    @field_validator("tiles", mode="after")
    @classmethod
    def _check_unique_positions(cls, v: tuple[Tile, ...]) -> tuple[Tile, ...]:
        """Ensure that no two tiles share a position."""
        seen: set[HexCoord] = set()
        for tile in v:
            if tile.position in seen:
                raise ValueError(f"Duplicate tile position: {tile.position.key}")
            seen.add(tile.position)
        return v

    # Construction

    @classmethod
    def empty(cls, radius: int) -> "Field":
        """Create a field of empty tiles covering a hex region of `radius`."""
        if radius < 0:
            raise ValueError(f"Radius must be non-negative, got: {radius}")
        return cls(tiles=tuple(Tile.empty(c) for c in ORIGIN.get_neighborhood(radius)))

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile]) -> "Field":
        """Create a field from tiles, keeping their order."""
        return cls(tiles=tuple(tiles))

    # Lookups

    def __len__(self) -> int:
        return len(self.tiles)

    @property
    def size(self) -> int:
        """Number of tiles."""
        return len(self.tiles)

    @property
    def positions(self) -> list[HexCoord]:
        """Tile positions, in canonical order."""
        return [t.position for t in self.tiles]

    @property
    def is_resolved(self) -> bool:
        """Whether every tile has a valid (final) type."""
        return all(t.is_valid for t in self.tiles)

    def _index_by_key(self) -> dict[str, int]:
        """Map position keys to tile indices."""
        return {t.position.key: i for i, t in enumerate(self.tiles)}

    def index_of(self, position: CoordLike) -> int:
        """Get index of the tile at the position."""
        coord = to_coord(position)
        idx = self._index_by_key().get(coord.key)
        if idx is None:
            raise TileNotFoundError(coord)
        return idx

    def get_tile(self, position: CoordLike) -> Tile:
        """Get the tile at the position."""
        return self.tiles[self.index_of(position)]

    def count_by_type(self, tile_type: TileType) -> int:
        """Number of tiles of a type."""
        return sum(1 for t in self.tiles if t.type == tile_type)

    def count_by_token(self, token: Token) -> int:
        """Number of tiles carrying a token."""
        return sum(1 for t in self.tiles if t.token == token)

    # Editing

    def replace_tile(self, target: Tile | CoordLike, replacement: Tile) -> "Field":
        """Return a new field with the tile at the target position replaced."""
        position = target.position if isinstance(target, Tile) else to_coord(target)
        idx = self.index_of(position)
        if replacement.position != position:
            raise ValueError(
                f"Replacement at {replacement.position.key} must keep position "
                f"{position.key}"
            )
        tiles = list(self.tiles)
        tiles[idx] = replacement
        return Field(tiles=tuple(tiles))

    # Topology

    def neighbor_pairs(self) -> list[NeighborPair]:
        """Pairs of indices `(i, j)`, `i < j`, of neighboring tiles."""
        index_by_key = self._index_by_key()
        res: list[NeighborPair] = []
        for i, tile in enumerate(self.tiles):
            for nb in tile.position.neighbors:
                j = index_by_key.get(nb.key)
                if j is not None and j > i:
                    res.append((i, j))
        return res

    def intersection_triples(self) -> list[Intersection]:
        """Sorted triples of indices of tiles meeting at a single vertex.

        A vertex is emitted by its lowest-index tile only, so each appears once.
        Vertices on the border of the field touch fewer than 3 tiles and are skipped.
        """
        index_by_key = self._index_by_key()
        res: list[Intersection] = []
        for i, tile in enumerate(self.tiles):
            for a, b in tile.position.corner_pairs:
                j = index_by_key.get(a.key)
                k = index_by_key.get(b.key)
                if j is None or k is None:
                    continue
                if i < j and i < k:
                    res.append((i, j, k) if j < k else (i, k, j))
        return res

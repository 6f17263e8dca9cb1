"""Hexagonal coordinate math."""

from typing import Any

from pydantic import RootModel, TypeAdapter, model_validator


class HexCoord(RootModel[tuple[int, int]]):
    """Hex coordinate definition, using axial coordinates.

    https://www.redblobgames.com/grids/hexagons/#coordinates-axial
    """

    model_config = {"frozen": True}

    root: tuple[int, int]

    @property
    def q(self) -> int:
        """First 'q' coordinate."""
        return self.root[0]

    @property
    def r(self) -> int:
        """Second 'r' coordinate."""
        return self.root[1]

    @property
    def s(self) -> int:
        """Implied third 's' coordinate (cube form)."""
        return -(self.q + self.r)

    @property
    def key(self) -> str:
        """Stable string key for lookup tables."""
        return f"{self.q}:{self.r}"

    @model_validator(mode="before")
    @classmethod
    def _drop_third_coord(cls, data: Any) -> Any:
        """Accept cube coordinates, dropping the redundant third one."""
        if isinstance(data, (list, tuple)) and len(data) == 3:
            q, r, s = data
            if q + r + s != 0:
                raise ValueError(f"Imbalanced hex coords: sum({q}, {r}, {s}) != 0")
            return (q, r)
        return data

    # Vector operations

    def __add__(self, rhs: "HexCoord") -> "HexCoord":
        """Add this delta to a coordinate (or another delta)."""
        if isinstance(rhs, HexCoord):
            return HexCoord(root=(self.q + rhs.q, self.r + rhs.r))
        return NotImplemented

    def __sub__(self, rhs: "HexCoord") -> "HexCoord":
        """Subtract a delta from this coordinate."""
        if isinstance(rhs, HexCoord):
            return HexCoord(root=(self.q - rhs.q, self.r - rhs.r))
        return NotImplemented

    def __neg__(self) -> "HexCoord":
        """Coordinate negation."""
        return HexCoord(root=(-self.q, -self.r))

    # Neighbors

    @property
    def neighbors(self) -> list["HexCoord"]:
        """Get direct neighbors of this cell, in canonical direction order.

        https://www.redblobgames.com/grids/hexagons/#neighbors
        """
        return [self + vec for vec in HEX_UNIT_VECTORS]

    def neighbor_at(self, direction: int) -> "HexCoord":
        """Neighbor in direction `direction` (wraps around, negatives allowed)."""
        return self + HEX_UNIT_VECTORS[direction % 6]

    @property
    def corner_pairs(self) -> list[tuple["HexCoord", "HexCoord"]]:
        """For each of the 6 corners, the two other cells touching that corner.

        Corner `k` lies between the neighbors in directions `k` and `k - 1`.
        """
        return [(self.neighbor_at(k), self.neighbor_at(k - 1)) for k in range(6)]

    def get_neighborhood(self, distance: int = 1) -> list["HexCoord"]:
        """Get cells at most `distance` tiles away from self (including self).

        Ordered by `q`, then by the valid `r` range for each `q`.
        """
        N = distance
        res: list[HexCoord] = []
        for dq in range(-N, N + 1):
            for dr in range(max(-N, -dq - N), min(N, -dq + N) + 1):
                res.append(HexCoord(root=(self.q + dq, self.r + dr)))
        return res

    @property
    def vector_length(self) -> int:
        """Length of the coord as a vector (i.e. distance from center).

        https://www.redblobgames.com/grids/hexagons/#distances
        """
        return max(abs(self.q), abs(self.r), abs(self.s))

    def distance_to(self, other: "HexCoord") -> int:
        """Number of steps between two cells."""
        return (self - other).vector_length


HEX_UNIT_VECTORS = tuple(
    HexCoord(root=_tup) for _tup in [(1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1)]
)
"""Vector directions in axial coordinates: E, NE, NW, W, SW, SE."""

ORIGIN = HexCoord(root=(0, 0))

CoordLike = HexCoord | tuple[int, int] | tuple[int, int, int]
to_coord = TypeAdapter(HexCoord).validate_python

import pytest
from pydantic import ValidationError

from catan_gen.map.hexes import HEX_UNIT_VECTORS, ORIGIN, HexCoord, to_coord


def test_neighbors_canonical_order():
    assert [n.root for n in ORIGIN.neighbors] == [
        (1, 0),
        (1, -1),
        (0, -1),
        (-1, 0),
        (-1, 1),
        (0, 1),
    ]
    assert len(HEX_UNIT_VECTORS) == 6


def test_neighbors_offset_from_cell():
    cell = HexCoord(root=(2, -3))
    assert cell.neighbors[0] == HexCoord(root=(3, -3))
    assert all(n.distance_to(cell) == 1 for n in cell.neighbors)


def test_neighbor_at_wraps():
    cell = HexCoord(root=(2, -1))
    assert cell.neighbor_at(-1) == cell.neighbor_at(5)
    assert cell.neighbor_at(6) == cell.neighbor_at(0)


def test_corner_pairs_touch_each_other():
    cell = HexCoord(root=(1, 1))
    pairs = cell.corner_pairs
    assert len(pairs) == 6
    assert pairs[0] == (cell.neighbor_at(0), cell.neighbor_at(5))
    for a, b in pairs:
        assert a.distance_to(cell) == 1
        assert b.distance_to(cell) == 1
        assert a.distance_to(b) == 1


def test_cube_coordinates_are_accepted():
    assert HexCoord(root=(1, -2, 1)).root == (1, -2)
    with pytest.raises(ValidationError):
        HexCoord(root=(1, 1, 1))


def test_third_coordinate_and_key():
    cell = HexCoord(root=(-1, 2))
    assert cell.s == -1
    assert cell.key == "-1:2"


def test_vector_arithmetic():
    a = HexCoord(root=(1, 2))
    b = HexCoord(root=(-3, 1))
    assert a + b == HexCoord(root=(-2, 3))
    assert a - b == HexCoord(root=(4, 1))
    assert -a == HexCoord(root=(-1, -2))


@pytest.mark.parametrize("n", [0, 1, 2, 3, 4])
def test_neighborhood_is_hex_region(n: int):
    cells = ORIGIN.get_neighborhood(n)
    assert len(cells) == 3 * n * n + 3 * n + 1
    assert len(set(cells)) == len(cells)
    assert all(c.vector_length <= n for c in cells)


def test_neighborhood_order():
    assert [c.root for c in ORIGIN.get_neighborhood(1)] == [
        (-1, 0),
        (-1, 1),
        (0, -1),
        (0, 0),
        (0, 1),
        (1, -1),
        (1, 0),
    ]


def test_to_coord():
    assert to_coord((1, 2)) == HexCoord(root=(1, 2))
    assert to_coord((1, 2, -3)) == HexCoord(root=(1, 2))
    cell = HexCoord(root=(0, 5))
    assert to_coord(cell) == cell


def test_coords_are_hashable():
    lookup = {HexCoord(root=(0, 1)): "a"}
    assert lookup[HexCoord(root=(0, 1))] == "a"

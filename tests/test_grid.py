import numpy as np
import pytest

from tilemerge.errors import ConfigurationError, InvalidDirectionError
from tilemerge.grid import Direction, Position, build_grid
from tilemerge.tiles import Tile


def test_build_grid_creates_one_node_per_cell():
    grid = build_grid(3, 5)
    assert len(grid) == 15
    assert set(grid.nodes) == {Position(x, y) for x in range(3) for y in range(5)}


@pytest.mark.parametrize("w,h", [(0, 4), (4, 0), (-1, 3), (2.5, 2)])
def test_build_grid_rejects_bad_dimensions(w, h):
    with pytest.raises(ConfigurationError):
        build_grid(w, h)


def test_place_moves_occupancy():
    grid = build_grid(4, 4)
    tile = Tile(id=1, value=2)
    grid.place(tile, Position(0, 0))
    grid.place(tile, Position(2, 0))
    assert grid.lookup(Position(0, 0)) is None
    assert grid.lookup(Position(2, 0)) is tile
    assert tile.position == Position(2, 0)
    assert Position(0, 0) in grid.empty_nodes()
    assert len(grid.empty_nodes()) == 15


def test_place_refuses_occupied_or_outside():
    grid = build_grid(2, 2)
    grid.place(Tile(id=1, value=2), Position(0, 0))
    with pytest.raises(ValueError):
        grid.place(Tile(id=2, value=2), Position(0, 0))
    with pytest.raises(ValueError):
        grid.place(Tile(id=3, value=2), Position(2, 0))


def test_to_array_puts_highest_row_first():
    grid = build_grid(2, 3)
    grid.place(Tile(id=1, value=2), Position(0, 2))
    grid.place(Tile(id=2, value=8), Position(1, 0))
    np.testing.assert_array_equal(grid.to_array(), np.array([[2, 0], [0, 0], [0, 8]]))


def test_direction_parse():
    assert Direction.parse("left") is Direction.LEFT
    assert Direction.parse((0, 1)) is Direction.UP
    assert Direction.parse(Direction.DOWN) is Direction.DOWN
    assert Position(1, 1).shifted(Direction.RIGHT) == Position(2, 1)


@pytest.mark.parametrize("bad", [(1, 1), (2, 0), (0, 0), "sideways", 3])
def test_direction_parse_rejects_non_unit_vectors(bad):
    with pytest.raises(InvalidDirectionError):
        Direction.parse(bad)

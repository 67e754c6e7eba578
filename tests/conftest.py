from typing import Dict, Iterable, Tuple

import pytest

from tilemerge.grid import Grid, Position, build_grid
from tilemerge.tiles import Tile


class FixedRandom:
    """random() always returns ``value``; shuffle keeps the given order."""

    def __init__(self, value: float = 0.5):
        self.value = value

    def random(self) -> float:
        return self.value

    def shuffle(self, x: list) -> None:
        pass


class Board:
    def __init__(self, width: int = 4, height: int = 4):
        self.grid = build_grid(width, height)
        self.tiles: Dict[int, Tile] = {}
        self._next = 1

    def add(self, x: int, y: int, value: int) -> Tile:
        tile = Tile(id=self._next, value=value)
        self._next += 1
        self.grid.place(tile, Position(x, y))
        self.tiles[tile.id] = tile
        return tile

    def create(self, pos: Position, value: int) -> Tile:
        return self.add(pos[0], pos[1], value)

    def remove(self, tile: Tile) -> None:
        self.grid.release(tile)
        self.tiles.pop(tile.id, None)

    def values(self) -> Dict[Tuple[int, int], int]:
        return {tuple(t.position): t.value for t in self.tiles.values()}


def assert_consistent(grid: Grid, tiles: Iterable[Tile]) -> None:
    tiles = list(tiles)
    positions = [t.position for t in tiles]
    assert len(set(positions)) == len(positions)
    for t in tiles:
        assert grid.lookup(t.position) is t
    assert len(grid.occupied()) == len(tiles)


@pytest.fixture
def make_board():
    return Board


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def check_consistent():
    return assert_consistent

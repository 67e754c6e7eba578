from __future__ import annotations
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, TYPE_CHECKING

import numpy as np

from .errors import ConfigurationError, InvalidDirectionError

if TYPE_CHECKING:
    from .tiles import Tile


class Position(NamedTuple):
    x: int
    y: int

    def shifted(self, direction: "Direction") -> "Position":
        dx, dy = direction.value
        return Position(self.x + dx, self.y + dy)


class Direction(Enum):
    # y grows upwards: UP moves towards the top edge
    UP = (0, 1)
    RIGHT = (1, 0)
    DOWN = (0, -1)
    LEFT = (-1, 0)

    @property
    def vector(self) -> Position:
        return Position(*self.value)

    @classmethod
    def parse(cls, value) -> "Direction":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        else:
            try:
                return cls(tuple(value))
            except (TypeError, ValueError):
                pass
        raise InvalidDirectionError(f"not an axis-aligned unit direction: {value!r}")


class Grid:
    """
    Rectangular board of nodes.

    Occupancy is a single map position -> tile; tiles only carry their
    coordinate, so there is no node <-> tile reference cycle.
    """

    def __init__(self, width: int, height: int):
        if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
            raise ConfigurationError(f"grid dimensions must be positive integers, got {width}x{height}")
        self.width = width
        self.height = height
        self.nodes: List[Position] = [Position(x, y) for x in range(width) for y in range(height)]
        self._occupants: Dict[Position, "Tile"] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.nodes)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos[0] < self.width and 0 <= pos[1] < self.height

    def lookup(self, pos: Position) -> Optional["Tile"]:
        return self._occupants.get(Position(*pos))

    def empty_nodes(self) -> List[Position]:
        return [p for p in self.nodes if p not in self._occupants]

    def occupied(self) -> Dict[Position, "Tile"]:
        return dict(self._occupants)

    def place(self, tile: "Tile", pos: Position) -> None:
        """Move ``tile`` onto ``pos``, releasing the node it occupied before."""
        pos = Position(*pos)
        if not self.in_bounds(pos):
            raise ValueError(f"{pos} is outside a {self.width}x{self.height} grid")
        current = self._occupants.get(pos)
        if current is not None and current is not tile:
            raise ValueError(f"{pos} is already occupied by tile {current.id}")
        if tile.position is not None and self._occupants.get(tile.position) is tile:
            del self._occupants[tile.position]
        tile.position = pos
        self._occupants[pos] = tile

    def release(self, tile: "Tile") -> None:
        if tile.position is not None and self._occupants.get(tile.position) is tile:
            del self._occupants[tile.position]

    def to_array(self) -> np.ndarray:
        # row 0 is the top edge (highest y)
        board = np.zeros((self.height, self.width), dtype=np.int64)
        for pos, tile in self._occupants.items():
            board[self.height - 1 - pos.y, pos.x] = tile.value
        return board


def build_grid(width: int, height: int) -> Grid:
    return Grid(width, height)

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ConfigurationError
from .grid import Position


Color = Tuple[int, int, int]

TILE_TEXT_COLOR_DARK: Color = (119, 110, 101)
TILE_TEXT_COLOR_LIGHT: Color = (249, 246, 242)


@dataclass(frozen=True)
class TileType:
    value: int
    color: Color
    text_color: Color = TILE_TEXT_COLOR_DARK


@dataclass(eq=False)
class Tile:
    """A live tile. Identity matters: a merge destroys two tiles and creates a third."""
    id: int
    value: int
    position: Optional[Position] = None

    def can_merge(self, value: int) -> bool:
        return self.value == value

    def __repr__(self) -> str:
        return f"Tile(id={self.id}, value={self.value}, position={self.position})"


class TileTypeRegistry:
    def __init__(self, types: Iterable[TileType]):
        self._types: Dict[int, TileType] = {}
        for t in types:
            if t.value in self._types:
                raise ConfigurationError(f"duplicate tile type for value {t.value}")
            self._types[t.value] = t

    def __contains__(self, value: int) -> bool:
        return value in self._types

    def __len__(self) -> int:
        return len(self._types)

    def values(self) -> List[int]:
        return sorted(self._types)

    def lookup(self, value: int) -> TileType:
        try:
            return self._types[value]
        except KeyError:
            raise ConfigurationError(f"no tile type configured for value {value}") from None

    def missing(self, values: Iterable[int]) -> List[int]:
        return [v for v in values if v not in self._types]


def is_tile_value(value: int) -> bool:
    # 2 * 2^k, k >= 0
    return isinstance(value, int) and value >= 2 and value & (value - 1) == 0

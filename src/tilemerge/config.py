from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .errors import ConfigurationError
from .tiles import TILE_TEXT_COLOR_DARK, TILE_TEXT_COLOR_LIGHT, TileType, TileTypeRegistry, is_tile_value


TILE_COLORS: Dict[int, Tuple[int, int, int]] = {
    2: (238, 228, 218),
    4: (237, 224, 200),
    8: (242, 177, 121),
    16: (245, 149, 99),
    32: (246, 124, 95),
    64: (246, 94, 59),
    128: (237, 207, 114),
    256: (237, 204, 97),
    512: (237, 200, 80),
    1024: (237, 197, 63),
    2048: (237, 194, 46),
}

DEFAULT_TILE_TYPES: Tuple[TileType, ...] = tuple(
    TileType(value, color, TILE_TEXT_COLOR_DARK if value <= 4 else TILE_TEXT_COLOR_LIGHT)
    for value, color in TILE_COLORS.items()
)


def producible_values(win_condition: int) -> List[int]:
    """Every value a tile can hold before the game reaches ``win_condition``."""
    values = []
    v = 2
    while v <= win_condition:
        values.append(v)
        v *= 2
    return values


@dataclass(frozen=True)
class LevelConfig:
    width: int = 4
    height: int = 4
    win_condition: int = 2048
    travel_time: float = 0.2
    tile_types: Tuple[TileType, ...] = field(default=DEFAULT_TILE_TYPES)
    # a uniform draw strictly above this spawns a 4
    four_threshold: float = 0.8
    skip_spawn_on_noop: bool = False

    def validate(self) -> TileTypeRegistry:
        """Check the configuration and return its tile type registry."""
        for name in ("width", "height"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or v <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {v!r}")
        if not is_tile_value(self.win_condition) or self.win_condition < 4:
            raise ConfigurationError(f"win_condition must be a power of two >= 4, got {self.win_condition!r}")
        if self.travel_time < 0:
            raise ConfigurationError(f"travel_time must be >= 0, got {self.travel_time!r}")
        if not 0.0 <= self.four_threshold <= 1.0:
            raise ConfigurationError(f"four_threshold must lie in [0, 1], got {self.four_threshold!r}")

        registry = TileTypeRegistry(self.tile_types)
        missing = registry.missing(producible_values(self.win_condition))
        if missing:
            raise ConfigurationError(
                f"tile types missing for values {missing} (win_condition={self.win_condition})"
            )
        return registry
